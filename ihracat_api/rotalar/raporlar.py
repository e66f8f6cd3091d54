# ihracat_api/rotalar/raporlar.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from datetime import datetime
import logging
import openpyxl
import os
from .. import modeller, veritabani
from ..api_servisler import RaporService
from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/raporlar", tags=["Raporlar"])

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

@router.get("/dashboard_ozet", response_model=modeller.DashboardOzeti)
def get_dashboard_ozet_endpoint(db: Session = Depends(veritabani.get_db)):
    return RaporService(db).dashboard_ozeti()

@router.get("/firma_ilerleme_excel")
def export_firma_ilerleme_excel(db: Session = Depends(veritabani.get_db)):
    try:
        satirlar = RaporService(db).firma_ilerleme_satirlari()

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Firma İlerleme Raporu"

        headers = ["Firma Adı", "Sektör", "Görev İlerlemesi (%)", "Hizmet Ortalaması (%)", "Eğitim İlerlemesi (%)"]
        ws.append(headers)
        for satir in satirlar:
            ws.append([
                satir["firma_adi"], satir["sektor"], satir["gorev_ilerlemesi"],
                satir["hizmet_ortalamasi"], satir["egitim_ilerlemesi"]
            ])

        os.makedirs(settings.REPORTS_DIR, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"firma_ilerleme_raporu_{timestamp}.xlsx"
        filepath = os.path.join(settings.REPORTS_DIR, filename)
        wb.save(filepath)
        logger.info(f"Firma ilerleme raporu oluşturuldu: {filepath} ({len(satirlar)} firma)")
        return FileResponse(filepath, media_type=EXCEL_MEDIA_TYPE, filename=filename)
    except Exception as e:
        logger.error(f"Firma ilerleme raporu oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Rapor oluşturulurken beklenmedik hata: {str(e)}")
