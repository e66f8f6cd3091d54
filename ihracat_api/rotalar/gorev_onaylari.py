# ihracat_api/rotalar/gorev_onaylari.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
from .. import modeller, veritabani
from ..api_servisler import GorevTamamlamaService
from ..api_yardimcilar import http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gorev-onaylari", tags=["Görev Onayları"])

@router.post("/", response_model=modeller.GorevTamamlamaTalebiRead, status_code=status.HTTP_201_CREATED)
def create_tamamlama_talebi(talep: modeller.GorevTamamlamaTalebiCreate, db: Session = Depends(veritabani.get_db)):
    try:
        return GorevTamamlamaService(db).talep_olustur(talep)
    except (KayitBulunamadiHatasi, ValueError) as e:
        raise http_hatasina_cevir(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Görev tamamlama talebi oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Talep oluşturulurken veritabanı hatası oluştu.")

@router.get("/bekleyenler", response_model=List[modeller.GorevTamamlamaTalebiRead])
def read_bekleyen_talepler(db: Session = Depends(veritabani.get_db)):
    return GorevTamamlamaService(db).bekleyen_talepler()

@router.get("/firma/{firma_id}", response_model=List[modeller.GorevTamamlamaTalebiRead])
def read_firma_talepleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    return GorevTamamlamaService(db).firma_talepleri(firma_id)

@router.get("/{talep_id}", response_model=modeller.GorevTamamlamaTalebiRead)
def read_tamamlama_talebi(talep_id: int, db: Session = Depends(veritabani.get_db)):
    try:
        return GorevTamamlamaService(db).talep_detayi(talep_id)
    except KayitBulunamadiHatasi as e:
        raise http_hatasina_cevir(e)

@router.put("/{talep_id}/karar", response_model=modeller.GorevTamamlamaTalebiRead)
def decide_tamamlama_talebi(talep_id: int, karar: modeller.GorevTamamlamaKarar, db: Session = Depends(veritabani.get_db)):
    """
    Admin kararını uygular. Onay, ilgili görevi aynı işlemde 'Tamamlandı' yapar;
    red için admin notu zorunludur ve görev değişmez.
    """
    try:
        return GorevTamamlamaService(db).karar_ver(talep_id, karar)
    except (KayitBulunamadiHatasi, ValueError) as e:
        raise http_hatasina_cevir(e)
    except SQLAlchemyError as e:
        logger.error(f"Talep {talep_id} kararı kaydedilirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Karar kaydedilirken veritabanı hatası oluştu.")
