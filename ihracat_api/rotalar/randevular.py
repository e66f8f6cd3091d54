# ihracat_api/rotalar/randevular.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging
from .. import modeller, veritabani
from ..api_servisler import RandevuService
from ..api_yardimcilar import http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/randevular", tags=["Randevu Talepleri"])

@router.post("/", response_model=modeller.RandevuTalebiRead, status_code=status.HTTP_201_CREATED)
def create_randevu_talebi(talep: modeller.RandevuTalebiCreate, db: Session = Depends(veritabani.get_db)):
    try:
        return RandevuService(db).talep_olustur(talep)
    except KayitBulunamadiHatasi as e:
        raise http_hatasina_cevir(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Randevu talebi oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Randevu talebi oluşturulurken veritabanı hatası oluştu.")

@router.get("/", response_model=List[modeller.RandevuTalebiRead])
def read_randevu_talepleri(durum: Optional[modeller.OnayDurumEnum] = None, db: Session = Depends(veritabani.get_db)):
    return RandevuService(db).listele(durum=durum)

@router.get("/istatistikler", response_model=modeller.RandevuIstatistikleri)
def read_randevu_istatistikleri(db: Session = Depends(veritabani.get_db)):
    return RandevuService(db).istatistikler()

@router.get("/personel", response_model=List[modeller.KullaniciRead])
def read_randevu_personeli(db: Session = Depends(veritabani.get_db)):
    return RandevuService(db).personel_listesi()

@router.get("/firma/{firma_id}", response_model=List[modeller.RandevuTalebiRead])
def read_firma_randevulari(firma_id: int, db: Session = Depends(veritabani.get_db)):
    return RandevuService(db).listele(firma_id=firma_id)

@router.put("/{talep_id}", response_model=modeller.RandevuTalebiRead)
def update_randevu_talebi(talep_id: int, talep_update: modeller.RandevuTalebiUpdate, db: Session = Depends(veritabani.get_db)):
    try:
        return RandevuService(db).guncelle(talep_id, talep_update)
    except (KayitBulunamadiHatasi, ValueError) as e:
        raise http_hatasina_cevir(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Randevu talebi {talep_id} güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Randevu talebi güncellenirken veritabanı hatası oluştu.")

@router.delete("/{talep_id}", response_model=modeller.MesajYanit)
def delete_randevu_talebi(talep_id: int, db: Session = Depends(veritabani.get_db)):
    db_talep = db.query(modeller.RandevuTalebi).filter(modeller.RandevuTalebi.id == talep_id).first()
    if not db_talep:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Randevu talebi bulunamadı")
    db.delete(db_talep)
    db.commit()
    logger.info(f"Randevu talebi silindi: ID {talep_id}")
    return {"message": "Randevu talebi başarıyla silindi."}
