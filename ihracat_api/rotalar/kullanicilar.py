# ihracat_api/rotalar/kullanicilar.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging
from .. import modeller, veritabani

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kullanicilar", tags=["Personel Yönetimi"])

@router.post("/", response_model=modeller.KullaniciRead, status_code=status.HTTP_201_CREATED)
def create_personel(personel: modeller.KullaniciCreate, db: Session = Depends(veritabani.get_db)):
    try:
        db_kullanici = modeller.Kullanici(**personel.model_dump(mode="json"))
        db.add(db_kullanici)
        db.commit()
        db.refresh(db_kullanici)
        logger.info(f"Personel oluşturuldu: ID {db_kullanici.id}")
        return db_kullanici
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bu e-posta adresi zaten kayıtlı.")

@router.get("/", response_model=List[modeller.KullaniciRead])
def read_personeller(durum: Optional[modeller.KayitDurumEnum] = None, db: Session = Depends(veritabani.get_db)):
    query = db.query(modeller.Kullanici)
    if durum is not None:
        query = query.filter(modeller.Kullanici.durum == durum.value)
    return query.order_by(modeller.Kullanici.ad_soyad).all()

@router.put("/{personel_id}", response_model=modeller.KullaniciRead)
def update_personel(personel_id: int, personel: modeller.KullaniciUpdate, db: Session = Depends(veritabani.get_db)):
    db_kullanici = db.query(modeller.Kullanici).filter(modeller.Kullanici.id == personel_id).first()
    if not db_kullanici:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Personel bulunamadı")

    for key, value in personel.model_dump(exclude_unset=True, mode="json").items():
        setattr(db_kullanici, key, value)
    try:
        db.commit()
        db.refresh(db_kullanici)
        logger.info(f"Personel güncellendi: ID {personel_id}")
        return db_kullanici
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bu e-posta adresi zaten kayıtlı.")
