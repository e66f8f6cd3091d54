# ihracat_api/rotalar/haberler.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_, func
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import datetime
import logging
from .. import modeller, veritabani

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/haberler", tags=["Haberler"])

def _haber_getir(db: Session, haber_id: int) -> modeller.Haber:
    db_haber = db.query(modeller.Haber).filter(modeller.Haber.id == haber_id).first()
    if not db_haber:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Haber bulunamadı")
    return db_haber

@router.post("/", response_model=modeller.HaberRead, status_code=status.HTTP_201_CREATED)
def create_haber(haber: modeller.HaberCreate, db: Session = Depends(veritabani.get_db)):
    try:
        veri = haber.model_dump(mode="json", exclude={"yayin_tarihi"})
        db_haber = modeller.Haber(**veri, yayin_tarihi=haber.yayin_tarihi or datetime.now())
        db.add(db_haber)
        db.commit()
        db.refresh(db_haber)
        logger.info(f"Haber oluşturuldu: ID {db_haber.id}")
        return db_haber
    except Exception as e:
        db.rollback()
        logger.error(f"Haber oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Haber oluşturulurken bir hata oluştu.")

@router.get("/", response_model=List[modeller.HaberRead])
def read_haberler(
    durum: Optional[modeller.HaberDurumEnum] = None,
    haber_turu: Optional[modeller.HaberTuruEnum] = None,
    arama: Optional[str] = None,
    db: Session = Depends(veritabani.get_db)
):
    query = db.query(modeller.Haber)
    if durum is not None:
        query = query.filter(modeller.Haber.durum == durum.value)
    if haber_turu is not None:
        query = query.filter(modeller.Haber.haber_turu == haber_turu.value)
    if arama:
        query = query.filter(or_(
            modeller.Haber.baslik.ilike(f"%{arama}%"),
            modeller.Haber.kisa_aciklama.ilike(f"%{arama}%")
        ))
    return query.order_by(modeller.Haber.created_at.desc(), modeller.Haber.id.desc()).all()

@router.get("/yayinda", response_model=List[modeller.HaberRead])
def read_yayindaki_haberler(limit: int = 50, db: Session = Depends(veritabani.get_db)):
    return db.query(modeller.Haber).filter(
        modeller.Haber.durum == modeller.HaberDurumEnum.YAYINDA.value
    ).order_by(modeller.Haber.yayin_tarihi.desc(), modeller.Haber.id.desc()).limit(limit).all()

@router.get("/istatistikler", response_model=modeller.HaberIstatistikleri)
def read_haber_istatistikleri(db: Session = Depends(veritabani.get_db)):
    ay_basi = datetime.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    try:
        durum_sayilari = dict(db.query(modeller.Haber.durum, func.count(modeller.Haber.id)).group_by(modeller.Haber.durum).all())
        bu_ay = db.query(func.count(modeller.Haber.id)).filter(modeller.Haber.created_at >= ay_basi).scalar() or 0
    except SQLAlchemyError as e:
        logger.error(f"Haber istatistikleri okunurken hata: {e}", exc_info=True)
        return modeller.HaberIstatistikleri()
    return modeller.HaberIstatistikleri(
        toplam=sum(durum_sayilari.values()),
        yayinda=durum_sayilari.get(modeller.HaberDurumEnum.YAYINDA.value, 0),
        taslak=durum_sayilari.get(modeller.HaberDurumEnum.TASLAK.value, 0),
        bu_ay=bu_ay,
    )

@router.get("/{haber_id}", response_model=modeller.HaberRead)
def read_haber(haber_id: int, db: Session = Depends(veritabani.get_db)):
    return _haber_getir(db, haber_id)

@router.put("/{haber_id}", response_model=modeller.HaberRead)
def update_haber(haber_id: int, haber_update: modeller.HaberUpdate, db: Session = Depends(veritabani.get_db)):
    db_haber = _haber_getir(db, haber_id)
    for key, value in haber_update.model_dump(exclude_unset=True).items():
        setattr(db_haber, key, value.value if hasattr(value, "value") else value)
    try:
        db.commit()
        db.refresh(db_haber)
        logger.info(f"Haber güncellendi: ID {haber_id}")
        return db_haber
    except Exception as e:
        db.rollback()
        logger.error(f"Haber güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Haber güncellenirken bir hata oluştu.")

@router.delete("/{haber_id}", response_model=modeller.MesajYanit)
def delete_haber(haber_id: int, db: Session = Depends(veritabani.get_db)):
    db_haber = _haber_getir(db, haber_id)
    db.delete(db_haber)
    db.commit()
    logger.info(f"Haber silindi: ID {haber_id}")
    return {"message": "Haber başarıyla silindi."}

@router.post("/{haber_id}/okundu", response_model=modeller.HaberRead)
def mark_haber_okundu(haber_id: int, db: Session = Depends(veritabani.get_db)):
    db_haber = _haber_getir(db, haber_id)
    db_haber.okunma_sayisi = (db_haber.okunma_sayisi or 0) + 1
    db.commit()
    db.refresh(db_haber)
    return db_haber
