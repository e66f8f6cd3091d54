# ihracat_api/rotalar/firmalar.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging
from .. import modeller, veritabani
from ..api_servisler import IlerlemeHesaplamaService, EgitimService, aktif_firma_getir
from ..api_yardimcilar import http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/firmalar", tags=["Firmalar"])

def _firma_getir(db: Session, firma_id: int) -> modeller.Firma:
    try:
        return aktif_firma_getir(db, firma_id)
    except KayitBulunamadiHatasi as e:
        raise http_hatasina_cevir(e)

@router.post("/", response_model=modeller.FirmaRead, status_code=status.HTTP_201_CREATED)
def create_firma(firma: modeller.FirmaCreate, db: Session = Depends(veritabani.get_db)):
    try:
        db_firma = modeller.Firma(**firma.model_dump(mode="json"))
        db.add(db_firma)
        db.commit()
        db.refresh(db_firma)
        logger.info(f"Firma oluşturuldu: ID {db_firma.id}, {db_firma.firma_adi}")
        return db_firma
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bu isimde bir firma zaten mevcut.")
    except Exception as e:
        db.rollback()
        logger.error(f"Firma oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Firma oluşturulurken beklenmedik hata: {str(e)}")

@router.get("/", response_model=modeller.FirmaListResponse)
def read_firmalar(
    skip: int = 0,
    limit: int = 100,
    arama: Optional[str] = None,
    durum: Optional[modeller.KayitDurumEnum] = None,
    db: Session = Depends(veritabani.get_db)
):
    query = db.query(modeller.Firma)

    if arama:
        query = query.filter(or_(
            modeller.Firma.firma_adi.ilike(f"%{arama}%"),
            modeller.Firma.yetkili_adi.ilike(f"%{arama}%"),
            modeller.Firma.sektor.ilike(f"%{arama}%")
        ))

    if durum is not None:
        query = query.filter(modeller.Firma.durum == durum.value)
    else:
        query = query.filter(modeller.Firma.durum != modeller.KayitDurumEnum.SILINDI.value)

    total_count = query.count()
    firmalar = query.order_by(modeller.Firma.firma_adi).offset(skip).limit(limit).all()
    return {"items": firmalar, "total": total_count}

@router.get("/{firma_id}", response_model=modeller.FirmaRead)
def read_firma(firma_id: int, db: Session = Depends(veritabani.get_db)):
    return _firma_getir(db, firma_id)

@router.put("/{firma_id}", response_model=modeller.FirmaRead)
def update_firma(firma_id: int, firma_update: modeller.FirmaUpdate, db: Session = Depends(veritabani.get_db)):
    db_firma = _firma_getir(db, firma_id)

    for key, value in firma_update.model_dump(exclude_unset=True, mode="json").items():
        setattr(db_firma, key, value)

    try:
        db.commit()
        db.refresh(db_firma)
        logger.info(f"Firma güncellendi: ID {firma_id}")
        return db_firma
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bu isimde bir firma zaten mevcut.")
    except Exception as e:
        db.rollback()
        logger.error(f"Firma güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Firma güncellenirken bir hata oluştu.")

@router.delete("/{firma_id}", response_model=modeller.MesajYanit)
def delete_firma(firma_id: int, db: Session = Depends(veritabani.get_db)):
    db_firma = _firma_getir(db, firma_id)
    db_firma.durum = modeller.KayitDurumEnum.SILINDI.value
    db.commit()
    logger.info(f"Firma silindi olarak işaretlendi: ID {firma_id}")
    return {"message": "Firma başarıyla silindi."}

# --- FİRMA HİZMETLERİ ---
@router.post("/{firma_id}/hizmetler", response_model=modeller.FirmaHizmetiRead, status_code=status.HTTP_201_CREATED)
def create_firma_hizmeti(firma_id: int, hizmet: modeller.FirmaHizmetiCreate, db: Session = Depends(veritabani.get_db)):
    _firma_getir(db, firma_id)
    try:
        db_hizmet = modeller.FirmaHizmeti(**hizmet.model_dump(mode="json"), firma_id=firma_id)
        db.add(db_hizmet)
        db.commit()
        db.refresh(db_hizmet)
        logger.info(f"Firma {firma_id} için hizmet eklendi: ID {db_hizmet.id}")
        return db_hizmet
    except Exception as e:
        db.rollback()
        logger.error(f"Firma hizmeti eklenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Firma hizmeti eklenirken bir hata oluştu.")

@router.get("/{firma_id}/hizmetler", response_model=List[modeller.FirmaHizmetiRead])
def read_firma_hizmetleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    _firma_getir(db, firma_id)
    return db.query(modeller.FirmaHizmeti).filter(modeller.FirmaHizmeti.firma_id == firma_id).order_by(modeller.FirmaHizmeti.id).all()

def _hizmet_getir(db: Session, firma_id: int, hizmet_id: int) -> modeller.FirmaHizmeti:
    db_hizmet = db.query(modeller.FirmaHizmeti).filter(
        modeller.FirmaHizmeti.id == hizmet_id,
        modeller.FirmaHizmeti.firma_id == firma_id
    ).first()
    if not db_hizmet:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Firma hizmeti bulunamadı")
    return db_hizmet

@router.put("/{firma_id}/hizmetler/{hizmet_id}", response_model=modeller.FirmaHizmetiRead)
def update_firma_hizmeti(
    firma_id: int,
    hizmet_id: int,
    hizmet_update: modeller.FirmaHizmetiUpdate,
    db: Session = Depends(veritabani.get_db)
):
    db_hizmet = _hizmet_getir(db, firma_id, hizmet_id)
    for key, value in hizmet_update.model_dump(exclude_unset=True, mode="json").items():
        setattr(db_hizmet, key, value)
    try:
        db.commit()
        db.refresh(db_hizmet)
        logger.info(f"Firma hizmeti güncellendi: ID {hizmet_id}")
        return db_hizmet
    except Exception as e:
        db.rollback()
        logger.error(f"Firma hizmeti güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Firma hizmeti güncellenirken bir hata oluştu.")

@router.delete("/{firma_id}/hizmetler/{hizmet_id}", response_model=modeller.MesajYanit)
def delete_firma_hizmeti(firma_id: int, hizmet_id: int, db: Session = Depends(veritabani.get_db)):
    db_hizmet = _hizmet_getir(db, firma_id, hizmet_id)
    db.delete(db_hizmet)
    db.commit()
    logger.info(f"Firma hizmeti silindi: ID {hizmet_id}")
    return {"message": "Firma hizmeti başarıyla silindi."}

@router.get("/{firma_id}/ilerleme", response_model=modeller.FirmaIlerlemeYanit)
def read_firma_ilerleme(firma_id: int, db: Session = Depends(veritabani.get_db)):
    _firma_getir(db, firma_id)
    ilerleme_servisi = IlerlemeHesaplamaService(db)
    return modeller.FirmaIlerlemeYanit(
        firma_id=firma_id,
        genel_ilerleme=ilerleme_servisi.genel_ilerleme(firma_id),
        hizmetler=ilerleme_servisi.hizmet_ilerlemesi(firma_id),
        egitim=EgitimService(db).firma_ilerlemesi(firma_id),
    )
