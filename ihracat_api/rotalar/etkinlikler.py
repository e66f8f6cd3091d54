# ihracat_api/rotalar/etkinlikler.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
import logging
from .. import modeller, veritabani
from ..api_servisler import aktif_firma_getir
from ..api_yardimcilar import firma_listesinde_mi, http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/etkinlikler", tags=["Etkinlikler"])

AKTIF = modeller.KayitDurumEnum.AKTIF.value

def _etkinlik_getir(db: Session, etkinlik_id: int) -> modeller.Etkinlik:
    db_etkinlik = db.query(modeller.Etkinlik).filter(modeller.Etkinlik.id == etkinlik_id).first()
    if not db_etkinlik:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Etkinlik bulunamadı")
    return db_etkinlik

def _etkinlikleri_oku(db: Session, etkinlikler: List[modeller.Etkinlik]) -> List[modeller.EtkinlikRead]:
    idler = [e.id for e in etkinlikler]
    sayilar = dict(db.query(modeller.EtkinlikKatilimcisi.etkinlik_id, func.count(modeller.EtkinlikKatilimcisi.id)).filter(
        modeller.EtkinlikKatilimcisi.etkinlik_id.in_(idler)
    ).group_by(modeller.EtkinlikKatilimcisi.etkinlik_id).all()) if idler else {}
    sonuc = []
    for e in etkinlikler:
        okunan = modeller.EtkinlikRead.model_validate(e, from_attributes=True)
        okunan.hedef_firmalar = e.hedef_firmalar or []
        okunan.katilimci_sayisi = sayilar.get(e.id, 0)
        sonuc.append(okunan)
    return sonuc

def _firmaya_acik_mi(etkinlik: modeller.Etkinlik, firma_id: int) -> bool:
    # Hedef listesi boşsa etkinlik herkese açıktır
    return not etkinlik.hedef_firmalar or firma_listesinde_mi(etkinlik.hedef_firmalar, firma_id)

@router.post("/", response_model=modeller.EtkinlikRead, status_code=status.HTTP_201_CREATED)
def create_etkinlik(etkinlik: modeller.EtkinlikCreate, db: Session = Depends(veritabani.get_db)):
    try:
        db_etkinlik = modeller.Etkinlik(**etkinlik.model_dump(mode="json", exclude={"etkinlik_tarihi"}),
                                        etkinlik_tarihi=etkinlik.etkinlik_tarihi)
        db.add(db_etkinlik)
        db.commit()
        db.refresh(db_etkinlik)
        logger.info(f"Etkinlik oluşturuldu: ID {db_etkinlik.id}")
        return _etkinlikleri_oku(db, [db_etkinlik])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Etkinlik oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Etkinlik oluşturulurken bir hata oluştu.")

@router.get("/", response_model=List[modeller.EtkinlikRead])
def read_etkinlikler(durum: Optional[modeller.KayitDurumEnum] = None, db: Session = Depends(veritabani.get_db)):
    query = db.query(modeller.Etkinlik)
    if durum is not None:
        query = query.filter(modeller.Etkinlik.durum == durum.value)
    return _etkinlikleri_oku(db, query.order_by(modeller.Etkinlik.etkinlik_tarihi.desc(), modeller.Etkinlik.id.desc()).all())

@router.get("/firma/{firma_id}", response_model=List[modeller.EtkinlikRead])
def read_firma_etkinlikleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    etkinlikler = db.query(modeller.Etkinlik).filter(modeller.Etkinlik.durum == AKTIF).order_by(
        modeller.Etkinlik.etkinlik_tarihi, modeller.Etkinlik.etkinlik_saati, modeller.Etkinlik.id
    ).all()
    return _etkinlikleri_oku(db, [e for e in etkinlikler if _firmaya_acik_mi(e, firma_id)])

@router.get("/firma/{firma_id}/katilimlar", response_model=List[modeller.KatilimRead])
def read_firma_katilimlari(firma_id: int, db: Session = Depends(veritabani.get_db)):
    katilimlar = db.query(modeller.EtkinlikKatilimcisi).filter(
        modeller.EtkinlikKatilimcisi.firma_id == firma_id
    ).order_by(modeller.EtkinlikKatilimcisi.katilim_tarihi.desc()).all()
    sonuc = []
    for k in katilimlar:
        etkinlik = k.etkinlik
        sonuc.append(modeller.KatilimRead(
            id=k.id,
            etkinlik_id=k.etkinlik_id,
            firma_id=k.firma_id,
            katilim_durumu=k.katilim_durumu,
            katilim_tarihi=k.katilim_tarihi,
            etkinlik_adi=etkinlik.etkinlik_adi if etkinlik else "Bilinmeyen Etkinlik",
            etkinlik_tarihi=etkinlik.etkinlik_tarihi if etkinlik else None,
            etkinlik_saati=(etkinlik.etkinlik_saati if etkinlik else None) or "00:00",
            konum=(etkinlik.konum if etkinlik else None) or "Online",
            kategori=(etkinlik.kategori if etkinlik else None) or "Genel",
        ))
    return sonuc

@router.get("/{etkinlik_id}", response_model=modeller.EtkinlikRead)
def read_etkinlik(etkinlik_id: int, db: Session = Depends(veritabani.get_db)):
    return _etkinlikleri_oku(db, [_etkinlik_getir(db, etkinlik_id)])[0]

@router.put("/{etkinlik_id}", response_model=modeller.EtkinlikRead)
def update_etkinlik(etkinlik_id: int, etkinlik_update: modeller.EtkinlikUpdate, db: Session = Depends(veritabani.get_db)):
    db_etkinlik = _etkinlik_getir(db, etkinlik_id)
    for key, value in etkinlik_update.model_dump(exclude_unset=True).items():
        setattr(db_etkinlik, key, value.value if hasattr(value, "value") else value)
    try:
        db.commit()
        db.refresh(db_etkinlik)
        logger.info(f"Etkinlik güncellendi: ID {etkinlik_id}")
        return _etkinlikleri_oku(db, [db_etkinlik])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Etkinlik güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Etkinlik güncellenirken bir hata oluştu.")

@router.delete("/{etkinlik_id}", response_model=modeller.MesajYanit)
def delete_etkinlik(etkinlik_id: int, db: Session = Depends(veritabani.get_db)):
    db_etkinlik = _etkinlik_getir(db, etkinlik_id)
    db.delete(db_etkinlik)
    db.commit()
    logger.info(f"Etkinlik silindi: ID {etkinlik_id}")
    return {"message": "Etkinlik başarıyla silindi."}

@router.post("/{etkinlik_id}/katil", response_model=modeller.KatilimRead)
def join_etkinlik(etkinlik_id: int, istek: modeller.KatilimIstegi, db: Session = Depends(veritabani.get_db)):
    db_etkinlik = _etkinlik_getir(db, etkinlik_id)
    try:
        aktif_firma_getir(db, istek.firma_id)
    except KayitBulunamadiHatasi as e:
        raise http_hatasina_cevir(e)

    mevcut = db.query(modeller.EtkinlikKatilimcisi).filter(
        modeller.EtkinlikKatilimcisi.etkinlik_id == etkinlik_id,
        modeller.EtkinlikKatilimcisi.firma_id == istek.firma_id
    ).first()

    if not mevcut:
        if not _firmaya_acik_mi(db_etkinlik, istek.firma_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Bu etkinlik firmanıza açık değil.")
        if db_etkinlik.durum != AKTIF:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Etkinlik aktif değil.")
        if db_etkinlik.kontenjan:
            katilimci_sayisi = db.query(func.count(modeller.EtkinlikKatilimcisi.id)).filter(
                modeller.EtkinlikKatilimcisi.etkinlik_id == etkinlik_id
            ).scalar() or 0
            if katilimci_sayisi >= db_etkinlik.kontenjan:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Etkinlik kontenjanı dolu.")
        mevcut = modeller.EtkinlikKatilimcisi(etkinlik_id=etkinlik_id, firma_id=istek.firma_id)
        db.add(mevcut)
        db.commit()
        db.refresh(mevcut)
        logger.info(f"Firma {istek.firma_id} etkinliğe katıldı: etkinlik {etkinlik_id}")

    return modeller.KatilimRead(
        id=mevcut.id,
        etkinlik_id=etkinlik_id,
        firma_id=istek.firma_id,
        katilim_durumu=mevcut.katilim_durumu,
        katilim_tarihi=mevcut.katilim_tarihi,
        etkinlik_adi=db_etkinlik.etkinlik_adi,
        etkinlik_tarihi=db_etkinlik.etkinlik_tarihi,
        etkinlik_saati=db_etkinlik.etkinlik_saati or "00:00",
        konum=db_etkinlik.konum or "Online",
        kategori=db_etkinlik.kategori or "Genel",
    )
