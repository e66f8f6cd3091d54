# ihracat_api/rotalar/projeler.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
import logging
from .. import modeller, veritabani
from ..api_servisler import IlerlemeHesaplamaService, firma_adlari_sozlugu
from ..api_yardimcilar import firma_listesinde_mi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projeler", tags=["Projeler"])

SILINDI = modeller.KayitDurumEnum.SILINDI.value

def _tarih_araligini_dogrula(kayit) -> None:
    # Kısmi güncellemeden sonra birleşik değerler üzerinde tekrar kontrol
    if kayit.baslangic_tarihi and kayit.bitis_tarihi and kayit.bitis_tarihi < kayit.baslangic_tarihi:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bitiş tarihi başlangıç tarihinden önce olamaz.")

def _proje_getir(db: Session, proje_id: int) -> modeller.Proje:
    db_proje = db.query(modeller.Proje).filter(modeller.Proje.id == proje_id, modeller.Proje.durum != SILINDI).first()
    if not db_proje:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Proje bulunamadı")
    return db_proje

def _projeleri_oku(db: Session, projeler: List[modeller.Proje]) -> List[modeller.ProjeRead]:
    proje_idleri = [p.id for p in projeler]
    alt_sayilari, gorev_sayilari = {}, {}
    if proje_idleri:
        alt_sayilari = dict(db.query(modeller.AltProje.proje_id, func.count(modeller.AltProje.id)).filter(
            modeller.AltProje.proje_id.in_(proje_idleri), modeller.AltProje.durum != SILINDI
        ).group_by(modeller.AltProje.proje_id).all())
        gorev_sayilari = dict(db.query(modeller.Gorev.proje_id, func.count(modeller.Gorev.id)).filter(
            modeller.Gorev.proje_id.in_(proje_idleri), modeller.Gorev.durum != SILINDI
        ).group_by(modeller.Gorev.proje_id).all())
    firma_adlari = firma_adlari_sozlugu(db, {f for p in projeler for f in (p.hedef_firmalar or [])})

    sonuc = []
    for p in projeler:
        proje_read = modeller.ProjeRead.model_validate(p, from_attributes=True)
        proje_read.hedef_firmalar = p.hedef_firmalar or []
        proje_read.alt_proje_sayisi = alt_sayilari.get(p.id, 0)
        proje_read.gorev_sayisi = gorev_sayilari.get(p.id, 0)
        adlar = [firma_adlari[int(f)] for f in (p.hedef_firmalar or []) if str(f).isdigit() and int(f) in firma_adlari]
        proje_read.atanan_firma_adlari = ", ".join(adlar) if adlar else "Atanmamış"
        sonuc.append(proje_read)
    return sonuc

# --- PROJELER ---
@router.post("/", response_model=modeller.ProjeRead, status_code=status.HTTP_201_CREATED)
def create_proje(proje: modeller.ProjeCreate, db: Session = Depends(veritabani.get_db)):
    try:
        db_proje = modeller.Proje(**proje.model_dump(mode="json", exclude={"baslangic_tarihi", "bitis_tarihi"}),
                                  baslangic_tarihi=proje.baslangic_tarihi, bitis_tarihi=proje.bitis_tarihi)
        db.add(db_proje)
        db.commit()
        db.refresh(db_proje)
        logger.info(f"Proje oluşturuldu: ID {db_proje.id}")
        return _projeleri_oku(db, [db_proje])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Proje oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Proje oluşturulurken beklenmedik hata: {str(e)}")

@router.get("/", response_model=List[modeller.ProjeRead])
def read_projeler(
    durum: Optional[modeller.GorevDurumEnum] = None,
    arama: Optional[str] = None,
    db: Session = Depends(veritabani.get_db)
):
    query = db.query(modeller.Proje).filter(modeller.Proje.durum != SILINDI)
    if durum is not None:
        query = query.filter(modeller.Proje.durum == durum.value)
    if arama:
        query = query.filter(modeller.Proje.proje_adi.ilike(f"%{arama}%"))
    return _projeleri_oku(db, query.order_by(modeller.Proje.created_at.desc(), modeller.Proje.id.desc()).all())

@router.get("/firma/{firma_id}", response_model=List[modeller.ProjeRead])
def read_firma_projeleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    projeler = db.query(modeller.Proje).filter(modeller.Proje.durum != SILINDI).order_by(modeller.Proje.created_at.desc(), modeller.Proje.id.desc()).all()
    return _projeleri_oku(db, [p for p in projeler if firma_listesinde_mi(p.hedef_firmalar, firma_id)])

@router.get("/gorevler/firma/{firma_id}", response_model=List[modeller.FirmaGorevRead])
def read_firma_gorevleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    gorevler = db.query(modeller.Gorev).filter(modeller.Gorev.durum != SILINDI).order_by(
        modeller.Gorev.proje_id, modeller.Gorev.sira_no, modeller.Gorev.id
    ).all()
    sonuc = []
    for g in gorevler:
        if not firma_listesinde_mi(g.atanan_firmalar, firma_id):
            continue
        gorev_read = modeller.FirmaGorevRead.model_validate(g, from_attributes=True)
        gorev_read.proje_adi = g.proje.proje_adi if g.proje else None
        gorev_read.alt_proje_adi = g.alt_proje.alt_proje_adi if g.alt_proje else None
        sonuc.append(gorev_read)
    return sonuc

@router.get("/{proje_id}", response_model=modeller.ProjeRead)
def read_proje(proje_id: int, db: Session = Depends(veritabani.get_db)):
    return _projeleri_oku(db, [_proje_getir(db, proje_id)])[0]

@router.put("/{proje_id}", response_model=modeller.ProjeRead)
def update_proje(proje_id: int, proje_update: modeller.ProjeUpdate, db: Session = Depends(veritabani.get_db)):
    db_proje = _proje_getir(db, proje_id)
    update_data = proje_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_proje, key, value.value if hasattr(value, "value") else value)
    _tarih_araligini_dogrula(db_proje)
    try:
        db.commit()
        db.refresh(db_proje)
        logger.info(f"Proje güncellendi: ID {proje_id}")
        return _projeleri_oku(db, [db_proje])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Proje güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Proje güncellenirken bir hata oluştu.")

@router.delete("/{proje_id}", response_model=modeller.MesajYanit)
def delete_proje(proje_id: int, db: Session = Depends(veritabani.get_db)):
    db_proje = _proje_getir(db, proje_id)
    try:
        # Alt projeler ve görevler de silindi olarak işaretlenir
        db.query(modeller.AltProje).filter(modeller.AltProje.proje_id == proje_id).update(
            {modeller.AltProje.durum: SILINDI}, synchronize_session=False
        )
        db.query(modeller.Gorev).filter(modeller.Gorev.proje_id == proje_id).update(
            {modeller.Gorev.durum: SILINDI}, synchronize_session=False
        )
        db_proje.durum = SILINDI
        db.commit()
        logger.info(f"Proje ve bağlı alt proje/görevler silindi: ID {proje_id}")
        return {"message": "Proje başarıyla silindi."}
    except Exception as e:
        db.rollback()
        logger.error(f"Proje silinirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Proje silinirken bir hata oluştu.")

@router.get("/{proje_id}/ilerleme/{firma_id}", response_model=modeller.IlerlemeYanit)
def read_proje_ilerleme(proje_id: int, firma_id: int, db: Session = Depends(veritabani.get_db)):
    _proje_getir(db, proje_id)
    yuzde = IlerlemeHesaplamaService(db).proje_ilerlemesi(proje_id, firma_id)
    return modeller.IlerlemeYanit(firma_id=firma_id, proje_id=proje_id, ilerleme_yuzdesi=yuzde)

# --- ALT PROJELER ---
def _alt_proje_getir(db: Session, proje_id: int, alt_proje_id: int) -> modeller.AltProje:
    db_alt = db.query(modeller.AltProje).filter(
        modeller.AltProje.id == alt_proje_id,
        modeller.AltProje.proje_id == proje_id,
        modeller.AltProje.durum != SILINDI
    ).first()
    if not db_alt:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alt proje bulunamadı")
    return db_alt

def _alt_projeleri_oku(db: Session, alt_projeler: List[modeller.AltProje]) -> List[modeller.AltProjeRead]:
    idler = [a.id for a in alt_projeler]
    gorev_sayilari = dict(db.query(modeller.Gorev.alt_proje_id, func.count(modeller.Gorev.id)).filter(
        modeller.Gorev.alt_proje_id.in_(idler), modeller.Gorev.durum != SILINDI
    ).group_by(modeller.Gorev.alt_proje_id).all()) if idler else {}
    sonuc = []
    for a in alt_projeler:
        alt_read = modeller.AltProjeRead.model_validate(a, from_attributes=True)
        alt_read.atanan_firmalar = a.atanan_firmalar or []
        alt_read.gorev_sayisi = gorev_sayilari.get(a.id, 0)
        sonuc.append(alt_read)
    return sonuc

@router.post("/{proje_id}/alt-projeler", response_model=modeller.AltProjeRead, status_code=status.HTTP_201_CREATED)
def create_alt_proje(proje_id: int, alt_proje: modeller.AltProjeCreate, db: Session = Depends(veritabani.get_db)):
    _proje_getir(db, proje_id)
    try:
        db_alt = modeller.AltProje(**alt_proje.model_dump(mode="json", exclude={"baslangic_tarihi", "bitis_tarihi"}),
                                   baslangic_tarihi=alt_proje.baslangic_tarihi, bitis_tarihi=alt_proje.bitis_tarihi,
                                   proje_id=proje_id)
        db.add(db_alt)
        db.commit()
        db.refresh(db_alt)
        logger.info(f"Alt proje oluşturuldu: ID {db_alt.id}, proje {proje_id}")
        return _alt_projeleri_oku(db, [db_alt])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Alt proje oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Alt proje oluşturulurken bir hata oluştu.")

@router.get("/{proje_id}/alt-projeler", response_model=List[modeller.AltProjeRead])
def read_alt_projeler(proje_id: int, db: Session = Depends(veritabani.get_db)):
    _proje_getir(db, proje_id)
    alt_projeler = db.query(modeller.AltProje).filter(
        modeller.AltProje.proje_id == proje_id, modeller.AltProje.durum != SILINDI
    ).order_by(modeller.AltProje.id).all()
    return _alt_projeleri_oku(db, alt_projeler)

@router.get("/{proje_id}/alt-projeler/{alt_proje_id}", response_model=modeller.AltProjeRead)
def read_alt_proje(proje_id: int, alt_proje_id: int, db: Session = Depends(veritabani.get_db)):
    return _alt_projeleri_oku(db, [_alt_proje_getir(db, proje_id, alt_proje_id)])[0]

@router.put("/{proje_id}/alt-projeler/{alt_proje_id}", response_model=modeller.AltProjeRead)
def update_alt_proje(
    proje_id: int,
    alt_proje_id: int,
    alt_proje_update: modeller.AltProjeUpdate,
    db: Session = Depends(veritabani.get_db)
):
    db_alt = _alt_proje_getir(db, proje_id, alt_proje_id)
    for key, value in alt_proje_update.model_dump(exclude_unset=True).items():
        setattr(db_alt, key, value.value if hasattr(value, "value") else value)
    _tarih_araligini_dogrula(db_alt)
    try:
        db.commit()
        db.refresh(db_alt)
        logger.info(f"Alt proje güncellendi: ID {alt_proje_id}")
        return _alt_projeleri_oku(db, [db_alt])[0]
    except Exception as e:
        db.rollback()
        logger.error(f"Alt proje güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Alt proje güncellenirken bir hata oluştu.")

@router.delete("/{proje_id}/alt-projeler/{alt_proje_id}", response_model=modeller.MesajYanit)
def delete_alt_proje(proje_id: int, alt_proje_id: int, db: Session = Depends(veritabani.get_db)):
    db_alt = _alt_proje_getir(db, proje_id, alt_proje_id)
    try:
        # Alt projeye bağlı görevler de silindi olarak işaretlenir
        db.query(modeller.Gorev).filter(modeller.Gorev.alt_proje_id == alt_proje_id).update(
            {modeller.Gorev.durum: SILINDI}, synchronize_session=False
        )
        db_alt.durum = SILINDI
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Alt proje silinirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Alt proje silinirken bir hata oluştu.")
    logger.info(f"Alt proje ve bağlı görevler silindi: ID {alt_proje_id}")
    return {"message": "Alt proje başarıyla silindi."}

# --- GÖREVLER ---
def _gorev_getir(db: Session, proje_id: int, gorev_id: int) -> modeller.Gorev:
    db_gorev = db.query(modeller.Gorev).filter(
        modeller.Gorev.id == gorev_id,
        modeller.Gorev.proje_id == proje_id,
        modeller.Gorev.durum != SILINDI
    ).first()
    if not db_gorev:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Görev bulunamadı")
    return db_gorev

def _alt_proje_projeye_ait_mi(db: Session, proje_id: int, alt_proje_id: Optional[int]) -> None:
    if alt_proje_id is None:
        return
    alt = db.query(modeller.AltProje).filter(
        modeller.AltProje.id == alt_proje_id,
        modeller.AltProje.proje_id == proje_id,
        modeller.AltProje.durum != SILINDI
    ).first()
    if not alt:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Alt proje bu projeye ait değil.")

@router.post("/{proje_id}/gorevler", response_model=modeller.GorevRead, status_code=status.HTTP_201_CREATED)
def create_gorev(proje_id: int, gorev: modeller.GorevCreate, db: Session = Depends(veritabani.get_db)):
    _proje_getir(db, proje_id)
    _alt_proje_projeye_ait_mi(db, proje_id, gorev.alt_proje_id)
    try:
        db_gorev = modeller.Gorev(**gorev.model_dump(mode="json", exclude={"baslangic_tarihi", "bitis_tarihi"}),
                                  baslangic_tarihi=gorev.baslangic_tarihi, bitis_tarihi=gorev.bitis_tarihi,
                                  proje_id=proje_id)
        db.add(db_gorev)
        db.commit()
        db.refresh(db_gorev)
        logger.info(f"Görev oluşturuldu: ID {db_gorev.id}, proje {proje_id}")
        return db_gorev
    except Exception as e:
        db.rollback()
        logger.error(f"Görev oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Görev oluşturulurken bir hata oluştu.")

@router.get("/{proje_id}/gorevler", response_model=List[modeller.GorevRead])
def read_gorevler(proje_id: int, alt_proje_id: Optional[int] = None, db: Session = Depends(veritabani.get_db)):
    _proje_getir(db, proje_id)
    query = db.query(modeller.Gorev).filter(modeller.Gorev.proje_id == proje_id, modeller.Gorev.durum != SILINDI)
    if alt_proje_id is not None:
        query = query.filter(modeller.Gorev.alt_proje_id == alt_proje_id)
    return query.order_by(modeller.Gorev.sira_no, modeller.Gorev.id).all()

@router.get("/{proje_id}/gorevler/{gorev_id}", response_model=modeller.GorevRead)
def read_gorev(proje_id: int, gorev_id: int, db: Session = Depends(veritabani.get_db)):
    return _gorev_getir(db, proje_id, gorev_id)

@router.put("/{proje_id}/gorevler/{gorev_id}", response_model=modeller.GorevRead)
def update_gorev(proje_id: int, gorev_id: int, gorev_update: modeller.GorevUpdate, db: Session = Depends(veritabani.get_db)):
    db_gorev = _gorev_getir(db, proje_id, gorev_id)
    update_data = gorev_update.model_dump(exclude_unset=True)
    if "alt_proje_id" in update_data:
        _alt_proje_projeye_ait_mi(db, proje_id, update_data["alt_proje_id"])
    for key, value in update_data.items():
        setattr(db_gorev, key, value.value if hasattr(value, "value") else value)
    _tarih_araligini_dogrula(db_gorev)
    try:
        db.commit()
        db.refresh(db_gorev)
        logger.info(f"Görev güncellendi: ID {gorev_id}")
        return db_gorev
    except Exception as e:
        db.rollback()
        logger.error(f"Görev güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Görev güncellenirken bir hata oluştu.")

@router.delete("/{proje_id}/gorevler/{gorev_id}", response_model=modeller.MesajYanit)
def delete_gorev(proje_id: int, gorev_id: int, db: Session = Depends(veritabani.get_db)):
    db_gorev = _gorev_getir(db, proje_id, gorev_id)
    db_gorev.durum = SILINDI
    db.commit()
    logger.info(f"Görev silindi olarak işaretlendi: ID {gorev_id}")
    return {"message": "Görev başarıyla silindi."}
