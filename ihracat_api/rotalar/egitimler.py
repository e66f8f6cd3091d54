# ihracat_api/rotalar/egitimler.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
import logging
from .. import modeller, veritabani
from ..api_servisler import EgitimService, aktif_firma_getir, aktif_firma_idleri
from ..api_yardimcilar import http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/egitimler", tags=["Eğitimler"])

SILINDI = modeller.KayitDurumEnum.SILINDI.value
AKTIF = modeller.KayitDurumEnum.AKTIF.value

def _set_getir(db: Session, set_id: int) -> modeller.EgitimSeti:
    egitim_seti = db.query(modeller.EgitimSeti).filter(
        modeller.EgitimSeti.id == set_id, modeller.EgitimSeti.durum != SILINDI
    ).first()
    if not egitim_seti:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Eğitim seti bulunamadı")
    return egitim_seti

def _video_getir(db: Session, video_id: int) -> modeller.EgitimVideosu:
    video = db.query(modeller.EgitimVideosu).filter(
        modeller.EgitimVideosu.id == video_id, modeller.EgitimVideosu.durum != SILINDI
    ).first()
    if not video:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Eğitim videosu bulunamadı")
    return video

def _firma_kontrol(db: Session, firma_id: int) -> None:
    try:
        aktif_firma_getir(db, firma_id)
    except KayitBulunamadiHatasi as e:
        raise http_hatasina_cevir(e)

# --- EĞİTİM SETLERİ ---
@router.post("/setler", response_model=modeller.EgitimSetiRead, status_code=status.HTTP_201_CREATED)
def create_egitim_seti(egitim_seti: modeller.EgitimSetiCreate, db: Session = Depends(veritabani.get_db)):
    try:
        db_set = modeller.EgitimSeti(**egitim_seti.model_dump(mode="json"))
        db.add(db_set)
        db.commit()
        db.refresh(db_set)
        logger.info(f"Eğitim seti oluşturuldu: ID {db_set.id}")
        return db_set
    except Exception as e:
        db.rollback()
        logger.error(f"Eğitim seti oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Eğitim seti oluşturulurken bir hata oluştu.")

@router.get("/setler", response_model=List[modeller.EgitimSetiRead])
def read_egitim_setleri(db: Session = Depends(veritabani.get_db)):
    return db.query(modeller.EgitimSeti).filter(modeller.EgitimSeti.durum != SILINDI).order_by(
        modeller.EgitimSeti.created_at.desc(), modeller.EgitimSeti.id.desc()
    ).all()

@router.get("/setler/{set_id}", response_model=modeller.EgitimSetiRead)
def read_egitim_seti(set_id: int, db: Session = Depends(veritabani.get_db)):
    return _set_getir(db, set_id)

@router.put("/setler/{set_id}", response_model=modeller.EgitimSetiRead)
def update_egitim_seti(set_id: int, set_update: modeller.EgitimSetiUpdate, db: Session = Depends(veritabani.get_db)):
    db_set = _set_getir(db, set_id)
    for key, value in set_update.model_dump(exclude_unset=True, mode="json").items():
        setattr(db_set, key, value)
    try:
        db.commit()
        db.refresh(db_set)
        logger.info(f"Eğitim seti güncellendi: ID {set_id}")
        return db_set
    except Exception as e:
        db.rollback()
        logger.error(f"Eğitim seti güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Eğitim seti güncellenirken bir hata oluştu.")

@router.delete("/setler/{set_id}", response_model=modeller.MesajYanit)
def delete_egitim_seti(set_id: int, db: Session = Depends(veritabani.get_db)):
    db_set = _set_getir(db, set_id)
    try:
        db.query(modeller.EgitimVideosu).filter(modeller.EgitimVideosu.egitim_set_id == set_id).update(
            {modeller.EgitimVideosu.durum: SILINDI}, synchronize_session=False
        )
        db_set.durum = SILINDI
        db_set.toplam_video_sayisi = 0
        db_set.toplam_sure = 0
        db.commit()
        logger.info(f"Eğitim seti ve videoları silindi: ID {set_id}")
        return {"message": "Eğitim seti başarıyla silindi."}
    except Exception as e:
        db.rollback()
        logger.error(f"Eğitim seti silinirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Eğitim seti silinirken bir hata oluştu.")

# --- VİDEOLAR ---
@router.post("/setler/{set_id}/videolar", response_model=modeller.EgitimVideosuRead, status_code=status.HTTP_201_CREATED)
def create_egitim_videosu(set_id: int, video: modeller.EgitimVideosuCreate, db: Session = Depends(veritabani.get_db)):
    _set_getir(db, set_id)
    try:
        db_video = modeller.EgitimVideosu(**video.model_dump(), egitim_set_id=set_id, durum=AKTIF)
        db.add(db_video)
        db.flush()
        EgitimService(db).set_istatistiklerini_guncelle(set_id)
        db.commit()
        db.refresh(db_video)
        logger.info(f"Eğitim videosu eklendi: ID {db_video.id}, set {set_id}")
        return db_video
    except Exception as e:
        db.rollback()
        logger.error(f"Eğitim videosu eklenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Eğitim videosu eklenirken bir hata oluştu.")

@router.get("/setler/{set_id}/videolar", response_model=List[modeller.EgitimVideosuRead])
def read_egitim_videolari(set_id: int, db: Session = Depends(veritabani.get_db)):
    _set_getir(db, set_id)
    return db.query(modeller.EgitimVideosu).filter(
        modeller.EgitimVideosu.egitim_set_id == set_id, modeller.EgitimVideosu.durum == AKTIF
    ).order_by(modeller.EgitimVideosu.sira_no, modeller.EgitimVideosu.id).all()

@router.put("/videolar/{video_id}", response_model=modeller.EgitimVideosuRead)
def update_egitim_videosu(video_id: int, video_update: modeller.EgitimVideosuUpdate, db: Session = Depends(veritabani.get_db)):
    db_video = _video_getir(db, video_id)
    for key, value in video_update.model_dump(exclude_unset=True).items():
        setattr(db_video, key, value)
    try:
        db.flush()
        EgitimService(db).set_istatistiklerini_guncelle(db_video.egitim_set_id)
        db.commit()
        db.refresh(db_video)
        logger.info(f"Eğitim videosu güncellendi: ID {video_id}")
        return db_video
    except Exception as e:
        db.rollback()
        logger.error(f"Eğitim videosu güncellenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Eğitim videosu güncellenirken bir hata oluştu.")

@router.delete("/videolar/{video_id}", response_model=modeller.MesajYanit)
def delete_egitim_videosu(video_id: int, db: Session = Depends(veritabani.get_db)):
    db_video = _video_getir(db, video_id)
    db_video.durum = SILINDI
    db.flush()
    EgitimService(db).set_istatistiklerini_guncelle(db_video.egitim_set_id)
    db.commit()
    logger.info(f"Eğitim videosu silindi olarak işaretlendi: ID {video_id}")
    return {"message": "Eğitim videosu başarıyla silindi."}

# --- ATAMA / İZLEME / DEĞERLENDİRME ---
@router.post("/setler/{set_id}/atama", response_model=modeller.MesajYanit)
def assign_egitim_seti(set_id: int, atama: modeller.EgitimAtamaIstegi, db: Session = Depends(veritabani.get_db)):
    _set_getir(db, set_id)
    firma_ids = list(dict.fromkeys(atama.firma_ids))
    mevcut_firmalar = aktif_firma_idleri(db, firma_ids)
    eksikler = [f for f in firma_ids if f not in mevcut_firmalar]
    if eksikler:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Firma bulunamadı: {eksikler}")

    for firma_id in firma_ids:
        db_atama = db.query(modeller.EgitimSetFirmaAtamasi).filter(
            modeller.EgitimSetFirmaAtamasi.egitim_set_id == set_id,
            modeller.EgitimSetFirmaAtamasi.firma_id == firma_id
        ).first()
        if db_atama:
            db_atama.durum = AKTIF
            db_atama.atama_tarihi = datetime.now()
        else:
            db.add(modeller.EgitimSetFirmaAtamasi(egitim_set_id=set_id, firma_id=firma_id, durum=AKTIF))
    db.commit()
    logger.info(f"Eğitim seti {set_id} {len(firma_ids)} firmaya atandı.")
    return {"message": f"Eğitim seti {len(firma_ids)} firmaya atandı."}

@router.get("/firma/{firma_id}/setler", response_model=List[modeller.FirmaEgitimSetiRead])
def read_firma_egitim_setleri(firma_id: int, db: Session = Depends(veritabani.get_db)):
    _firma_kontrol(db, firma_id)
    return EgitimService(db).firma_setleri(firma_id)

@router.get("/firma/{firma_id}/ilerleme", response_model=modeller.EgitimIlerlemesi)
def read_firma_egitim_ilerlemesi(firma_id: int, db: Session = Depends(veritabani.get_db)):
    _firma_kontrol(db, firma_id)
    return EgitimService(db).firma_ilerlemesi(firma_id)

@router.post("/izleme", response_model=modeller.MesajYanit)
def record_video_izleme(izleme: modeller.VideoIzlemeIstegi, db: Session = Depends(veritabani.get_db)):
    _firma_kontrol(db, izleme.firma_id)
    _video_getir(db, izleme.video_id)
    db_izleme = db.query(modeller.VideoIzleme).filter(
        modeller.VideoIzleme.firma_id == izleme.firma_id,
        modeller.VideoIzleme.video_id == izleme.video_id
    ).first()
    if db_izleme:
        db_izleme.tamamlandi = izleme.tamamlandi
    else:
        db.add(modeller.VideoIzleme(firma_id=izleme.firma_id, video_id=izleme.video_id, tamamlandi=izleme.tamamlandi))
    db.commit()
    logger.info(f"Video izleme kaydı: firma {izleme.firma_id}, video {izleme.video_id}, tamamlandı={izleme.tamamlandi}")
    return {"message": "İzleme kaydı güncellendi."}

@router.post("/degerlendirme", response_model=modeller.MesajYanit)
def record_degerlendirme(degerlendirme: modeller.DegerlendirmeIstegi, db: Session = Depends(veritabani.get_db)):
    _firma_kontrol(db, degerlendirme.firma_id)
    _set_getir(db, degerlendirme.egitim_set_id)
    db_bildirim = db.query(modeller.GeriBildirim).filter(
        modeller.GeriBildirim.firma_id == degerlendirme.firma_id,
        modeller.GeriBildirim.egitim_set_id == degerlendirme.egitim_set_id
    ).first()
    if db_bildirim:
        db_bildirim.puan = degerlendirme.puan
        db_bildirim.yorum = degerlendirme.yorum
    else:
        db.add(modeller.GeriBildirim(**degerlendirme.model_dump()))
    db.commit()
    logger.info(f"Eğitim değerlendirmesi kaydedildi: firma {degerlendirme.firma_id}, set {degerlendirme.egitim_set_id}")
    return {"message": "Değerlendirme kaydedildi."}
