# ihracat_api/rotalar/forum.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import datetime
import logging
from .. import modeller, veritabani
from ..api_servisler import ForumService, aktif_firma_getir
from ..api_yardimcilar import forum_durumu_db_ye, http_hatasina_cevir, KayitBulunamadiHatasi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forum", tags=["Forum"])

def _konu_getir(db: Session, konu_id: int) -> modeller.ForumKonusu:
    db_konu = db.query(modeller.ForumKonusu).filter(modeller.ForumKonusu.id == konu_id).first()
    if not db_konu:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Forum konusu bulunamadı")
    return db_konu

@router.get("/konular", response_model=List[modeller.ForumKonusuRead])
def read_forum_konulari(kategori: Optional[str] = None, db: Session = Depends(veritabani.get_db)):
    return ForumService(db).konulari_listele(kategori)

@router.post("/konular", response_model=modeller.ForumKonusuRead, status_code=status.HTTP_201_CREATED)
def create_forum_konusu(konu: modeller.ForumKonusuCreate, db: Session = Depends(veritabani.get_db)):
    if konu.yazar_firma_id is not None:
        try:
            aktif_firma_getir(db, konu.yazar_firma_id)
        except KayitBulunamadiHatasi as e:
            raise http_hatasina_cevir(e)
    try:
        simdi = datetime.now()
        db_konu = modeller.ForumKonusu(**konu.model_dump(), durum="Aktif", created_at=simdi, updated_at=simdi)
        db.add(db_konu)
        db.commit()
        db.refresh(db_konu)
        logger.info(f"Forum konusu oluşturuldu: ID {db_konu.id}")
        return ForumService(db).konu_oku(db_konu)
    except Exception as e:
        db.rollback()
        logger.error(f"Forum konusu oluşturulurken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Forum konusu oluşturulurken bir hata oluştu.")

@router.get("/kategori-istatistikleri", response_model=List[modeller.KategoriIstatistigi])
def read_kategori_istatistikleri(db: Session = Depends(veritabani.get_db)):
    return ForumService(db).kategori_istatistikleri()

@router.get("/konular/{konu_id}", response_model=modeller.ForumKonusuRead)
def read_forum_konusu(konu_id: int, db: Session = Depends(veritabani.get_db)):
    db_konu = _konu_getir(db, konu_id)
    # Görüntülenme sayacı son etkinlik tarihini değiştirmez
    db.query(modeller.ForumKonusu).filter(modeller.ForumKonusu.id == konu_id).update(
        {modeller.ForumKonusu.goruntulenme_sayisi: func.coalesce(modeller.ForumKonusu.goruntulenme_sayisi, 0) + 1},
        synchronize_session=False
    )
    db.commit()
    db.refresh(db_konu)
    return ForumService(db).konu_oku(db_konu)

@router.put("/konular/{konu_id}/durum", response_model=modeller.ForumKonusuRead)
def update_forum_konusu_durumu(konu_id: int, durum_guncelle: modeller.ForumDurumGuncelle, db: Session = Depends(veritabani.get_db)):
    db_konu = _konu_getir(db, konu_id)
    db_konu.durum = forum_durumu_db_ye(durum_guncelle.durum)
    db.commit()
    db.refresh(db_konu)
    logger.info(f"Forum konusu {konu_id} durumu: {durum_guncelle.durum.value}")
    return ForumService(db).konu_oku(db_konu)

@router.delete("/konular/{konu_id}", response_model=modeller.MesajYanit)
def delete_forum_konusu(konu_id: int, db: Session = Depends(veritabani.get_db)):
    db_konu = _konu_getir(db, konu_id)
    try:
        db.query(modeller.ForumYorumu).filter(modeller.ForumYorumu.konu_id == konu_id).delete(synchronize_session=False)
        db.delete(db_konu)
        db.commit()
        logger.info(f"Forum konusu ve cevapları silindi: ID {konu_id}")
        return {"message": "Forum konusu başarıyla silindi."}
    except Exception as e:
        db.rollback()
        logger.error(f"Forum konusu silinirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Forum konusu silinirken bir hata oluştu.")

@router.get("/konular/{konu_id}/cevaplar", response_model=List[modeller.ForumCevabiRead])
def read_forum_cevaplari(konu_id: int, db: Session = Depends(veritabani.get_db)):
    _konu_getir(db, konu_id)
    return ForumService(db).cevaplari_listele(konu_id)

@router.post("/konular/{konu_id}/cevaplar", response_model=modeller.ForumCevabiRead, status_code=status.HTTP_201_CREATED)
def create_forum_cevabi(konu_id: int, cevap: modeller.ForumCevabiCreate, db: Session = Depends(veritabani.get_db)):
    try:
        return ForumService(db).cevap_ekle(konu_id, cevap)
    except (KayitBulunamadiHatasi, ValueError) as e:
        raise http_hatasina_cevir(e)
    except SQLAlchemyError as e:
        logger.error(f"Forum cevabı eklenirken hata: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Cevap eklenirken veritabanı hatası oluştu.")

@router.delete("/cevaplar/{cevap_id}", response_model=modeller.MesajYanit)
def delete_forum_cevabi(cevap_id: int, db: Session = Depends(veritabani.get_db)):
    db_cevap = db.query(modeller.ForumYorumu).filter(modeller.ForumYorumu.id == cevap_id).first()
    if not db_cevap:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Forum cevabı bulunamadı")
    db.delete(db_cevap)
    db.commit()
    logger.info(f"Forum cevabı silindi: ID {cevap_id}")
    return {"message": "Forum cevabı başarıyla silindi."}
