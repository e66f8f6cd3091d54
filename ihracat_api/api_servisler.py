# ihracat_api/api_servisler.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import datetime, timedelta
from typing import List, Optional
from . import modeller
from .modeller import (
    Firma, FirmaHizmeti, Kullanici, Proje, Gorev, GorevTamamlamaTalebi,
    EgitimSeti, EgitimVideosu, EgitimSetFirmaAtamasi, VideoIzleme,
    ForumKonusu, ForumYorumu, RandevuTalebi, Haber, OnayDurumEnum, KayitDurumEnum,
    GorevDurumEnum, HizmetDurumEnum, RolEnum
)
from .api_yardimcilar import (
    normalize_durum, ham_degerler, gecis_dogrula, gorev_tamamlandi_mi,
    forum_durumu_db_den, yuzde_hesapla, durum_dagilimi, firma_listesinde_mi,
    KayitBulunamadiHatasi, CakismaHatasi
)

logger = logging.getLogger(__name__)

SILINDI = KayitDurumEnum.SILINDI.value
AKTIF = KayitDurumEnum.AKTIF.value

def aktif_firma_getir(db: Session, firma_id: int) -> Firma:
    """Silinmemiş firmayı döndürür; yoksa KayitBulunamadiHatasi fırlatır."""
    firma = db.query(Firma).filter(Firma.id == firma_id, Firma.durum != SILINDI).first()
    if not firma:
        raise KayitBulunamadiHatasi("Firma bulunamadı.")
    return firma

def aktif_firma_idleri(db: Session, firma_ids) -> set:
    """Verilen id'lerden silinmemiş firmalara ait olanları döndürür."""
    return {f[0] for f in db.query(Firma.id).filter(Firma.id.in_(list(firma_ids)), Firma.durum != SILINDI).all()}

def firma_adlari_sozlugu(db: Session, firma_ids=None) -> dict:
    """{firma_id: firma_adi} sözlüğü döndürür; firma_ids verilirse sadece onları sorgular."""
    query = db.query(Firma.id, Firma.firma_adi)
    if firma_ids is not None:
        ids = [int(f) for f in firma_ids if str(f).isdigit()]
        if not ids:
            return {}
        query = query.filter(Firma.id.in_(ids))
    return {firma_id: ad for firma_id, ad in query.all()}


class IlerlemeHesaplamaService:
    """Firma bazında görev, hizmet ve genel ilerleme yüzdelerini hesaplar."""
    def __init__(self, db: Session):
        self.db = db

    def _firma_gorevleri(self, firma_id: int, proje_id: Optional[int] = None) -> List[Gorev]:
        query = self.db.query(Gorev).filter(Gorev.durum != SILINDI)
        if proje_id is not None:
            query = query.filter(Gorev.proje_id == proje_id)
        # JSON dizisi içinde arama veritabanından bağımsız olsun diye Python tarafında yapılır
        return [g for g in query.all() if firma_listesinde_mi(g.atanan_firmalar, firma_id)]

    def gorev_ilerlemesi(self, firma_id: int, proje_id: Optional[int] = None) -> int:
        try:
            gorevler = self._firma_gorevleri(firma_id, proje_id)
            tamamlanan = sum(1 for g in gorevler if gorev_tamamlandi_mi(g.durum))
            return yuzde_hesapla(tamamlanan, len(gorevler))
        except SQLAlchemyError as e:
            logger.error(f"Firma {firma_id} görev ilerlemesi hesaplanırken hata: {e}", exc_info=True)
            return 0

    def genel_ilerleme(self, firma_id: int) -> int:
        return self.gorev_ilerlemesi(firma_id)

    def proje_ilerlemesi(self, proje_id: int, firma_id: int) -> int:
        return self.gorev_ilerlemesi(firma_id, proje_id)

    def hizmet_ilerlemesi(self, firma_id: int) -> modeller.HizmetIlerlemeOzeti:
        try:
            hizmetler = self.db.query(FirmaHizmeti).filter(FirmaHizmeti.firma_id == firma_id).order_by(FirmaHizmeti.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Firma {firma_id} hizmetleri okunurken hata: {e}", exc_info=True)
            return modeller.HizmetIlerlemeOzeti()

        if not hizmetler:
            return modeller.HizmetIlerlemeOzeti()

        toplam_yuzde = sum(h.ilerleme_yuzdesi or 0 for h in hizmetler)
        tamamlanan = sum(
            1 for h in hizmetler
            if h.durum == HizmetDurumEnum.TAMAMLANDI.value or (h.ilerleme_yuzdesi or 0) >= 100
        )
        return modeller.HizmetIlerlemeOzeti(
            # toplam / adet ortalaması, yuzde_hesapla ile .5 yukarı yuvarlanır
            ortalama_ilerleme=yuzde_hesapla(toplam_yuzde, len(hizmetler) * 100),
            tamamlanan_hizmet=tamamlanan,
            toplam_hizmet=len(hizmetler),
            detaylar=[
                modeller.HizmetIlerlemeDetay(hizmet_adi=h.hizmet_adi, ilerleme=h.ilerleme_yuzdesi or 0, durum=h.durum)
                for h in hizmetler
            ],
        )


class EgitimService:
    def __init__(self, db: Session):
        self.db = db

    def set_istatistiklerini_guncelle(self, set_id: int) -> None:
        """Setin video sayısı ve toplam süresini aktif videolardan yeniden hesaplar. Commit çağırana aittir."""
        egitim_seti = self.db.query(EgitimSeti).filter(EgitimSeti.id == set_id).first()
        if not egitim_seti:
            return
        sayi, sure = self.db.query(
            func.count(EgitimVideosu.id), func.coalesce(func.sum(EgitimVideosu.video_suresi), 0)
        ).filter(EgitimVideosu.egitim_set_id == set_id, EgitimVideosu.durum == AKTIF).one()
        egitim_seti.toplam_video_sayisi = sayi or 0
        egitim_seti.toplam_sure = int(sure or 0)

    def _atanmis_set_idleri(self, firma_id: int) -> List[int]:
        satirlar = self.db.query(EgitimSetFirmaAtamasi.egitim_set_id).join(
            EgitimSeti, EgitimSeti.id == EgitimSetFirmaAtamasi.egitim_set_id
        ).filter(
            EgitimSetFirmaAtamasi.firma_id == firma_id,
            EgitimSetFirmaAtamasi.durum == AKTIF,
            EgitimSeti.durum == AKTIF,
        ).all()
        return [s[0] for s in satirlar]

    def firma_setleri(self, firma_id: int) -> List[modeller.FirmaEgitimSetiRead]:
        setler = self.db.query(EgitimSeti).filter(EgitimSeti.durum == AKTIF).order_by(EgitimSeti.created_at.desc(), EgitimSeti.id.desc()).all()
        atanmis = set(self._atanmis_set_idleri(firma_id))
        sonuc = []
        for s in setler:
            okunan = modeller.FirmaEgitimSetiRead.model_validate(s, from_attributes=True)
            okunan.atanmis_mi = s.id in atanmis
            okunan.kilitli = s.id not in atanmis
            sonuc.append(okunan)
        return sonuc

    def firma_ilerlemesi(self, firma_id: int) -> modeller.EgitimIlerlemesi:
        try:
            set_idleri = self._atanmis_set_idleri(firma_id)
            if not set_idleri:
                return modeller.EgitimIlerlemesi()

            videolar = self.db.query(EgitimVideosu.id, EgitimVideosu.egitim_set_id).filter(
                EgitimVideosu.egitim_set_id.in_(set_idleri), EgitimVideosu.durum == AKTIF
            ).all()
            video_idleri = [v.id for v in videolar]
            izlenenler = set()
            if video_idleri:
                izlenenler = {
                    i[0] for i in self.db.query(VideoIzleme.video_id).filter(
                        VideoIzleme.firma_id == firma_id,
                        VideoIzleme.video_id.in_(video_idleri),
                        VideoIzleme.tamamlandi.is_(True),
                    ).all()
                }

            tamamlanan_set = 0
            for set_id in set_idleri:
                set_videolari = [v.id for v in videolar if v.egitim_set_id == set_id]
                if set_videolari and all(v in izlenenler for v in set_videolari):
                    tamamlanan_set += 1

            return modeller.EgitimIlerlemesi(
                toplam_video_sayisi=len(video_idleri),
                izlenen_video_sayisi=len(izlenenler),
                ilerleme_yuzdesi=yuzde_hesapla(len(izlenenler), len(video_idleri)),
                tamamlanan_set_sayisi=tamamlanan_set,
                toplam_set_sayisi=len(set_idleri),
            )
        except SQLAlchemyError as e:
            logger.error(f"Firma {firma_id} eğitim ilerlemesi hesaplanırken hata: {e}", exc_info=True)
            return modeller.EgitimIlerlemesi()


class GorevTamamlamaService:
    """Firmaların görev tamamlama talepleri ve admin onay akışı."""
    def __init__(self, db: Session):
        self.db = db

    def _zenginlestir(self, talepler: List[GorevTamamlamaTalebi]) -> List[modeller.GorevTamamlamaTalebiRead]:
        gorev_idleri = {t.gorev_id for t in talepler}
        gorevler = {g.id: g for g in self.db.query(Gorev).filter(Gorev.id.in_(gorev_idleri)).all()} if gorev_idleri else {}
        proje_idleri = {g.proje_id for g in gorevler.values()}
        projeler = dict(self.db.query(Proje.id, Proje.proje_adi).filter(Proje.id.in_(proje_idleri)).all()) if proje_idleri else {}
        firmalar = firma_adlari_sozlugu(self.db, {t.firma_id for t in talepler})

        sonuc = []
        for t in talepler:
            gorev = gorevler.get(t.gorev_id)
            sonuc.append(modeller.GorevTamamlamaTalebiRead(
                id=t.id,
                gorev_id=t.gorev_id,
                firma_id=t.firma_id,
                tamamlama_notu=t.tamamlama_notu or "",
                kanit_dosya_url=t.kanit_dosya_url,
                kanit_dosya_adi=t.kanit_dosya_adi,
                talep_tarihi=t.talep_tarihi,
                durum=normalize_durum(t.durum),
                onay_tarihi=t.onay_tarihi,
                admin_notu=t.admin_notu,
                admin_personel_id=t.admin_personel_id,
                gorev_basligi=gorev.gorev_adi if gorev else "Bilinmeyen Görev",
                proje_basligi=projeler.get(gorev.proje_id, "Bilinmeyen Proje") if gorev else "Bilinmeyen Proje",
                firma_adi=firmalar.get(t.firma_id, "Bilinmeyen Firma"),
            ))
        return sonuc

    def talep_olustur(self, veri: modeller.GorevTamamlamaTalebiCreate) -> modeller.GorevTamamlamaTalebiRead:
        if not (veri.tamamlama_notu or "").strip():
            raise ValueError("Tamamlama notu zorunludur.")

        gorev = self.db.query(Gorev).filter(Gorev.id == veri.gorev_id, Gorev.durum != SILINDI).first()
        if not gorev:
            raise KayitBulunamadiHatasi("Görev bulunamadı.")
        aktif_firma_getir(self.db, veri.firma_id)
        if not firma_listesinde_mi(gorev.atanan_firmalar, veri.firma_id):
            raise ValueError("Bu görev firmaya atanmamış.")
        if gorev_tamamlandi_mi(gorev.durum):
            raise CakismaHatasi("Görev zaten tamamlanmış.")

        bekleyen = self.db.query(GorevTamamlamaTalebi).filter(
            GorevTamamlamaTalebi.gorev_id == veri.gorev_id,
            GorevTamamlamaTalebi.firma_id == veri.firma_id,
            GorevTamamlamaTalebi.durum.in_(ham_degerler(OnayDurumEnum.BEKLEMEDE)),
        ).first()
        if bekleyen:
            raise CakismaHatasi("Bu görev için onay bekleyen bir talep zaten var.")

        talep = GorevTamamlamaTalebi(
            gorev_id=veri.gorev_id,
            firma_id=veri.firma_id,
            tamamlama_notu=veri.tamamlama_notu.strip(),
            kanit_dosya_url=veri.kanit_dosya_url,
            kanit_dosya_adi=veri.kanit_dosya_adi,
            talep_tarihi=datetime.now(),
            durum=OnayDurumEnum.BEKLEMEDE.value,
        )
        self.db.add(talep)
        self.db.commit()
        self.db.refresh(talep)
        logger.info(f"Görev tamamlama talebi oluşturuldu: ID {talep.id}, görev {talep.gorev_id}, firma {talep.firma_id}")
        return self._zenginlestir([talep])[0]

    def bekleyen_talepler(self) -> List[modeller.GorevTamamlamaTalebiRead]:
        try:
            talepler = self.db.query(GorevTamamlamaTalebi).filter(
                GorevTamamlamaTalebi.durum.in_(ham_degerler(OnayDurumEnum.BEKLEMEDE))
            ).order_by(GorevTamamlamaTalebi.talep_tarihi.desc(), GorevTamamlamaTalebi.id.desc()).all()
            return self._zenginlestir(talepler)
        except SQLAlchemyError as e:
            logger.error(f"Bekleyen görev talepleri okunurken hata: {e}", exc_info=True)
            return []

    def firma_talepleri(self, firma_id: int) -> List[modeller.GorevTamamlamaTalebiRead]:
        try:
            talepler = self.db.query(GorevTamamlamaTalebi).filter(
                GorevTamamlamaTalebi.firma_id == firma_id
            ).order_by(GorevTamamlamaTalebi.talep_tarihi.desc(), GorevTamamlamaTalebi.id.desc()).all()
            logger.info(f"Firma {firma_id} talep dağılımı: {durum_dagilimi(t.durum for t in talepler)}")
            return self._zenginlestir(talepler)
        except SQLAlchemyError as e:
            logger.error(f"Firma {firma_id} görev talepleri okunurken hata: {e}", exc_info=True)
            return []

    def talep_detayi(self, talep_id: int) -> modeller.GorevTamamlamaTalebiRead:
        talep = self.db.query(GorevTamamlamaTalebi).filter(GorevTamamlamaTalebi.id == talep_id).first()
        if not talep:
            raise KayitBulunamadiHatasi("Görev tamamlama talebi bulunamadı.")
        return self._zenginlestir([talep])[0]

    def karar_ver(self, talep_id: int, karar: modeller.GorevTamamlamaKarar) -> modeller.GorevTamamlamaTalebiRead:
        talep = self.db.query(GorevTamamlamaTalebi).filter(GorevTamamlamaTalebi.id == talep_id).first()
        if not talep:
            raise KayitBulunamadiHatasi("Görev tamamlama talebi bulunamadı.")

        yeni_durum = OnayDurumEnum(karar.durum.value)
        if yeni_durum == OnayDurumEnum.REDDEDILDI and not (karar.admin_notu or "").strip():
            raise ValueError("Red işlemi için admin notu zorunludur.")
        gecis_dogrula(normalize_durum(talep.durum), yeni_durum)

        try:
            talep.durum = yeni_durum.value
            talep.admin_notu = karar.admin_notu
            talep.admin_personel_id = karar.admin_personel_id
            talep.onay_tarihi = datetime.now()

            # Onay, görevi de aynı işlem içinde tamamlandı yapar
            if yeni_durum == OnayDurumEnum.ONAYLANDI:
                gorev = self.db.query(Gorev).filter(Gorev.id == talep.gorev_id).first()
                if gorev:
                    gorev.durum = GorevDurumEnum.TAMAMLANDI.value
                else:
                    logger.warning(f"Talep {talep_id} onaylandı ancak görev {talep.gorev_id} bulunamadı.")

            self.db.commit()
            self.db.refresh(talep)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Görev tamamlama talebi {talep_id} için karar: {yeni_durum.value}")
        return self._zenginlestir([talep])[0]


class RandevuService:
    def __init__(self, db: Session):
        self.db = db

    def _okunur(self, talepler: List[RandevuTalebi]) -> List[modeller.RandevuTalebiRead]:
        firmalar = firma_adlari_sozlugu(self.db, {t.firma_id for t in talepler})
        personel_idleri = {t.atanan_personel_id for t in talepler if t.atanan_personel_id}
        personeller = dict(
            self.db.query(Kullanici.id, Kullanici.ad_soyad).filter(Kullanici.id.in_(personel_idleri)).all()
        ) if personel_idleri else {}
        return [
            modeller.RandevuTalebiRead(
                id=t.id,
                firma_id=t.firma_id,
                firma_adi=firmalar.get(t.firma_id, "Bilinmeyen Firma"),
                konu=t.konu or "",
                mesaj=t.mesaj or "",
                tercih_edilen_tarih_saat_1=t.tercih_edilen_tarih_saat_1,
                tercih_edilen_tarih_saat_2=t.tercih_edilen_tarih_saat_2,
                tercih_edilen_tarih_saat_3=t.tercih_edilen_tarih_saat_3,
                talep_tarihi=t.talep_tarihi,
                durum=normalize_durum(t.durum),
                atanan_personel_id=t.atanan_personel_id,
                personel_adi=personeller.get(t.atanan_personel_id),
                gerceklesen_tarih_saat=t.gerceklesen_tarih_saat,
                admin_notu=t.admin_notu,
            )
            for t in talepler
        ]

    def talep_olustur(self, veri: modeller.RandevuTalebiCreate) -> modeller.RandevuTalebiRead:
        aktif_firma_getir(self.db, veri.firma_id)
        talep = RandevuTalebi(**veri.model_dump(), talep_tarihi=datetime.now(), durum=OnayDurumEnum.BEKLEMEDE.value)
        self.db.add(talep)
        self.db.commit()
        self.db.refresh(talep)
        logger.info(f"Randevu talebi oluşturuldu: ID {talep.id}, firma {talep.firma_id}")
        return self._okunur([talep])[0]

    def listele(self, firma_id: Optional[int] = None, durum: Optional[OnayDurumEnum] = None) -> List[modeller.RandevuTalebiRead]:
        try:
            query = self.db.query(RandevuTalebi)
            if firma_id is not None:
                query = query.filter(RandevuTalebi.firma_id == firma_id)
            if durum is not None:
                query = query.filter(RandevuTalebi.durum.in_(ham_degerler(durum)))
            talepler = query.order_by(RandevuTalebi.talep_tarihi.desc(), RandevuTalebi.id.desc()).all()
            return self._okunur(talepler)
        except SQLAlchemyError as e:
            logger.error(f"Randevu talepleri okunurken hata: {e}", exc_info=True)
            return []

    def guncelle(self, talep_id: int, veri: modeller.RandevuTalebiUpdate) -> modeller.RandevuTalebiRead:
        talep = self.db.query(RandevuTalebi).filter(RandevuTalebi.id == talep_id).first()
        if not talep:
            raise KayitBulunamadiHatasi("Randevu talebi bulunamadı.")

        degisiklikler = veri.model_dump(exclude_unset=True)
        mevcut = normalize_durum(talep.durum)
        yeni_durum = degisiklikler.pop("durum", None)
        # Aynı durum tekrar gönderilirse geçiş sayılmaz, sadece diğer alanlar güncellenir
        if yeni_durum is not None and OnayDurumEnum(yeni_durum) != mevcut:
            yeni_durum = OnayDurumEnum(yeni_durum)
            gecis_dogrula(mevcut, yeni_durum)
        else:
            yeni_durum = None

        personel_id = degisiklikler.get("atanan_personel_id")
        if personel_id is not None:
            personel = self.db.query(Kullanici).filter(Kullanici.id == personel_id).first()
            if not personel or personel.durum != AKTIF:
                raise ValueError("Atanan personel bulunamadı veya aktif değil.")

        for key, value in degisiklikler.items():
            setattr(talep, key, value)
        if yeni_durum is not None:
            talep.durum = yeni_durum.value
            if yeni_durum == OnayDurumEnum.TAMAMLANDI and not talep.gerceklesen_tarih_saat:
                talep.gerceklesen_tarih_saat = datetime.now()
        elif talep.durum != mevcut.value:
            # Eski yazımla saklanmış kayıtlar güncellenirken kanonik hale getirilir
            talep.durum = mevcut.value

        try:
            self.db.commit()
            self.db.refresh(talep)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Randevu talebi güncellendi: ID {talep.id}, durum {talep.durum}")
        return self._okunur([talep])[0]

    def istatistikler(self, simdi: Optional[datetime] = None) -> modeller.RandevuIstatistikleri:
        simdi = simdi or datetime.now()
        try:
            satirlar = self.db.query(RandevuTalebi.durum, RandevuTalebi.talep_tarihi).all()
        except SQLAlchemyError as e:
            logger.error(f"Randevu istatistikleri okunurken hata: {e}", exc_info=True)
            return modeller.RandevuIstatistikleri()

        ay_basi = simdi.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        gecen_ay_basi = (ay_basi - timedelta(days=1)).replace(day=1)
        bugun = simdi.date()
        hafta_once = simdi - timedelta(days=7)

        sayac = {d: 0 for d in OnayDurumEnum}
        ist = modeller.RandevuIstatistikleri(toplam=len(satirlar))
        for durum, tarih in satirlar:
            sayac[normalize_durum(durum)] += 1
            if tarih is None:
                continue
            if hafta_once <= tarih <= simdi:
                ist.haftanin_toplami += 1
            if ay_basi <= tarih:
                ist.bu_ay_toplam += 1
            elif gecen_ay_basi <= tarih:
                ist.gecen_ay_toplam += 1
            if tarih.date() == bugun:
                ist.bugunku_talepler += 1

        ist.beklemede = sayac[OnayDurumEnum.BEKLEMEDE]
        ist.onaylandi = sayac[OnayDurumEnum.ONAYLANDI]
        ist.reddedildi = sayac[OnayDurumEnum.REDDEDILDI]
        ist.tamamlandi = sayac[OnayDurumEnum.TAMAMLANDI]
        return ist

    def personel_listesi(self) -> List[Kullanici]:
        try:
            return self.db.query(Kullanici).filter(
                Kullanici.durum == AKTIF,
                Kullanici.rol.in_([RolEnum.ADMIN.value, RolEnum.PERSONEL.value]),
            ).order_by(Kullanici.ad_soyad).all()
        except SQLAlchemyError as e:
            logger.error(f"Personel listesi okunurken hata: {e}", exc_info=True)
            return []


class ForumService:
    def __init__(self, db: Session):
        self.db = db

    def _konu_okunur(self, konular: List[ForumKonusu]) -> List[modeller.ForumKonusuRead]:
        konu_idleri = [k.id for k in konular]
        cevap_ozetleri = {}
        if konu_idleri:
            for konu_id, adet, son_tarih in self.db.query(
                ForumYorumu.konu_id, func.count(ForumYorumu.id), func.max(ForumYorumu.created_at)
            ).filter(ForumYorumu.konu_id.in_(konu_idleri)).group_by(ForumYorumu.konu_id).all():
                cevap_ozetleri[konu_id] = (adet, son_tarih)
        firmalar = firma_adlari_sozlugu(self.db, {k.yazar_firma_id for k in konular if k.yazar_firma_id})

        sonuc = []
        for k in konular:
            adet, son_cevap = cevap_ozetleri.get(k.id, (0, None))
            olusturma = k.created_at or datetime.now()
            adaylar = [t for t in (olusturma, k.updated_at, son_cevap) if t is not None]
            sonuc.append(modeller.ForumKonusuRead(
                id=k.id,
                baslik=k.baslik,
                icerik=k.icerik or "",
                kategori=k.kategori or "Genel",
                yazar_firma_id=k.yazar_firma_id,
                firma_adi=firmalar.get(k.yazar_firma_id) or k.yazar_adi or "Bilinmeyen Firma",
                durum=forum_durumu_db_den(k.durum),
                sabitleme=bool(k.sabitleme),
                goruntulenme_sayisi=k.goruntulenme_sayisi or 0,
                cevap_sayisi=adet,
                olusturma_tarihi=olusturma,
                son_mesaj_tarihi=max(adaylar),
            ))
        return sonuc

    def konulari_listele(self, kategori: Optional[str] = None) -> List[modeller.ForumKonusuRead]:
        try:
            query = self.db.query(ForumKonusu)
            if kategori:
                query = query.filter(ForumKonusu.kategori == kategori)
            konular = self._konu_okunur(query.all())
        except SQLAlchemyError as e:
            logger.error(f"Forum konuları okunurken hata: {e}", exc_info=True)
            return []
        # Sabitlenenler önce, sonra en son etkinlik
        return sorted(konular, key=lambda k: (k.sabitleme, k.son_mesaj_tarihi), reverse=True)

    def konu_oku(self, konu: ForumKonusu) -> modeller.ForumKonusuRead:
        return self._konu_okunur([konu])[0]

    def cevap_ekle(self, konu_id: int, veri: modeller.ForumCevabiCreate) -> modeller.ForumCevabiRead:
        konu = self.db.query(ForumKonusu).filter(ForumKonusu.id == konu_id).first()
        if not konu:
            raise KayitBulunamadiHatasi("Forum konusu bulunamadı.")
        if forum_durumu_db_den(konu.durum) == modeller.ForumDurumEnum.KILITLI:
            raise CakismaHatasi("Kilitli konuya cevap yazılamaz.")
        if veri.yazar_firma_id is not None:
            aktif_firma_getir(self.db, veri.yazar_firma_id)

        simdi = datetime.now()
        cevap = ForumYorumu(konu_id=konu_id, created_at=simdi, updated_at=simdi, **veri.model_dump())
        self.db.add(cevap)
        konu.updated_at = simdi
        try:
            self.db.commit()
            self.db.refresh(cevap)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Forum konusu {konu_id} için cevap eklendi: ID {cevap.id}")
        return self._cevap_okunur([cevap])[0]

    def _cevap_okunur(self, cevaplar: List[ForumYorumu]) -> List[modeller.ForumCevabiRead]:
        firmalar = firma_adlari_sozlugu(self.db, {c.yazar_firma_id for c in cevaplar if c.yazar_firma_id})
        sonuc = []
        for c in cevaplar:
            firma_adi = firmalar.get(c.yazar_firma_id)
            sonuc.append(modeller.ForumCevabiRead(
                id=c.id,
                konu_id=c.konu_id,
                yazar_firma_id=c.yazar_firma_id,
                yazar_id=c.yazar_id,
                cevap_metni=c.yorum_metni,
                cevap_tarihi=c.created_at,
                yazar_adi=c.yazar_adi or firma_adi or "Personel",
                yazar_tipi="Firma" if firma_adi else "Personel",
            ))
        return sonuc

    def cevaplari_listele(self, konu_id: int) -> List[modeller.ForumCevabiRead]:
        try:
            cevaplar = self.db.query(ForumYorumu).filter(ForumYorumu.konu_id == konu_id).order_by(
                ForumYorumu.created_at, ForumYorumu.id
            ).all()
            return self._cevap_okunur(cevaplar)
        except SQLAlchemyError as e:
            logger.error(f"Forum konusu {konu_id} cevapları okunurken hata: {e}", exc_info=True)
            return []

    def kategori_istatistikleri(self) -> List[modeller.KategoriIstatistigi]:
        try:
            konu_sayilari = self.db.query(ForumKonusu.kategori, func.count(ForumKonusu.id)).group_by(ForumKonusu.kategori).all()
            cevap_sayilari = dict(
                self.db.query(ForumKonusu.kategori, func.count(ForumYorumu.id))
                .join(ForumYorumu, ForumYorumu.konu_id == ForumKonusu.id)
                .group_by(ForumKonusu.kategori).all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Forum kategori istatistikleri okunurken hata: {e}", exc_info=True)
            return []
        return [
            modeller.KategoriIstatistigi(
                kategori=kategori or "Genel",
                konu_sayisi=adet,
                cevap_sayisi=cevap_sayilari.get(kategori, 0),
            )
            for kategori, adet in sorted(konu_sayilari, key=lambda s: s[0] or "")
        ]


class RaporService:
    def __init__(self, db: Session):
        self.db = db

    def dashboard_ozeti(self) -> modeller.DashboardOzeti:
        try:
            return modeller.DashboardOzeti(
                aktif_firma_sayisi=self.db.query(func.count(Firma.id)).filter(Firma.durum == AKTIF).scalar() or 0,
                aktif_proje_sayisi=self.db.query(func.count(Proje.id)).filter(Proje.durum == AKTIF).scalar() or 0,
                onay_bekleyen_talep_sayisi=self.db.query(func.count(GorevTamamlamaTalebi.id)).filter(
                    GorevTamamlamaTalebi.durum.in_(ham_degerler(OnayDurumEnum.BEKLEMEDE))
                ).scalar() or 0,
                bekleyen_randevu_sayisi=self.db.query(func.count(RandevuTalebi.id)).filter(
                    RandevuTalebi.durum.in_(ham_degerler(OnayDurumEnum.BEKLEMEDE))
                ).scalar() or 0,
                yayindaki_haber_sayisi=self.db.query(func.count(Haber.id)).filter(
                    Haber.durum == modeller.HaberDurumEnum.YAYINDA.value
                ).scalar() or 0,
                forum_konu_sayisi=self.db.query(func.count(ForumKonusu.id)).scalar() or 0,
            )
        except SQLAlchemyError as e:
            logger.error(f"Dashboard özeti hesaplanırken hata: {e}", exc_info=True)
            return modeller.DashboardOzeti()

    def firma_ilerleme_satirlari(self) -> List[dict]:
        firmalar = self.db.query(Firma).filter(Firma.durum == AKTIF).order_by(Firma.firma_adi).all()
        ilerleme = IlerlemeHesaplamaService(self.db)
        egitim = EgitimService(self.db)
        return [
            {
                "firma_adi": f.firma_adi,
                "sektor": f.sektor or "",
                "gorev_ilerlemesi": ilerleme.genel_ilerleme(f.id),
                "hizmet_ortalamasi": ilerleme.hizmet_ilerlemesi(f.id).ortalama_ilerleme,
                "egitim_ilerlemesi": egitim.firma_ilerlemesi(f.id).ilerleme_yuzdesi,
            }
            for f in firmalar
        ]
