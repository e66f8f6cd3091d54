# ihracat_api/modeller.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict, StringConstraints, model_validator
from datetime import date, datetime
from typing import ClassVar, List, Optional, Tuple, Annotated
import enum
from sqlalchemy import (
    Column, Integer, String, Boolean, Text, DateTime, Date, JSON,
    ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from .veritabani import Base

# --- ENUM TANIMLARI ---
class KayitDurumEnum(str, enum.Enum): AKTIF = "Aktif"; PASIF = "Pasif"; SILINDI = "Silindi"
class GorevDurumEnum(str, enum.Enum): AKTIF = "Aktif"; DEVAM_EDIYOR = "Devam Ediyor"; TAMAMLANDI = "Tamamlandı"; PASIF = "Pasif"; SILINDI = "Silindi"
class OncelikEnum(str, enum.Enum): DUSUK = "Düşük"; ORTA = "Orta"; YUKSEK = "Yüksek"
class OnayDurumEnum(str, enum.Enum): BEKLEMEDE = "Beklemede"; ONAYLANDI = "Onaylandı"; REDDEDILDI = "Reddedildi"; TAMAMLANDI = "Tamamlandı"
class KararEnum(str, enum.Enum): ONAYLANDI = "Onaylandı"; REDDEDILDI = "Reddedildi"
class HizmetDurumEnum(str, enum.Enum): BASLAMADI = "Başlamadı"; DEVAM_EDIYOR = "Devam Ediyor"; TAMAMLANDI = "Tamamlandı"
class ForumDurumEnum(str, enum.Enum): ACIK = "Açık"; KILITLI = "Kilitli"
class HaberDurumEnum(str, enum.Enum): TASLAK = "taslak"; YAYINDA = "yayinda"; ARSIV = "arsiv"
class HaberTuruEnum(str, enum.Enum): DUYURU = "duyuru"; HABER = "haber"; DANISAN_NOTU = "danisan_notu"
class RolEnum(str, enum.Enum): ADMIN = "Admin"; PERSONEL = "Personel"

# Boşluklardan arındırılmış, boş olamayan metin
DoluMetin = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# --- PYDANTIC ŞEMALARI İÇİN TEMEL MODELLER ---
class BaseOrmModel(BaseModel): model_config = ConfigDict(from_attributes=True)

class TarihAraligiMixin(BaseModel):
    """Bitiş tarihinin başlangıç tarihinden önce olmamasını doğrular."""
    @model_validator(mode="after")
    def tarih_araligini_kontrol_et(self):
        baslangic = getattr(self, "baslangic_tarihi", None)
        bitis = getattr(self, "bitis_tarihi", None)
        if baslangic and bitis and bitis < baslangic:
            raise ValueError("Bitiş tarihi başlangıç tarihinden önce olamaz.")
        return self

class GuncellemeModel(BaseModel):
    """Kısmi güncelleme şemaları için temel. Zorunlu alanlara açıkça null gönderilemez."""
    bos_birakilamaz: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def zorunlu_alanlari_kontrol_et(self):
        for alan in self.bos_birakilamaz:
            if alan in self.model_fields_set and getattr(self, alan) is None:
                raise ValueError(f"'{alan}' alanı boş bırakılamaz.")
        return self

class MesajYanit(BaseModel):
    message: str

# --- FİRMA MODELLERİ (ORM) ---
class Firma(Base):
    __tablename__ = 'firmalar'

    id = Column(Integer, primary_key=True, index=True)
    firma_adi = Column(String(200), unique=True, nullable=False)
    yetkili_adi = Column(String(100))
    yetkili_email = Column(String(100))
    telefon = Column(String(30))
    adres = Column(Text)
    sektor = Column(String(100))
    vergi_numarasi = Column(String(30))
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value, index=True)
    firma_profil_durumu = Column(String(30), default="Eksik")
    kayit_tarihi = Column(DateTime, default=datetime.now)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    hizmetler = relationship("FirmaHizmeti", back_populates="firma", cascade="all, delete-orphan")

class FirmaHizmeti(Base):
    __tablename__ = 'firma_hizmetleri'

    id = Column(Integer, primary_key=True, index=True)
    firma_id = Column(Integer, ForeignKey('firmalar.id', ondelete="CASCADE"), nullable=False, index=True)
    hizmet_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    durum = Column(String(30), default=HizmetDurumEnum.BASLAMADI.value)
    ilerleme_yuzdesi = Column(Integer, default=0)
    danisman_notlari = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    firma = relationship("Firma", back_populates="hizmetler")

# Firma Modelleri (Pydantic)
class FirmaBase(BaseOrmModel):
    yetkili_adi: Optional[str] = None
    yetkili_email: Optional[EmailStr] = None
    telefon: Optional[str] = None
    adres: Optional[str] = None
    sektor: Optional[str] = None
    vergi_numarasi: Optional[str] = None
    firma_profil_durumu: Optional[str] = "Eksik"

class FirmaCreate(FirmaBase):
    firma_adi: DoluMetin
    durum: KayitDurumEnum = KayitDurumEnum.AKTIF

class FirmaUpdate(GuncellemeModel):
    bos_birakilamaz = ("firma_adi", "durum")
    firma_adi: Optional[DoluMetin] = None
    yetkili_adi: Optional[str] = None
    yetkili_email: Optional[EmailStr] = None
    telefon: Optional[str] = None
    adres: Optional[str] = None
    sektor: Optional[str] = None
    vergi_numarasi: Optional[str] = None
    durum: Optional[KayitDurumEnum] = None
    firma_profil_durumu: Optional[str] = None

class FirmaRead(FirmaBase):
    id: int
    firma_adi: str
    durum: str
    kayit_tarihi: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class FirmaListResponse(BaseModel):
    items: List[FirmaRead]
    total: int

class FirmaHizmetiCreate(BaseModel):
    hizmet_adi: DoluMetin
    aciklama: Optional[str] = None
    durum: HizmetDurumEnum = HizmetDurumEnum.BASLAMADI
    ilerleme_yuzdesi: int = Field(0, ge=0, le=100)
    danisman_notlari: Optional[str] = None

class FirmaHizmetiUpdate(GuncellemeModel):
    bos_birakilamaz = ("hizmet_adi", "durum", "ilerleme_yuzdesi")
    hizmet_adi: Optional[DoluMetin] = None
    aciklama: Optional[str] = None
    durum: Optional[HizmetDurumEnum] = None
    ilerleme_yuzdesi: Optional[int] = Field(None, ge=0, le=100)
    danisman_notlari: Optional[str] = None

class FirmaHizmetiRead(BaseOrmModel):
    id: int
    firma_id: int
    hizmet_adi: str
    aciklama: Optional[str] = None
    durum: str
    ilerleme_yuzdesi: int
    danisman_notlari: Optional[str] = None

class HizmetIlerlemeDetay(BaseModel):
    hizmet_adi: str
    ilerleme: int
    durum: str

class HizmetIlerlemeOzeti(BaseModel):
    ortalama_ilerleme: int = 0
    tamamlanan_hizmet: int = 0
    toplam_hizmet: int = 0
    detaylar: List[HizmetIlerlemeDetay] = []

class EgitimIlerlemesi(BaseModel):
    toplam_video_sayisi: int = 0
    izlenen_video_sayisi: int = 0
    ilerleme_yuzdesi: int = 0
    tamamlanan_set_sayisi: int = 0
    toplam_set_sayisi: int = 0

class FirmaIlerlemeYanit(BaseModel):
    firma_id: int
    genel_ilerleme: int
    hizmetler: HizmetIlerlemeOzeti
    egitim: EgitimIlerlemesi
# --- FİRMA MODELLERİ SONU ---

# --- KULLANICI (PERSONEL) MODELLERİ ---
class Kullanici(Base):
    __tablename__ = 'kullanicilar'

    id = Column(Integer, primary_key=True, index=True)
    ad_soyad = Column(String(150), nullable=False)
    email = Column(String(100), unique=True)
    rol = Column(String(30), default=RolEnum.PERSONEL.value)
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

class KullaniciCreate(BaseModel):
    ad_soyad: DoluMetin
    email: Optional[EmailStr] = None
    rol: RolEnum = RolEnum.PERSONEL
    durum: KayitDurumEnum = KayitDurumEnum.AKTIF

class KullaniciUpdate(GuncellemeModel):
    bos_birakilamaz = ("ad_soyad", "rol", "durum")
    ad_soyad: Optional[DoluMetin] = None
    email: Optional[EmailStr] = None
    rol: Optional[RolEnum] = None
    durum: Optional[KayitDurumEnum] = None

class KullaniciRead(BaseOrmModel):
    id: int
    ad_soyad: str
    email: Optional[str] = None
    rol: str
    durum: str
# --- KULLANICI MODELLERİ SONU ---

# --- PROJE / ALT PROJE / GÖREV MODELLERİ (ORM) ---
class Proje(Base):
    __tablename__ = 'projeler'

    id = Column(Integer, primary_key=True, index=True)
    proje_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    kategori = Column(String(100))
    durum = Column(String(30), default=GorevDurumEnum.AKTIF.value, index=True)
    oncelik = Column(String(20), default=OncelikEnum.ORTA.value)
    baslangic_tarihi = Column(Date)
    bitis_tarihi = Column(Date)
    hedef_firmalar = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    alt_projeler = relationship("AltProje", back_populates="proje")
    gorevler = relationship("Gorev", back_populates="proje")

class AltProje(Base):
    __tablename__ = 'alt_projeler'

    id = Column(Integer, primary_key=True, index=True)
    proje_id = Column(Integer, ForeignKey('projeler.id'), nullable=False, index=True)
    alt_proje_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    durum = Column(String(30), default=GorevDurumEnum.AKTIF.value)
    oncelik = Column(String(20), default=OncelikEnum.ORTA.value)
    baslangic_tarihi = Column(Date)
    bitis_tarihi = Column(Date)
    atanan_firmalar = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    proje = relationship("Proje", back_populates="alt_projeler")
    gorevler = relationship("Gorev", back_populates="alt_proje")

class Gorev(Base):
    __tablename__ = 'gorevler'

    id = Column(Integer, primary_key=True, index=True)
    proje_id = Column(Integer, ForeignKey('projeler.id'), nullable=False, index=True)
    alt_proje_id = Column(Integer, ForeignKey('alt_projeler.id'), nullable=True)
    gorev_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    atanan_firmalar = Column(JSON, default=list)
    durum = Column(String(30), default=GorevDurumEnum.AKTIF.value, index=True)
    oncelik = Column(String(20), default=OncelikEnum.ORTA.value)
    baslangic_tarihi = Column(Date)
    bitis_tarihi = Column(Date)
    yuzde_katki = Column(Integer, default=10)
    sira_no = Column(Integer, default=1)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    proje = relationship("Proje", back_populates="gorevler")
    alt_proje = relationship("AltProje", back_populates="gorevler")
    tamamlama_talepleri = relationship("GorevTamamlamaTalebi", back_populates="gorev")

# Proje Modelleri (Pydantic)
class ProjeCreate(TarihAraligiMixin):
    proje_adi: DoluMetin
    aciklama: Optional[str] = None
    kategori: Optional[str] = None
    durum: GorevDurumEnum = GorevDurumEnum.AKTIF
    oncelik: OncelikEnum = OncelikEnum.ORTA
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    hedef_firmalar: List[int] = []

class ProjeUpdate(TarihAraligiMixin, GuncellemeModel):
    bos_birakilamaz = ("proje_adi", "durum", "oncelik", "hedef_firmalar")
    proje_adi: Optional[DoluMetin] = None
    aciklama: Optional[str] = None
    kategori: Optional[str] = None
    durum: Optional[GorevDurumEnum] = None
    oncelik: Optional[OncelikEnum] = None
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    hedef_firmalar: Optional[List[int]] = None

class ProjeRead(BaseOrmModel):
    id: int
    proje_adi: str
    aciklama: Optional[str] = None
    kategori: Optional[str] = None
    durum: str
    oncelik: str
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    hedef_firmalar: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    alt_proje_sayisi: int = 0
    gorev_sayisi: int = 0
    atanan_firma_adlari: str = "Atanmamış"

class AltProjeCreate(TarihAraligiMixin):
    alt_proje_adi: DoluMetin
    aciklama: Optional[str] = None
    durum: GorevDurumEnum = GorevDurumEnum.AKTIF
    oncelik: OncelikEnum = OncelikEnum.ORTA
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    atanan_firmalar: List[int] = []

class AltProjeUpdate(TarihAraligiMixin, GuncellemeModel):
    bos_birakilamaz = ("alt_proje_adi", "durum", "oncelik", "atanan_firmalar")
    alt_proje_adi: Optional[DoluMetin] = None
    aciklama: Optional[str] = None
    durum: Optional[GorevDurumEnum] = None
    oncelik: Optional[OncelikEnum] = None
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    atanan_firmalar: Optional[List[int]] = None

class AltProjeRead(BaseOrmModel):
    id: int
    proje_id: int
    alt_proje_adi: str
    aciklama: Optional[str] = None
    durum: str
    oncelik: str
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    atanan_firmalar: List[int] = []
    gorev_sayisi: int = 0

class GorevCreate(TarihAraligiMixin):
    gorev_adi: DoluMetin
    alt_proje_id: Optional[int] = None
    aciklama: Optional[str] = None
    atanan_firmalar: List[int] = []
    durum: GorevDurumEnum = GorevDurumEnum.AKTIF
    oncelik: OncelikEnum = OncelikEnum.ORTA
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    yuzde_katki: int = Field(10, ge=0, le=100)
    sira_no: int = Field(1, ge=1)

class GorevUpdate(TarihAraligiMixin, GuncellemeModel):
    bos_birakilamaz = ("gorev_adi", "atanan_firmalar", "durum", "oncelik", "yuzde_katki", "sira_no")
    gorev_adi: Optional[DoluMetin] = None
    alt_proje_id: Optional[int] = None
    aciklama: Optional[str] = None
    atanan_firmalar: Optional[List[int]] = None
    durum: Optional[GorevDurumEnum] = None
    oncelik: Optional[OncelikEnum] = None
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    yuzde_katki: Optional[int] = Field(None, ge=0, le=100)
    sira_no: Optional[int] = Field(None, ge=1)

class GorevRead(BaseOrmModel):
    id: int
    proje_id: int
    alt_proje_id: Optional[int] = None
    gorev_adi: str
    aciklama: Optional[str] = None
    atanan_firmalar: List[int] = []
    durum: str
    oncelik: str
    baslangic_tarihi: Optional[date] = None
    bitis_tarihi: Optional[date] = None
    yuzde_katki: int
    sira_no: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class FirmaGorevRead(GorevRead):
    proje_adi: Optional[str] = None
    alt_proje_adi: Optional[str] = None

class IlerlemeYanit(BaseModel):
    firma_id: int
    proje_id: Optional[int] = None
    ilerleme_yuzdesi: int
# --- PROJE MODELLERİ SONU ---

# --- GÖREV TAMAMLAMA TALEBİ MODELLERİ ---
class GorevTamamlamaTalebi(Base):
    __tablename__ = 'gorev_tamamlama_talepleri'

    id = Column(Integer, primary_key=True, index=True)
    gorev_id = Column(Integer, ForeignKey('gorevler.id'), nullable=False, index=True)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False, index=True)
    talep_tarihi = Column(DateTime, default=datetime.now)
    tamamlama_notu = Column(Text, nullable=False)
    durum = Column(String(30), default=OnayDurumEnum.BEKLEMEDE.value, index=True)
    admin_notu = Column(Text)
    admin_personel_id = Column(Integer, ForeignKey('kullanicilar.id'), nullable=True)
    onay_tarihi = Column(DateTime, nullable=True)
    kanit_dosya_url = Column(String(500))
    kanit_dosya_adi = Column(String(255))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    gorev = relationship("Gorev", back_populates="tamamlama_talepleri")
    firma = relationship("Firma")

class GorevTamamlamaTalebiCreate(BaseModel):
    gorev_id: int
    firma_id: int
    tamamlama_notu: str
    kanit_dosya_url: Optional[str] = None
    kanit_dosya_adi: Optional[str] = None

class GorevTamamlamaKarar(BaseModel):
    durum: KararEnum
    admin_notu: Optional[str] = None
    admin_personel_id: Optional[int] = None

class GorevTamamlamaTalebiRead(BaseModel):
    id: int
    gorev_id: int
    firma_id: int
    tamamlama_notu: str = ""
    kanit_dosya_url: Optional[str] = None
    kanit_dosya_adi: Optional[str] = None
    talep_tarihi: Optional[datetime] = None
    durum: OnayDurumEnum
    onay_tarihi: Optional[datetime] = None
    admin_notu: Optional[str] = None
    admin_personel_id: Optional[int] = None
    gorev_basligi: str = "Bilinmeyen Görev"
    proje_basligi: str = "Bilinmeyen Proje"
    firma_adi: str = "Bilinmeyen Firma"
# --- GÖREV TAMAMLAMA TALEBİ MODELLERİ SONU ---

# --- EĞİTİM MODELLERİ ---
class EgitimSeti(Base):
    __tablename__ = 'egitim_setleri'

    id = Column(Integer, primary_key=True, index=True)
    set_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    kategori = Column(String(100), default="Genel")
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value, index=True)
    toplam_video_sayisi = Column(Integer, default=0)
    toplam_sure = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    videolar = relationship("EgitimVideosu", back_populates="egitim_seti")

class EgitimVideosu(Base):
    __tablename__ = 'egitim_videolari'

    id = Column(Integer, primary_key=True, index=True)
    egitim_set_id = Column(Integer, ForeignKey('egitim_setleri.id'), nullable=False, index=True)
    video_adi = Column(String(200), nullable=False)
    video_url = Column(String(500))
    video_suresi = Column(Integer, default=0)
    sira_no = Column(Integer, default=1)
    aciklama = Column(Text)
    pdf_url = Column(String(500))
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    egitim_seti = relationship("EgitimSeti", back_populates="videolar")

class EgitimSetFirmaAtamasi(Base):
    __tablename__ = 'egitim_set_firma_atamalari'
    __table_args__ = (UniqueConstraint('egitim_set_id', 'firma_id'),)

    id = Column(Integer, primary_key=True, index=True)
    egitim_set_id = Column(Integer, ForeignKey('egitim_setleri.id'), nullable=False)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False, index=True)
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value)
    atama_tarihi = Column(DateTime, default=datetime.now)

class VideoIzleme(Base):
    __tablename__ = 'video_izlemeleri'
    __table_args__ = (UniqueConstraint('firma_id', 'video_id'),)

    id = Column(Integer, primary_key=True, index=True)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False, index=True)
    video_id = Column(Integer, ForeignKey('egitim_videolari.id'), nullable=False)
    tamamlandi = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

class GeriBildirim(Base):
    __tablename__ = 'geri_bildirimler'
    __table_args__ = (UniqueConstraint('firma_id', 'egitim_set_id'),)

    id = Column(Integer, primary_key=True, index=True)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False)
    egitim_set_id = Column(Integer, ForeignKey('egitim_setleri.id'), nullable=False)
    puan = Column(Integer, nullable=False)
    yorum = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

# Eğitim Modelleri (Pydantic)
class EgitimSetiCreate(BaseModel):
    set_adi: DoluMetin
    aciklama: Optional[str] = None
    kategori: str = "Genel"
    durum: KayitDurumEnum = KayitDurumEnum.AKTIF

class EgitimSetiUpdate(GuncellemeModel):
    bos_birakilamaz = ("set_adi", "durum")
    set_adi: Optional[DoluMetin] = None
    aciklama: Optional[str] = None
    kategori: Optional[str] = None
    durum: Optional[KayitDurumEnum] = None

class EgitimSetiRead(BaseOrmModel):
    id: int
    set_adi: str
    aciklama: Optional[str] = None
    kategori: Optional[str] = "Genel"
    durum: str
    toplam_video_sayisi: int = 0
    toplam_sure: int = 0
    created_at: Optional[datetime] = None

class FirmaEgitimSetiRead(EgitimSetiRead):
    atanmis_mi: bool = False
    kilitli: bool = True

class EgitimVideosuCreate(BaseModel):
    video_adi: DoluMetin
    video_url: Optional[str] = None
    video_suresi: int = Field(0, ge=0)
    sira_no: int = Field(1, ge=1)
    aciklama: Optional[str] = None
    pdf_url: Optional[str] = None

class EgitimVideosuUpdate(GuncellemeModel):
    bos_birakilamaz = ("video_adi", "video_suresi", "sira_no")
    video_adi: Optional[DoluMetin] = None
    video_url: Optional[str] = None
    video_suresi: Optional[int] = Field(None, ge=0)
    sira_no: Optional[int] = Field(None, ge=1)
    aciklama: Optional[str] = None
    pdf_url: Optional[str] = None

class EgitimVideosuRead(BaseOrmModel):
    id: int
    egitim_set_id: int
    video_adi: str
    video_url: Optional[str] = None
    video_suresi: int = 0
    sira_no: int = 1
    aciklama: Optional[str] = None
    pdf_url: Optional[str] = None
    durum: str

class EgitimAtamaIstegi(BaseModel):
    firma_ids: List[int] = Field(..., min_length=1)

class VideoIzlemeIstegi(BaseModel):
    firma_id: int
    video_id: int
    tamamlandi: bool = True

class DegerlendirmeIstegi(BaseModel):
    firma_id: int
    egitim_set_id: int
    puan: int = Field(..., ge=1, le=5)
    yorum: Optional[str] = None
# --- EĞİTİM MODELLERİ SONU ---

# --- ETKİNLİK MODELLERİ ---
class Etkinlik(Base):
    __tablename__ = 'etkinlikler'

    id = Column(Integer, primary_key=True, index=True)
    etkinlik_adi = Column(String(200), nullable=False)
    aciklama = Column(Text)
    etkinlik_tarihi = Column(Date, nullable=False)
    etkinlik_saati = Column(String(5), default="00:00")
    konum = Column(String(200), default="Online")
    kategori = Column(String(100), default="Genel")
    kontenjan = Column(Integer, default=0)
    durum = Column(String(20), default=KayitDurumEnum.AKTIF.value, index=True)
    hedef_firmalar = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    katilimcilar = relationship("EtkinlikKatilimcisi", back_populates="etkinlik", cascade="all, delete-orphan")

class EtkinlikKatilimcisi(Base):
    __tablename__ = 'etkinlik_katilimcilari'
    __table_args__ = (UniqueConstraint('etkinlik_id', 'firma_id'),)

    id = Column(Integer, primary_key=True, index=True)
    etkinlik_id = Column(Integer, ForeignKey('etkinlikler.id', ondelete="CASCADE"), nullable=False)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False, index=True)
    katilim_durumu = Column(String(30), default="Katıldı")
    katilim_tarihi = Column(DateTime, default=datetime.now)

    etkinlik = relationship("Etkinlik", back_populates="katilimcilar")

SaatMetni = Annotated[str, StringConstraints(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]

class EtkinlikCreate(BaseModel):
    etkinlik_adi: DoluMetin
    aciklama: Optional[str] = None
    etkinlik_tarihi: date
    etkinlik_saati: SaatMetni = "00:00"
    konum: str = "Online"
    kategori: str = "Genel"
    kontenjan: int = Field(0, ge=0)
    durum: KayitDurumEnum = KayitDurumEnum.AKTIF
    hedef_firmalar: List[int] = []

class EtkinlikUpdate(GuncellemeModel):
    bos_birakilamaz = ("etkinlik_adi", "etkinlik_tarihi", "etkinlik_saati", "konum", "kategori", "kontenjan", "durum", "hedef_firmalar")
    etkinlik_adi: Optional[DoluMetin] = None
    aciklama: Optional[str] = None
    etkinlik_tarihi: Optional[date] = None
    etkinlik_saati: Optional[SaatMetni] = None
    konum: Optional[str] = None
    kategori: Optional[str] = None
    kontenjan: Optional[int] = Field(None, ge=0)
    durum: Optional[KayitDurumEnum] = None
    hedef_firmalar: Optional[List[int]] = None

class EtkinlikRead(BaseOrmModel):
    id: int
    etkinlik_adi: str
    aciklama: Optional[str] = None
    etkinlik_tarihi: date
    etkinlik_saati: str = "00:00"
    konum: str = "Online"
    kategori: str = "Genel"
    kontenjan: int = 0
    durum: str
    hedef_firmalar: List[int] = []
    katilimci_sayisi: int = 0

class KatilimIstegi(BaseModel):
    firma_id: int

class KatilimRead(BaseModel):
    id: int
    etkinlik_id: int
    firma_id: int
    katilim_durumu: str
    katilim_tarihi: Optional[datetime] = None
    etkinlik_adi: str = "Bilinmeyen Etkinlik"
    etkinlik_tarihi: Optional[date] = None
    etkinlik_saati: str = "00:00"
    konum: str = "Online"
    kategori: str = "Genel"
# --- ETKİNLİK MODELLERİ SONU ---

# --- HABER MODELLERİ ---
class Haber(Base):
    __tablename__ = 'haberler'

    id = Column(Integer, primary_key=True, index=True)
    baslik = Column(String(300), nullable=False)
    kisa_aciklama = Column(Text)
    detayli_icerik = Column(Text)
    gorsel_url = Column(String(500))
    video_url = Column(String(500))
    yayin_tarihi = Column(DateTime, default=datetime.now)
    durum = Column(String(20), default=HaberDurumEnum.TASLAK.value, index=True)
    haber_turu = Column(String(30), default=HaberTuruEnum.HABER.value)
    etiketler = Column(JSON, default=list)
    okunma_sayisi = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

class HaberCreate(BaseModel):
    baslik: DoluMetin
    kisa_aciklama: Optional[str] = None
    detayli_icerik: Optional[str] = None
    gorsel_url: Optional[str] = None
    video_url: Optional[str] = None
    yayin_tarihi: Optional[datetime] = None
    durum: HaberDurumEnum = HaberDurumEnum.TASLAK
    haber_turu: HaberTuruEnum = HaberTuruEnum.HABER
    etiketler: List[str] = []

class HaberUpdate(GuncellemeModel):
    bos_birakilamaz = ("baslik", "durum", "haber_turu", "etiketler")
    baslik: Optional[DoluMetin] = None
    kisa_aciklama: Optional[str] = None
    detayli_icerik: Optional[str] = None
    gorsel_url: Optional[str] = None
    video_url: Optional[str] = None
    yayin_tarihi: Optional[datetime] = None
    durum: Optional[HaberDurumEnum] = None
    haber_turu: Optional[HaberTuruEnum] = None
    etiketler: Optional[List[str]] = None

class HaberRead(BaseOrmModel):
    id: int
    baslik: str
    kisa_aciklama: Optional[str] = None
    detayli_icerik: Optional[str] = None
    gorsel_url: Optional[str] = None
    video_url: Optional[str] = None
    yayin_tarihi: Optional[datetime] = None
    durum: str
    haber_turu: str
    etiketler: List[str] = []
    okunma_sayisi: int = 0
    created_at: Optional[datetime] = None

class HaberIstatistikleri(BaseModel):
    toplam: int = 0
    yayinda: int = 0
    taslak: int = 0
    bu_ay: int = 0
# --- HABER MODELLERİ SONU ---

# --- FORUM MODELLERİ ---
class ForumKonusu(Base):
    __tablename__ = 'forum_konular'

    id = Column(Integer, primary_key=True, index=True)
    baslik = Column(String(300), nullable=False)
    icerik = Column(Text)
    kategori = Column(String(100), default="Genel", index=True)
    yazar_id = Column(Integer, nullable=True)
    yazar_adi = Column(String(150))
    yazar_firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=True)
    durum = Column(String(20), default="Aktif")
    sabitleme = Column(Boolean, default=False)
    goruntulenme_sayisi = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now)

    cevaplar = relationship("ForumYorumu", back_populates="konu", cascade="all, delete-orphan")

class ForumYorumu(Base):
    __tablename__ = 'forum_yorumlar'

    id = Column(Integer, primary_key=True, index=True)
    konu_id = Column(Integer, ForeignKey('forum_konular.id', ondelete="CASCADE"), nullable=False, index=True)
    yazar_id = Column(Integer, nullable=True)
    yazar_adi = Column(String(150))
    yazar_firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=True)
    yorum_metni = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    konu = relationship("ForumKonusu", back_populates="cevaplar")

class ForumKonusuCreate(BaseModel):
    baslik: DoluMetin
    icerik: DoluMetin
    kategori: str = "Genel"
    yazar_id: Optional[int] = None
    yazar_adi: Optional[str] = None
    yazar_firma_id: Optional[int] = None
    sabitleme: bool = False

class ForumKonusuRead(BaseModel):
    id: int
    baslik: str
    icerik: str = ""
    kategori: str = "Genel"
    yazar_firma_id: Optional[int] = None
    firma_adi: str
    durum: ForumDurumEnum
    sabitleme: bool = False
    goruntulenme_sayisi: int = 0
    cevap_sayisi: int = 0
    olusturma_tarihi: datetime
    son_mesaj_tarihi: datetime

class ForumDurumGuncelle(BaseModel):
    durum: ForumDurumEnum

class ForumCevabiCreate(BaseModel):
    yorum_metni: DoluMetin
    yazar_id: Optional[int] = None
    yazar_adi: Optional[str] = None
    yazar_firma_id: Optional[int] = None

class ForumCevabiRead(BaseModel):
    id: int
    konu_id: int
    yazar_firma_id: Optional[int] = None
    yazar_id: Optional[int] = None
    cevap_metni: str
    cevap_tarihi: datetime
    yazar_adi: str
    yazar_tipi: str

class KategoriIstatistigi(BaseModel):
    kategori: str
    konu_sayisi: int
    cevap_sayisi: int
# --- FORUM MODELLERİ SONU ---

# --- RANDEVU TALEBİ MODELLERİ ---
class RandevuTalebi(Base):
    __tablename__ = 'randevu_talepleri'

    id = Column(Integer, primary_key=True, index=True)
    firma_id = Column(Integer, ForeignKey('firmalar.id'), nullable=False, index=True)
    konu = Column(String(300), nullable=False)
    mesaj = Column(Text)
    tercih_edilen_tarih_saat_1 = Column(DateTime, nullable=False)
    tercih_edilen_tarih_saat_2 = Column(DateTime, nullable=True)
    tercih_edilen_tarih_saat_3 = Column(DateTime, nullable=True)
    talep_tarihi = Column(DateTime, default=datetime.now)
    durum = Column(String(30), default=OnayDurumEnum.BEKLEMEDE.value, index=True)
    atanan_personel_id = Column(Integer, ForeignKey('kullanicilar.id'), nullable=True)
    gerceklesen_tarih_saat = Column(DateTime, nullable=True)
    admin_notu = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    firma = relationship("Firma")
    atanan_personel = relationship("Kullanici")

class RandevuTalebiCreate(BaseModel):
    firma_id: int = Field(..., gt=0)
    konu: DoluMetin
    mesaj: DoluMetin
    tercih_edilen_tarih_saat_1: datetime
    tercih_edilen_tarih_saat_2: Optional[datetime] = None
    tercih_edilen_tarih_saat_3: Optional[datetime] = None

class RandevuTalebiUpdate(GuncellemeModel):
    bos_birakilamaz = ("durum",)
    durum: Optional[OnayDurumEnum] = None
    atanan_personel_id: Optional[int] = None
    gerceklesen_tarih_saat: Optional[datetime] = None
    admin_notu: Optional[str] = None

class RandevuTalebiRead(BaseModel):
    id: int
    firma_id: int
    firma_adi: str = "Bilinmeyen Firma"
    konu: str = ""
    mesaj: str = ""
    tercih_edilen_tarih_saat_1: Optional[datetime] = None
    tercih_edilen_tarih_saat_2: Optional[datetime] = None
    tercih_edilen_tarih_saat_3: Optional[datetime] = None
    talep_tarihi: Optional[datetime] = None
    durum: OnayDurumEnum
    atanan_personel_id: Optional[int] = None
    personel_adi: Optional[str] = None
    gerceklesen_tarih_saat: Optional[datetime] = None
    admin_notu: Optional[str] = None

class RandevuIstatistikleri(BaseModel):
    toplam: int = 0
    beklemede: int = 0
    onaylandi: int = 0
    reddedildi: int = 0
    tamamlandi: int = 0
    haftanin_toplami: int = 0
    bu_ay_toplam: int = 0
    bugunku_talepler: int = 0
    gecen_ay_toplam: int = 0
# --- RANDEVU TALEBİ MODELLERİ SONU ---

# --- RAPOR MODELLERİ ---
class DashboardOzeti(BaseModel):
    aktif_firma_sayisi: int = 0
    aktif_proje_sayisi: int = 0
    onay_bekleyen_talep_sayisi: int = 0
    bekleyen_randevu_sayisi: int = 0
    yayindaki_haber_sayisi: int = 0
    forum_konu_sayisi: int = 0
