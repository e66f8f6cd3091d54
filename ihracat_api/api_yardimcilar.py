# ihracat_api/api_yardimcilar.py
import logging
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
from fastapi import HTTPException, status
from .modeller import OnayDurumEnum, ForumDurumEnum

logger = logging.getLogger(__name__)

class KayitBulunamadiHatasi(LookupError):
    """Aranan kayıt veritabanında yoksa fırlatılır (HTTP 404)."""

class CakismaHatasi(ValueError):
    """Kaydın mevcut durumu işleme izin vermiyorsa fırlatılır (HTTP 409)."""

class ErisimEngellendiHatasi(PermissionError):
    """Firma, hedeflenmediği bir kayda erişmeye çalışırsa fırlatılır (HTTP 403)."""

class GecersizDurumGecisiHatasi(CakismaHatasi):
    """İzin verilmeyen bir durum geçişi istendiğinde fırlatılır."""
    def __init__(self, mevcut: OnayDurumEnum, yeni: OnayDurumEnum):
        self.mevcut = mevcut
        self.yeni = yeni
        super().__init__(f"'{mevcut.value}' durumundan '{yeni.value}' durumuna geçiş yapılamaz.")

# Veritabanında karşılaşılan tüm yazımlar -> kanonik durum
DURUM_ESLESMELERI = {
    "Beklemede": OnayDurumEnum.BEKLEMEDE,
    "Onay Bekliyor": OnayDurumEnum.BEKLEMEDE,
    "Onaylandı": OnayDurumEnum.ONAYLANDI,
    "Onaylandi": OnayDurumEnum.ONAYLANDI,
    "Reddedildi": OnayDurumEnum.REDDEDILDI,
    "Red": OnayDurumEnum.REDDEDILDI,
    "Tamamlandı": OnayDurumEnum.TAMAMLANDI,
    "Tamamlandi": OnayDurumEnum.TAMAMLANDI,
    "Gerçekleşti": OnayDurumEnum.TAMAMLANDI,
}

IZINLI_GECISLER = {
    OnayDurumEnum.BEKLEMEDE: {OnayDurumEnum.ONAYLANDI, OnayDurumEnum.REDDEDILDI},
    OnayDurumEnum.ONAYLANDI: {OnayDurumEnum.TAMAMLANDI, OnayDurumEnum.REDDEDILDI},
    OnayDurumEnum.REDDEDILDI: set(),
    OnayDurumEnum.TAMAMLANDI: set(),
}

def normalize_durum(ham: Optional[str], varsayilan: OnayDurumEnum = OnayDurumEnum.BEKLEMEDE) -> OnayDurumEnum:
    """
    Veritabanından gelen durum metnini kanonik OnayDurumEnum değerine çevirir.
    Boş değerler ve tanınmayan yazımlar varsayılan değere düşer.
    """
    if isinstance(ham, OnayDurumEnum):
        return ham
    if ham is None:
        return varsayilan
    temiz = str(ham).strip()
    if not temiz:
        return varsayilan
    durum = DURUM_ESLESMELERI.get(temiz)
    if durum is None:
        logger.warning(f"Bilinmeyen durum değeri '{temiz}', '{varsayilan.value}' olarak kabul edildi.")
        return varsayilan
    return durum

def ham_degerler(durum: OnayDurumEnum) -> List[str]:
    """Bir kanonik duruma karşılık gelen, veritabanında saklanmış olabilecek tüm yazımlar."""
    return [ham for ham, kanonik in DURUM_ESLESMELERI.items() if kanonik == durum]

def gecis_dogrula(mevcut: OnayDurumEnum, yeni: OnayDurumEnum) -> None:
    if yeni not in IZINLI_GECISLER.get(mevcut, set()):
        raise GecersizDurumGecisiHatasi(mevcut, yeni)

def gorev_tamamlandi_mi(durum: Optional[str]) -> bool:
    return (durum or "").strip() in ("Tamamlandı", "Tamamlandi")

def forum_durumu_db_den(durum: Optional[str]) -> ForumDurumEnum:
    # Kilitli dışındaki her şey (Aktif, boş, eski değerler) açık sayılır
    return ForumDurumEnum.KILITLI if (durum or "").strip() == "Kilitli" else ForumDurumEnum.ACIK

def forum_durumu_db_ye(durum: ForumDurumEnum) -> str:
    return "Kilitli" if durum == ForumDurumEnum.KILITLI else "Aktif"

def yuzde_hesapla(pay: float, payda: float) -> int:
    """Yüzdeyi en yakın tam sayıya yuvarlar (.5 yukarı). Payda 0 ise 0 döner."""
    if not payda:
        return 0
    oran = Decimal(str(pay)) * 100 / Decimal(str(payda))
    return int(oran.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def durum_dagilimi(durumlar: Iterable[Optional[str]]) -> str:
    """Log satırları için 'Beklemede: 2, Onaylandı: 1' biçiminde özet üretir."""
    sayac = Counter(normalize_durum(d).value for d in durumlar)
    return ", ".join(f"{ad}: {adet}" for ad, adet in sayac.items())

def firma_listesinde_mi(firma_ids, firma_id: int) -> bool:
    """JSON kolonundaki firma id listesinin verilen firmayı içerip içermediğini kontrol eder."""
    if not firma_ids:
        return False
    return any(str(f) == str(firma_id) for f in firma_ids)

def http_hatasina_cevir(hata: Exception) -> HTTPException:
    """Servis katmanı hatalarını uygun HTTP durum koduna eşler."""
    if isinstance(hata, KayitBulunamadiHatasi):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(hata))
    if isinstance(hata, ErisimEngellendiHatasi):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(hata))
    if isinstance(hata, CakismaHatasi):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(hata))
    if isinstance(hata, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(hata))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Beklenmedik hata: {str(hata)}")
