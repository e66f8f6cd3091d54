import logging
import pytest
from ihracat_api.api_yardimcilar import (
    normalize_durum, ham_degerler, gecis_dogrula, gorev_tamamlandi_mi,
    forum_durumu_db_den, forum_durumu_db_ye, yuzde_hesapla, durum_dagilimi,
    firma_listesinde_mi, http_hatasina_cevir, GecersizDurumGecisiHatasi,
    KayitBulunamadiHatasi, CakismaHatasi, ErisimEngellendiHatasi
)
from ihracat_api.modeller import OnayDurumEnum, ForumDurumEnum


@pytest.mark.parametrize("ham, beklenen", [
    ("Beklemede", OnayDurumEnum.BEKLEMEDE),
    ("Onay Bekliyor", OnayDurumEnum.BEKLEMEDE),
    ("Onaylandi", OnayDurumEnum.ONAYLANDI),
    ("  Onaylandı ", OnayDurumEnum.ONAYLANDI),
    ("Red", OnayDurumEnum.REDDEDILDI),
    ("Tamamlandi", OnayDurumEnum.TAMAMLANDI),
    ("Gerçekleşti", OnayDurumEnum.TAMAMLANDI),
])
def test_normalize_durum_eslesmeleri(ham, beklenen):
    assert normalize_durum(ham) == beklenen


def test_normalize_durum_bos_ve_none_varsayilana_duser():
    assert normalize_durum(None) == OnayDurumEnum.BEKLEMEDE
    assert normalize_durum("   ") == OnayDurumEnum.BEKLEMEDE
    assert normalize_durum(None, OnayDurumEnum.ONAYLANDI) == OnayDurumEnum.ONAYLANDI


def test_normalize_durum_bilinmeyen_deger_uyari_verir(caplog):
    with caplog.at_level(logging.WARNING):
        assert normalize_durum("İptal") == OnayDurumEnum.BEKLEMEDE
    assert "İptal" in caplog.text


def test_ham_degerler_tum_yazimlari_doner():
    assert set(ham_degerler(OnayDurumEnum.BEKLEMEDE)) == {"Beklemede", "Onay Bekliyor"}
    assert "Gerçekleşti" in ham_degerler(OnayDurumEnum.TAMAMLANDI)


@pytest.mark.parametrize("mevcut, yeni", [
    (OnayDurumEnum.BEKLEMEDE, OnayDurumEnum.ONAYLANDI),
    (OnayDurumEnum.BEKLEMEDE, OnayDurumEnum.REDDEDILDI),
    (OnayDurumEnum.ONAYLANDI, OnayDurumEnum.TAMAMLANDI),
    (OnayDurumEnum.ONAYLANDI, OnayDurumEnum.REDDEDILDI),
])
def test_gecis_dogrula_izinli_gecisler(mevcut, yeni):
    gecis_dogrula(mevcut, yeni)


@pytest.mark.parametrize("mevcut, yeni", [
    (OnayDurumEnum.BEKLEMEDE, OnayDurumEnum.TAMAMLANDI),
    (OnayDurumEnum.BEKLEMEDE, OnayDurumEnum.BEKLEMEDE),
    (OnayDurumEnum.REDDEDILDI, OnayDurumEnum.ONAYLANDI),
    (OnayDurumEnum.TAMAMLANDI, OnayDurumEnum.REDDEDILDI),
])
def test_gecis_dogrula_gecersiz_gecisler(mevcut, yeni):
    with pytest.raises(GecersizDurumGecisiHatasi):
        gecis_dogrula(mevcut, yeni)


def test_gorev_tamamlandi_mi():
    assert gorev_tamamlandi_mi("Tamamlandı")
    assert gorev_tamamlandi_mi("Tamamlandi")
    assert not gorev_tamamlandi_mi("Aktif")
    assert not gorev_tamamlandi_mi(None)


def test_forum_durumu_donusumleri():
    assert forum_durumu_db_den("Kilitli") == ForumDurumEnum.KILITLI
    assert forum_durumu_db_den("Aktif") == ForumDurumEnum.ACIK
    assert forum_durumu_db_den(None) == ForumDurumEnum.ACIK
    assert forum_durumu_db_ye(ForumDurumEnum.ACIK) == "Aktif"
    assert forum_durumu_db_ye(ForumDurumEnum.KILITLI) == "Kilitli"


def test_yuzde_hesapla_yukari_yuvarlar_ve_sifir_paydada_sifir_doner():
    assert yuzde_hesapla(1, 8) == 13   # 12.5
    assert yuzde_hesapla(1, 3) == 33
    assert yuzde_hesapla(2, 3) == 67
    assert yuzde_hesapla(5, 0) == 0
    assert yuzde_hesapla(0, 4) == 0


def test_durum_dagilimi_ozeti():
    ozet = durum_dagilimi(["Beklemede", "Onay Bekliyor", "Onaylandi"])
    assert ozet == "Beklemede: 2, Onaylandı: 1"


def test_firma_listesinde_mi_metin_ve_sayi_idlerini_kabul_eder():
    assert firma_listesinde_mi([1, 2], 2)
    assert firma_listesinde_mi(["3"], 3)
    assert not firma_listesinde_mi([], 1)
    assert not firma_listesinde_mi(None, 1)


@pytest.mark.parametrize("hata, kod", [
    (KayitBulunamadiHatasi("yok"), 404),
    (ErisimEngellendiHatasi("yasak"), 403),
    (CakismaHatasi("çakışma"), 409),
    (GecersizDurumGecisiHatasi(OnayDurumEnum.REDDEDILDI, OnayDurumEnum.ONAYLANDI), 409),
    (ValueError("geçersiz"), 400),
])
def test_http_hatasina_cevir(hata, kod):
    assert http_hatasina_cevir(hata).status_code == kod
