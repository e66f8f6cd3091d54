import openpyxl
from ihracat_api import modeller
from ihracat_api.config import settings


def test_personel_olustur_listele_guncelle(client):
    response = client.post("/kullanicilar/", json={"ad_soyad": "Ayşe Yılmaz", "email": "ayse@ihracatpanel.com.tr"})
    assert response.status_code == 201
    personel = response.json()
    assert personel["rol"] == "Personel"
    assert personel["durum"] == "Aktif"

    assert client.post("/kullanicilar/", json={"ad_soyad": "Başka", "email": "ayse@ihracatpanel.com.tr"}).status_code == 400

    response = client.put(f"/kullanicilar/{personel['id']}", json={"durum": "Pasif"})
    assert response.json()["durum"] == "Pasif"
    assert [p["ad_soyad"] for p in client.get("/kullanicilar/", params={"durum": "Pasif"}).json()] == ["Ayşe Yılmaz"]
    assert client.put("/kullanicilar/999", json={"durum": "Pasif"}).status_code == 404


def test_dashboard_ozet(client, db_session, firma_olustur, proje_olustur):
    firma_olustur("Aktif Firma")
    firma_olustur("Pasif Firma", durum="Pasif")
    proje_olustur()
    db_session.add_all([
        modeller.GorevTamamlamaTalebi(gorev_id=1, firma_id=1, tamamlama_notu="x", durum="Onay Bekliyor"),
        modeller.Haber(baslik="Yayında", durum="yayinda"),
        modeller.Haber(baslik="Taslak"),
        modeller.ForumKonusu(baslik="Konu", icerik="..."),
    ])
    db_session.commit()

    data = client.get("/raporlar/dashboard_ozet").json()
    assert data["aktif_firma_sayisi"] == 1
    assert data["aktif_proje_sayisi"] == 1
    assert data["onay_bekleyen_talep_sayisi"] == 1
    assert data["bekleyen_randevu_sayisi"] == 0
    assert data["yayindaki_haber_sayisi"] == 1
    assert data["forum_konu_sayisi"] == 1


def test_firma_ilerleme_excel(client, db_session, tmp_path, monkeypatch, firma_olustur, proje_olustur, gorev_olustur):
    monkeypatch.setattr(settings, "REPORTS_DIR", str(tmp_path))
    firma = firma_olustur("Ege Gıda", sektor="Gıda")
    firma_olustur("Silinmiş", durum="Silindi")
    proje = proje_olustur()
    gorev_olustur(proje, "G1", [firma.id], durum="Tamamlandı")
    gorev_olustur(proje, "G2", [firma.id])
    db_session.add(modeller.FirmaHizmeti(firma_id=firma.id, hizmet_adi="Danışmanlık", ilerleme_yuzdesi=80))
    db_session.commit()

    response = client.get("/raporlar/firma_ilerleme_excel")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/vnd.openxmlformats")

    dosyalar = list(tmp_path.glob("firma_ilerleme_raporu_*.xlsx"))
    assert len(dosyalar) == 1
    ws = openpyxl.load_workbook(dosyalar[0]).active
    satirlar = list(ws.iter_rows(values_only=True))
    assert satirlar[0][0] == "Firma Adı"
    assert satirlar[1:] == [("Ege Gıda", "Gıda", 50, 80, 0)]


def test_update_personel_ad_soyad_null_reddedilir(client, personel_olustur):
    personel = personel_olustur()
    assert client.put(f"/kullanicilar/{personel.id}", json={"ad_soyad": None}).status_code == 422
    assert client.put(f"/kullanicilar/{personel.id}", json={"rol": None}).status_code == 422
