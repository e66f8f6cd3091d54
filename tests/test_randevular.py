from datetime import datetime, timedelta
from ihracat_api import modeller
from ihracat_api.api_servisler import RandevuService


def _randevu(client, firma_id, **kwargs):
    veri = {
        "firma_id": firma_id,
        "konu": "Hedef pazar görüşmesi",
        "mesaj": "Almanya pazarı için görüşmek istiyoruz.",
        "tercih_edilen_tarih_saat_1": "2030-02-01T10:00:00",
    }
    veri.update(kwargs)
    return client.post("/randevular/", json=veri)


def test_randevu_olusturma(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    response = _randevu(client, firma.id)
    assert response.status_code == 201
    data = response.json()
    assert data["durum"] == "Beklemede"
    assert data["firma_adi"] == "Ege Gıda"


def test_randevu_dogrulamalari(client, firma_olustur):
    firma = firma_olustur()
    assert _randevu(client, 999).status_code == 404
    assert _randevu(client, firma.id, konu=" ").status_code == 422
    assert _randevu(client, firma.id, mesaj="").status_code == 422
    veri = {"firma_id": firma.id, "konu": "a", "mesaj": "b"}
    assert client.post("/randevular/", json=veri).status_code == 422


def test_randevu_durum_gecisleri(client, firma_olustur, personel_olustur):
    firma = firma_olustur()
    personel = personel_olustur()
    talep = _randevu(client, firma.id).json()

    response = client.put(f"/randevular/{talep['id']}", json={"durum": "Onaylandı", "atanan_personel_id": personel.id})
    assert response.status_code == 200
    assert response.json()["personel_adi"] == personel.ad_soyad

    response = client.put(f"/randevular/{talep['id']}", json={"durum": "Tamamlandı"})
    assert response.status_code == 200
    assert response.json()["gerceklesen_tarih_saat"] is not None

    # Tamamlandı son durumdur
    assert client.put(f"/randevular/{talep['id']}", json={"durum": "Reddedildi"}).status_code == 409


def test_randevu_beklemeden_tamamlandiya_gecemez(client, firma_olustur):
    firma = firma_olustur()
    talep = _randevu(client, firma.id).json()
    assert client.put(f"/randevular/{talep['id']}", json={"durum": "Tamamlandı"}).status_code == 409


def test_randevu_ayni_durum_sadece_not_gunceller(client, firma_olustur):
    firma = firma_olustur()
    talep = _randevu(client, firma.id).json()
    response = client.put(f"/randevular/{talep['id']}", json={"durum": "Beklemede", "admin_notu": "Arayacağız"})
    assert response.status_code == 200
    assert response.json()["admin_notu"] == "Arayacağız"


def test_randevu_verilen_gerceklesme_tarihi_korunur(client, firma_olustur):
    firma = firma_olustur()
    talep = _randevu(client, firma.id).json()
    client.put(f"/randevular/{talep['id']}", json={"durum": "Onaylandı"})
    response = client.put(f"/randevular/{talep['id']}", json={"durum": "Tamamlandı", "gerceklesen_tarih_saat": "2030-02-01T11:30:00"})
    assert response.json()["gerceklesen_tarih_saat"] == "2030-02-01T11:30:00"


def test_randevu_pasif_veya_olmayan_personel_400(client, firma_olustur, personel_olustur):
    firma = firma_olustur()
    pasif = personel_olustur("Pasif Personel", durum="Pasif")
    talep = _randevu(client, firma.id).json()
    assert client.put(f"/randevular/{talep['id']}", json={"atanan_personel_id": pasif.id}).status_code == 400
    assert client.put(f"/randevular/{talep['id']}", json={"atanan_personel_id": 999}).status_code == 400
    assert client.put("/randevular/999", json={"admin_notu": "x"}).status_code == 404


def test_randevu_listeleri_eski_yazimlari_normalize_eder(client, db_session, firma_olustur):
    firma = firma_olustur()
    diger = firma_olustur("Diğer")
    simdi = datetime.now()
    db_session.add_all([
        modeller.RandevuTalebi(firma_id=firma.id, konu="a", mesaj="a", tercih_edilen_tarih_saat_1=simdi, durum="Onay Bekliyor"),
        modeller.RandevuTalebi(firma_id=firma.id, konu="b", mesaj="b", tercih_edilen_tarih_saat_1=simdi, durum="Gerçekleşti"),
        modeller.RandevuTalebi(firma_id=diger.id, konu="c", mesaj="c", tercih_edilen_tarih_saat_1=simdi, durum="Beklemede"),
    ])
    db_session.commit()

    firma_listesi = client.get(f"/randevular/firma/{firma.id}").json()
    assert {r["durum"] for r in firma_listesi} == {"Beklemede", "Tamamlandı"}

    bekleyenler = client.get("/randevular/", params={"durum": "Beklemede"}).json()
    assert len(bekleyenler) == 2
    assert len(client.get("/randevular/").json()) == 3


def test_randevu_silme(client, firma_olustur):
    firma = firma_olustur()
    talep = _randevu(client, firma.id).json()
    assert client.delete(f"/randevular/{talep['id']}").status_code == 200
    assert client.delete(f"/randevular/{talep['id']}").status_code == 404


def test_randevu_istatistikleri_zaman_pencereleri(db_session, firma_olustur):
    firma = firma_olustur()
    simdi = datetime(2024, 3, 15, 12, 0, 0)
    kayitlar = [
        (simdi - timedelta(hours=1), "Beklemede"),           # bugün, bu hafta, bu ay
        (simdi - timedelta(days=3), "Onaylandi"),            # bu hafta, bu ay
        (simdi - timedelta(days=10), "Red"),                 # bu ay
        (datetime(2024, 2, 20, 9, 0), "Gerçekleşti"),       # geçen ay
        (datetime(2024, 1, 5, 9, 0), "Onay Bekliyor"),      # daha eski
    ]
    for tarih, durum in kayitlar:
        db_session.add(modeller.RandevuTalebi(
            firma_id=firma.id, konu="k", mesaj="m", tercih_edilen_tarih_saat_1=tarih,
            talep_tarihi=tarih, durum=durum
        ))
    db_session.commit()

    ist = RandevuService(db_session).istatistikler(simdi=simdi)
    assert ist.toplam == 5
    assert ist.beklemede == 2
    assert ist.onaylandi == 1
    assert ist.reddedildi == 1
    assert ist.tamamlandi == 1
    assert ist.bugunku_talepler == 1
    assert ist.haftanin_toplami == 2
    assert ist.bu_ay_toplam == 3
    assert ist.gecen_ay_toplam == 1


def test_randevu_istatistikleri_ocak_ayinda_gecen_ay_aralik(db_session, firma_olustur):
    firma = firma_olustur()
    db_session.add(modeller.RandevuTalebi(
        firma_id=firma.id, konu="k", mesaj="m", tercih_edilen_tarih_saat_1=datetime(2023, 12, 28),
        talep_tarihi=datetime(2023, 12, 28, 10, 0)
    ))
    db_session.commit()
    ist = RandevuService(db_session).istatistikler(simdi=datetime(2024, 1, 2, 9, 0))
    assert ist.gecen_ay_toplam == 1
    assert ist.bu_ay_toplam == 0
    assert ist.haftanin_toplami == 1


def test_randevu_istatistik_endpoint(client, firma_olustur):
    firma = firma_olustur()
    _randevu(client, firma.id)
    data = client.get("/randevular/istatistikler").json()
    assert data["toplam"] == 1
    assert data["beklemede"] == 1
    assert data["bugunku_talepler"] == 1


def test_randevu_personel_listesi(client, personel_olustur):
    personel_olustur("Zeynep Kaya")
    personel_olustur("Ahmet Demir", rol="Admin")
    personel_olustur("Pasif Kişi", durum="Pasif")
    data = client.get("/randevular/personel").json()
    assert [p["ad_soyad"] for p in data] == ["Ahmet Demir", "Zeynep Kaya"]


def test_silinmis_firma_randevu_talebi_olusturamaz(client, firma_olustur):
    firma = firma_olustur("Silinecek Ltd.")
    assert client.delete(f"/firmalar/{firma.id}").status_code == 200
    response = _randevu(client, firma.id)
    assert response.status_code == 404
    assert client.get("/randevular/").json() == []


def test_randevu_durumu_null_gonderilemez(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    talep = _randevu(client, firma.id).json()
    assert client.put(f"/randevular/{talep['id']}", json={"durum": None}).status_code == 422
