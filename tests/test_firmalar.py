from ihracat_api import modeller


def test_create_and_read_firma(client):
    response = client.post("/firmalar/", json={"firma_adi": "Ege Gıda", "sektor": "Gıda", "yetkili_email": "info@egegida.com"})
    assert response.status_code == 201
    firma = response.json()
    assert firma["durum"] == "Aktif"
    assert firma["firma_profil_durumu"] == "Eksik"

    response = client.get(f"/firmalar/{firma['id']}")
    assert response.status_code == 200
    assert response.json()["firma_adi"] == "Ege Gıda"


def test_create_firma_ayni_isim_400(client, firma_olustur):
    firma_olustur("Ege Gıda")
    response = client.post("/firmalar/", json={"firma_adi": "Ege Gıda"})
    assert response.status_code == 400


def test_create_firma_bos_isim_reddedilir(client):
    response = client.post("/firmalar/", json={"firma_adi": "   "})
    assert response.status_code == 422


def test_list_firmalar_silinenleri_gizler_ve_ada_gore_siralar(client, firma_olustur):
    firma_olustur("Zeytin A.Ş.")
    firma_olustur("Akdeniz Mobilya")
    silinen = firma_olustur("Silinecek Ltd.")
    assert client.delete(f"/firmalar/{silinen.id}").status_code == 200

    response = client.get("/firmalar/")
    data = response.json()
    assert data["total"] == 2
    assert [f["firma_adi"] for f in data["items"]] == ["Akdeniz Mobilya", "Zeytin A.Ş."]

    assert client.get(f"/firmalar/{silinen.id}").status_code == 404
    silinenler = client.get("/firmalar/", params={"durum": "Silindi"}).json()
    assert silinenler["total"] == 1


def test_list_firmalar_arama(client, firma_olustur):
    firma_olustur("Akdeniz Mobilya", sektor="Mobilya")
    firma_olustur("Ege Gıda", sektor="Gıda")
    data = client.get("/firmalar/", params={"arama": "Mobilya"}).json()
    assert [f["firma_adi"] for f in data["items"]] == ["Akdeniz Mobilya"]


def test_update_firma_kismi(client, firma_olustur):
    firma = firma_olustur("Ege Gıda", sektor="Gıda")
    response = client.put(f"/firmalar/{firma.id}", json={"telefon": "02320000000"})
    assert response.status_code == 200
    assert response.json()["telefon"] == "02320000000"
    assert response.json()["sektor"] == "Gıda"


def test_update_firma_bulunamadi(client):
    assert client.put("/firmalar/999", json={"telefon": "1"}).status_code == 404


def test_firma_hizmetleri_crud(client, firma_olustur):
    firma = firma_olustur()
    response = client.post(f"/firmalar/{firma.id}/hizmetler", json={"hizmet_adi": "Dış Ticaret Danışmanlığı", "ilerleme_yuzdesi": 40})
    assert response.status_code == 201
    hizmet = response.json()
    assert hizmet["durum"] == "Başlamadı"

    response = client.put(f"/firmalar/{firma.id}/hizmetler/{hizmet['id']}", json={"ilerleme_yuzdesi": 100, "durum": "Tamamlandı"})
    assert response.status_code == 200
    assert response.json()["ilerleme_yuzdesi"] == 100

    assert len(client.get(f"/firmalar/{firma.id}/hizmetler").json()) == 1
    assert client.delete(f"/firmalar/{firma.id}/hizmetler/{hizmet['id']}").status_code == 200
    assert client.get(f"/firmalar/{firma.id}/hizmetler").json() == []


def test_firma_hizmeti_yuzde_sinir_disi_reddedilir(client, firma_olustur):
    firma = firma_olustur()
    response = client.post(f"/firmalar/{firma.id}/hizmetler", json={"hizmet_adi": "Fuar", "ilerleme_yuzdesi": 120})
    assert response.status_code == 422


def test_firma_ilerleme_veri_yokken_sifir(client, firma_olustur):
    firma = firma_olustur()
    data = client.get(f"/firmalar/{firma.id}/ilerleme").json()
    assert data["genel_ilerleme"] == 0
    assert data["hizmetler"]["ortalama_ilerleme"] == 0
    assert data["hizmetler"]["toplam_hizmet"] == 0
    assert data["egitim"]["ilerleme_yuzdesi"] == 0


def test_firma_ilerleme_hesaplari(client, db_session, firma_olustur, proje_olustur, gorev_olustur):
    firma = firma_olustur()
    diger = firma_olustur("Başka Firma")
    db_session.add_all([
        modeller.FirmaHizmeti(firma_id=firma.id, hizmet_adi="A", ilerleme_yuzdesi=50),
        modeller.FirmaHizmeti(firma_id=firma.id, hizmet_adi="B", ilerleme_yuzdesi=25, durum="Devam Ediyor"),
        modeller.FirmaHizmeti(firma_id=firma.id, hizmet_adi="C", ilerleme_yuzdesi=100, durum="Tamamlandı"),
        modeller.FirmaHizmeti(firma_id=firma.id, hizmet_adi="D", ilerleme_yuzdesi=0),
    ])
    db_session.commit()
    proje = proje_olustur(hedef_firmalar=[firma.id])
    gorev_olustur(proje, "G1", [firma.id], durum="Tamamlandı")
    gorev_olustur(proje, "G2", [firma.id, diger.id])
    gorev_olustur(proje, "G3", [firma.id], durum="Tamamlandi")
    gorev_olustur(proje, "Silinmiş", [firma.id], durum="Silindi")
    gorev_olustur(proje, "Başkasının", [diger.id], durum="Tamamlandı")

    data = client.get(f"/firmalar/{firma.id}/ilerleme").json()
    # 2 / 3 tamamlanmış görev
    assert data["genel_ilerleme"] == 67
    # (50 + 25 + 100 + 0) / 4 = 43.75
    assert data["hizmetler"]["ortalama_ilerleme"] == 44
    assert data["hizmetler"]["tamamlanan_hizmet"] == 1
    assert data["hizmetler"]["toplam_hizmet"] == 4
    assert [d["hizmet_adi"] for d in data["hizmetler"]["detaylar"]] == ["A", "B", "C", "D"]


def test_update_firma_zorunlu_alana_null_reddedilir(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    response = client.put(f"/firmalar/{firma.id}", json={"firma_adi": None})
    assert response.status_code == 422
    assert client.put(f"/firmalar/{firma.id}", json={"durum": None}).status_code == 422
    assert client.get(f"/firmalar/{firma.id}").json()["firma_adi"] == "Ege Gıda"


def test_update_firma_opsiyonel_alan_null_ile_temizlenir(client, firma_olustur):
    firma = firma_olustur("Ege Gıda", sektor="Gıda")
    response = client.put(f"/firmalar/{firma.id}", json={"sektor": None})
    assert response.status_code == 200
    assert response.json()["sektor"] is None


def test_update_hizmet_zorunlu_alana_null_reddedilir(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    hizmet = client.post(f"/firmalar/{firma.id}/hizmetler", json={"hizmet_adi": "Pazar analizi"}).json()
    response = client.put(f"/firmalar/{firma.id}/hizmetler/{hizmet['id']}", json={"ilerleme_yuzdesi": None})
    assert response.status_code == 422
