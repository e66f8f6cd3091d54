import pytest
from ihracat_api import modeller


@pytest.fixture
def atanmis_gorev(firma_olustur, proje_olustur, gorev_olustur):
    firma = firma_olustur("Ege Gıda")
    proje = proje_olustur("Almanya Pazarı", hedef_firmalar=[firma.id])
    gorev = gorev_olustur(proje, "Fuar katılımı", [firma.id])
    return firma, proje, gorev


def _talep_gonder(client, gorev, firma, notu="Fuara katıldık, rapor ektedir."):
    return client.post("/gorev-onaylari/", json={
        "gorev_id": gorev.id, "firma_id": firma.id, "tamamlama_notu": notu,
        "kanit_dosya_url": "https://dosya.example/rapor.pdf", "kanit_dosya_adi": "rapor.pdf",
    })


def test_talep_olusturma_beklemede_kaydedilir(client, atanmis_gorev):
    firma, proje, gorev = atanmis_gorev
    response = _talep_gonder(client, gorev, firma)
    assert response.status_code == 201
    talep = response.json()
    assert talep["durum"] == "Beklemede"
    assert talep["gorev_basligi"] == "Fuar katılımı"
    assert talep["proje_basligi"] == "Almanya Pazarı"
    assert talep["firma_adi"] == "Ege Gıda"


def test_talep_notu_zorunlu(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    assert _talep_gonder(client, gorev, firma, notu="   ").status_code == 400


def test_talep_olmayan_gorev_veya_firma_404(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    response = client.post("/gorev-onaylari/", json={"gorev_id": 999, "firma_id": firma.id, "tamamlama_notu": "x"})
    assert response.status_code == 404
    response = client.post("/gorev-onaylari/", json={"gorev_id": gorev.id, "firma_id": 999, "tamamlama_notu": "x"})
    assert response.status_code == 404


def test_talep_atanmamis_firma_400(client, atanmis_gorev, firma_olustur):
    _, _, gorev = atanmis_gorev
    baska = firma_olustur("Başka Firma")
    assert _talep_gonder(client, gorev, baska).status_code == 400


def test_ikinci_bekleyen_talep_409(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    assert _talep_gonder(client, gorev, firma).status_code == 201
    assert _talep_gonder(client, gorev, firma).status_code == 409


def test_eski_yazimli_bekleyen_talep_de_cakisma_sayilir(client, db_session, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    db_session.add(modeller.GorevTamamlamaTalebi(gorev_id=gorev.id, firma_id=firma.id, tamamlama_notu="eski", durum="Onay Bekliyor"))
    db_session.commit()
    assert _talep_gonder(client, gorev, firma).status_code == 409


def test_onay_gorevi_tamamlar(client, db_session, atanmis_gorev, personel_olustur):
    firma, _, gorev = atanmis_gorev
    admin = personel_olustur("Admin Kullanıcı", rol="Admin")
    talep = _talep_gonder(client, gorev, firma).json()

    response = client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Onaylandı", "admin_personel_id": admin.id})
    assert response.status_code == 200
    karar = response.json()
    assert karar["durum"] == "Onaylandı"
    assert karar["onay_tarihi"] is not None
    assert karar["admin_personel_id"] == admin.id

    db_session.expire_all()
    assert db_session.get(modeller.Gorev, gorev.id).durum == "Tamamlandı"

    # Tamamlanmış görev için yeni talep açılamaz
    assert _talep_gonder(client, gorev, firma).status_code == 409


def test_red_admin_notu_olmadan_400_ve_gorev_degismez(client, db_session, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    talep = _talep_gonder(client, gorev, firma).json()

    response = client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Reddedildi"})
    assert response.status_code == 400

    response = client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Reddedildi", "admin_notu": "Kanıt eksik"})
    assert response.status_code == 200
    assert response.json()["durum"] == "Reddedildi"
    assert response.json()["admin_notu"] == "Kanıt eksik"

    db_session.expire_all()
    assert db_session.get(modeller.Gorev, gorev.id).durum == "Aktif"


def test_ikinci_karar_409(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    talep = _talep_gonder(client, gorev, firma).json()
    assert client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Reddedildi", "admin_notu": "Eksik"}).status_code == 200
    assert client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Onaylandı"}).status_code == 409


def test_karar_olmayan_talep_404(client):
    assert client.put("/gorev-onaylari/999/karar", json={"durum": "Onaylandı"}).status_code == 404


def test_karar_gecersiz_deger_422(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    talep = _talep_gonder(client, gorev, firma).json()
    assert client.put(f"/gorev-onaylari/{talep['id']}/karar", json={"durum": "Tamamlandı"}).status_code == 422


def test_bekleyenler_eski_yazimlar_ve_bilinmeyen_kayitlar(client, db_session, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    db_session.add_all([
        modeller.GorevTamamlamaTalebi(gorev_id=gorev.id, firma_id=firma.id, tamamlama_notu="a", durum="Onay Bekliyor"),
        modeller.GorevTamamlamaTalebi(gorev_id=gorev.id, firma_id=firma.id, tamamlama_notu="b", durum="Onaylandi"),
        modeller.GorevTamamlamaTalebi(gorev_id=4242, firma_id=4343, tamamlama_notu="c", durum="Beklemede"),
    ])
    db_session.commit()

    data = client.get("/gorev-onaylari/bekleyenler").json()
    assert len(data) == 2
    assert {t["durum"] for t in data} == {"Beklemede"}
    bilinmeyen = [t for t in data if t["gorev_id"] == 4242][0]
    assert bilinmeyen["gorev_basligi"] == "Bilinmeyen Görev"
    assert bilinmeyen["proje_basligi"] == "Bilinmeyen Proje"
    assert bilinmeyen["firma_adi"] == "Bilinmeyen Firma"


def test_firma_talepleri_ve_detay(client, atanmis_gorev):
    firma, _, gorev = atanmis_gorev
    talep = _talep_gonder(client, gorev, firma).json()
    data = client.get(f"/gorev-onaylari/firma/{firma.id}").json()
    assert [t["id"] for t in data] == [talep["id"]]
    assert client.get(f"/gorev-onaylari/{talep['id']}").json()["tamamlama_notu"].startswith("Fuara")
    assert client.get("/gorev-onaylari/999").status_code == 404


def test_silinmis_firma_tamamlama_talebi_gonderemez(client, atanmis_gorev):
    firma, proje, gorev = atanmis_gorev
    assert client.delete(f"/firmalar/{firma.id}").status_code == 200
    response = _talep_gonder(client, gorev, firma)
    assert response.status_code == 404
    assert client.get("/gorev-onaylari/bekleyenler").json() == []
