from datetime import datetime, timedelta
from ihracat_api import modeller


def _konu(client, **kwargs):
    veri = {"baslik": "Gümrük sorusu", "icerik": "Menşe belgesi nasıl alınır?"}
    veri.update(kwargs)
    response = client.post("/forum/konular", json=veri)
    assert response.status_code == 201
    return response.json()


def test_konu_olusturma_firma_adi_ve_durum(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    konu = _konu(client, yazar_firma_id=firma.id)
    assert konu["firma_adi"] == "Ege Gıda"
    assert konu["durum"] == "Açık"
    assert konu["cevap_sayisi"] == 0


def test_konu_icerigi_zorunlu(client):
    assert client.post("/forum/konular", json={"baslik": "X", "icerik": " "}).status_code == 422


def test_konu_listesi_sabitlenen_once_sonra_son_etkinlik(client, db_session):
    eski = datetime.now() - timedelta(days=3)
    db_session.add_all([
        modeller.ForumKonusu(baslik="Eski", icerik="a", created_at=eski, updated_at=eski),
        modeller.ForumKonusu(baslik="Sabit", icerik="b", sabitleme=True, created_at=eski - timedelta(days=1), updated_at=eski - timedelta(days=1)),
    ])
    db_session.commit()
    yeni = _konu(client, baslik="Yeni")

    basliklar = [k["baslik"] for k in client.get("/forum/konular").json()]
    assert basliklar == ["Sabit", "Yeni", "Eski"]

    # Eski konuya cevap gelince en üste (sabitlenenden sonra) çıkar
    eski_id = [k["id"] for k in client.get("/forum/konular").json() if k["baslik"] == "Eski"][0]
    client.post(f"/forum/konular/{eski_id}/cevaplar", json={"yorum_metni": "Güncel cevap"})
    basliklar = [k["baslik"] for k in client.get("/forum/konular").json()]
    assert basliklar == ["Sabit", "Eski", "Yeni"]
    assert yeni["id"] != eski_id


def test_konu_kategori_filtresi(client):
    _konu(client, kategori="Lojistik")
    _konu(client, kategori="Genel")
    data = client.get("/forum/konular", params={"kategori": "Lojistik"}).json()
    assert len(data) == 1 and data[0]["kategori"] == "Lojistik"


def test_konu_detayi_goruntulenme_sayisini_arttirir(client):
    konu = _konu(client)
    client.get(f"/forum/konular/{konu['id']}")
    assert client.get(f"/forum/konular/{konu['id']}").json()["goruntulenme_sayisi"] == 2


def test_kilitli_konuya_cevap_409(client):
    konu = _konu(client)
    response = client.put(f"/forum/konular/{konu['id']}/durum", json={"durum": "Kilitli"})
    assert response.json()["durum"] == "Kilitli"
    assert client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "x"}).status_code == 409

    client.put(f"/forum/konular/{konu['id']}/durum", json={"durum": "Açık"})
    assert client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "x"}).status_code == 201


def test_cevap_yazar_tipi_ve_sayisi(client, firma_olustur):
    firma = firma_olustur("Ege Gıda")
    konu = _konu(client)
    firma_cevabi = client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "Biz de merak ediyoruz", "yazar_firma_id": firma.id}).json()
    personel_cevabi = client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "Ticaret odasından", "yazar_adi": "Danışman Ali"}).json()

    assert firma_cevabi["yazar_tipi"] == "Firma"
    assert firma_cevabi["yazar_adi"] == "Ege Gıda"
    assert personel_cevabi["yazar_tipi"] == "Personel"
    assert personel_cevabi["yazar_adi"] == "Danışman Ali"

    cevaplar = client.get(f"/forum/konular/{konu['id']}/cevaplar").json()
    assert [c["cevap_metni"] for c in cevaplar] == ["Biz de merak ediyoruz", "Ticaret odasından"]
    assert client.get(f"/forum/konular/{konu['id']}").json()["cevap_sayisi"] == 2


def test_olmayan_konuya_cevap_404(client):
    assert client.post("/forum/konular/999/cevaplar", json={"yorum_metni": "x"}).status_code == 404


def test_konu_silme_cevaplari_da_siler(client, db_session):
    konu = _konu(client)
    client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "x"})
    assert client.delete(f"/forum/konular/{konu['id']}").status_code == 200
    assert db_session.query(modeller.ForumYorumu).count() == 0
    assert client.get(f"/forum/konular/{konu['id']}").status_code == 404


def test_cevap_silme(client):
    konu = _konu(client)
    cevap = client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "x"}).json()
    assert client.delete(f"/forum/cevaplar/{cevap['id']}").status_code == 200
    assert client.delete(f"/forum/cevaplar/{cevap['id']}").status_code == 404


def test_kategori_istatistikleri(client):
    k1 = _konu(client, kategori="Lojistik")
    _konu(client, kategori="Lojistik")
    _konu(client, kategori="Finans")
    client.post(f"/forum/konular/{k1['id']}/cevaplar", json={"yorum_metni": "a"})
    client.post(f"/forum/konular/{k1['id']}/cevaplar", json={"yorum_metni": "b"})

    data = {s["kategori"]: s for s in client.get("/forum/kategori-istatistikleri").json()}
    assert data["Lojistik"] == {"kategori": "Lojistik", "konu_sayisi": 2, "cevap_sayisi": 2}
    assert data["Finans"]["cevap_sayisi"] == 0


def test_olmayan_yazar_firma_404(client):
    response = client.post("/forum/konular", json={"baslik": "Soru", "icerik": "Detay", "yazar_firma_id": 999})
    assert response.status_code == 404
    assert client.get("/forum/konular").json() == []

    konu = _konu(client)
    response = client.post(f"/forum/konular/{konu['id']}/cevaplar", json={"yorum_metni": "Cevap", "yazar_firma_id": 999})
    assert response.status_code == 404
    assert client.get(f"/forum/konular/{konu['id']}/cevaplar").json() == []
