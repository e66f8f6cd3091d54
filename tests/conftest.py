# tests/conftest.py
import os

# Uygulama modülleri içe aktarılmadan önce bellek içi veritabanı seçilir
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from ihracat_api import veritabani, modeller
from ihracat_api.api_ana import app


@pytest.fixture
def db_session():
    engine = veritabani.get_engine()
    veritabani.Base.metadata.create_all(bind=engine)
    db = veritabani.SessionLocal()
    try:
        yield db
    finally:
        db.close()
        veritabani.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    # lifespan çalıştırılmaz; tablolar db_session tarafından hazırlanır
    return TestClient(app)


@pytest.fixture
def firma_olustur(db_session):
    def _olustur(firma_adi="Anadolu Tekstil", **kwargs):
        firma = modeller.Firma(firma_adi=firma_adi, **kwargs)
        db_session.add(firma)
        db_session.commit()
        db_session.refresh(firma)
        return firma
    return _olustur


@pytest.fixture
def proje_olustur(db_session):
    def _olustur(proje_adi="Pazar Araştırması", hedef_firmalar=None, **kwargs):
        proje = modeller.Proje(proje_adi=proje_adi, hedef_firmalar=hedef_firmalar or [], **kwargs)
        db_session.add(proje)
        db_session.commit()
        db_session.refresh(proje)
        return proje
    return _olustur


@pytest.fixture
def gorev_olustur(db_session):
    def _olustur(proje, gorev_adi="Hedef ülke analizi", atanan_firmalar=None, **kwargs):
        gorev = modeller.Gorev(proje_id=proje.id, gorev_adi=gorev_adi, atanan_firmalar=atanan_firmalar or [], **kwargs)
        db_session.add(gorev)
        db_session.commit()
        db_session.refresh(gorev)
        return gorev
    return _olustur


@pytest.fixture
def personel_olustur(db_session):
    def _olustur(ad_soyad="Ayşe Yılmaz", email=None, durum="Aktif", rol="Personel"):
        kullanici = modeller.Kullanici(ad_soyad=ad_soyad, email=email, durum=durum, rol=rol)
        db_session.add(kullanici)
        db_session.commit()
        db_session.refresh(kullanici)
        return kullanici
    return _olustur
