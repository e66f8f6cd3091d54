# ihracat_api/api_ana.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from . import veritabani
from .config import settings
from .rotalar import (
    firmalar, projeler, gorev_onaylari, egitimler, etkinlikler,
    haberler, forum, randevular, kullanicilar, raporlar
)

# Loglama ayarları
logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Uygulama başlangıç ve kapanışında çalışacak kod.
    Tabloların varlığını kontrol eder, kapanışta bağlantı havuzunu bırakır.
    """
    logger.info("API başlatılıyor...")
    try:
        veritabani.init_db()
    except Exception as e:
        logger.error(f"Veritabanı şeması oluşturulurken hata oluştu: {e}", exc_info=True)
        raise
    yield
    veritabani.reset_db_connection()
    logger.info("API kapanıyor...")

app = FastAPI(
    lifespan=lifespan,
    title="İhracat Danışmanlık Yönetim API",
    description="Firmalar, projeler, görev onayları, eğitimler, etkinlikler, haberler, forum ve randevu talepleri için RESTful API",
    version="1.0.0",
)

# CORS ayarları
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router'ları (rotaları) uygulamaya dahil etme
app.include_router(firmalar.router)
app.include_router(projeler.router)
app.include_router(gorev_onaylari.router)
app.include_router(egitimler.router)
app.include_router(etkinlikler.router)
app.include_router(haberler.router)
app.include_router(forum.router)
app.include_router(randevular.router)
app.include_router(kullanicilar.router)
app.include_router(raporlar.router)

@app.get("/")
def read_root():
    return {"message": "İhracat Danışmanlık Yönetim API'sine hoş geldiniz!"}
