# ihracat_api/veritabani.py
import logging
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.pool import StaticPool
from .config import settings

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

Base = declarative_base()

def _motor_olustur(url: str) -> Engine:
    """Verilen URL için SQLAlchemy motorunu oluşturur. SQLite için thread ve bellek içi havuz ayarlarını yapar."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)

# --- MERKEZİ BAŞLATMA ---
engine = _motor_olustur(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
logger.info(f"Veritabanı motoru başlatıldı: {engine.url.render_as_string(hide_password=True)}")

def get_engine() -> Engine:
    """Uygulamanın veritabanı motorunu döndürür, kapatılmışsa yeniden oluşturur."""
    global engine, SessionLocal
    if engine is None:
        engine = _motor_olustur(settings.DATABASE_URL)
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("Veritabanı motoru yeniden başlatıldı.")
    return engine

def get_db() -> Generator[Session, None, None]:
    """Her istek için bir veritabanı oturumu sağlar ve istek bitince kapatır."""
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Tüm tabloları (yoksa) oluşturur."""
    from . import modeller  # noqa: F401  Tabloların metadata'ya kaydı için
    Base.metadata.create_all(bind=get_engine())
    logger.info("Veritabanı tabloları kontrol edildi/oluşturuldu.")

def reset_db_connection():
    """Veritabanı bağlantı havuzunu sıfırlar."""
    global engine
    if engine is not None:
        engine.dispose()
        engine = None
    logger.info("Veritabanı bağlantıları sıfırlandı.")
