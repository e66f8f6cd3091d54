# ihracat_api/config.py
import os
from dotenv import load_dotenv

# .env dosyasını projenin kök dizininden yükle
load_dotenv()

def _veritabani_url_olustur() -> str:
    """DATABASE_URL verilmişse onu, DB_* parçaları verilmişse PostgreSQL URL'sini, hiçbiri yoksa yerel SQLite dosyasını döndürür."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    parcalar = [os.getenv(ad) for ad in ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")]
    if all(parcalar):
        db_user, db_password, db_host, db_port, db_name = parcalar
        return f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
    return "sqlite:///./ihracat_panel.db"

# Ayarları .env dosyasından oku ve merkezi bir nesne olarak sun
class Settings:
    DB_USER: str = os.getenv("DB_USER")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD")
    DB_HOST: str = os.getenv("DB_HOST")
    DB_PORT: str = os.getenv("DB_PORT")
    DB_NAME: str = os.getenv("DB_NAME")
    DATABASE_URL: str = _veritabani_url_olustur()

    REPORTS_DIR: str = os.getenv("REPORTS_DIR", "server_reports")
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Ayarları diğer dosyaların kullanabilmesi için tek bir nesne oluştur
settings = Settings()
