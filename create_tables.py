# create_tables.py
import os
import logging
from dotenv import load_dotenv
from ihracat_api import veritabani
from ihracat_api.modeller import Kullanici, RolEnum, KayitDurumEnum

# Loglama ayarları
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# .env dosyasındaki ortam değişkenlerini yükle
load_dotenv()

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@ihracatpanel.com.tr")
DEFAULT_ADMIN_AD_SOYAD = os.getenv("DEFAULT_ADMIN_AD_SOYAD", "Sistem Yöneticisi")

def setup_tables_and_admin():
    """
    Tabloları (yoksa) oluşturur ve varsayılan admin personel kaydını ekler.
    Tekrar çalıştırıldığında mevcut kaydı değiştirmez.
    """
    veritabani.init_db()
    db = veritabani.SessionLocal()
    try:
        if db.query(Kullanici).filter_by(email=DEFAULT_ADMIN_EMAIL).first():
            logger.warning(f"Personel '{DEFAULT_ADMIN_EMAIL}' zaten mevcut, ekleme atlandı.")
            return

        db.add(Kullanici(
            ad_soyad=DEFAULT_ADMIN_AD_SOYAD,
            email=DEFAULT_ADMIN_EMAIL,
            rol=RolEnum.ADMIN.value,
            durum=KayitDurumEnum.AKTIF.value,
        ))
        db.commit()
        logger.info(f"Varsayılan admin personel ({DEFAULT_ADMIN_EMAIL}) başarıyla eklendi.")
    except Exception as e:
        logger.error(f"Tablo veya personel oluşturma sırasında hata oluştu: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    logger.info("Tablo oluşturma ve başlangıç personeli scripti başlatılıyor...")
    setup_tables_and_admin()
    logger.info("Script tamamlandı. Artık API sunucusunu başlatabilirsiniz.")
