from logging.config import fileConfig
from sqlalchemy import engine_from_config
from sqlalchemy import pool
from alembic import context
import sys
import os

# Projenin ana dizinini Python yoluna ekle
# Bu, 'ihracat_api' paketinin bulunabilmesini sağlar
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Alembic'in tabloları görmesi için Base ve modellerin bulunduğu modül içe aktarılır
from ihracat_api.config import settings
from ihracat_api.veritabani import Base
from ihracat_api import modeller  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

def run_migrations_offline() -> None:
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    # Bağlantı adresi .env üzerinden uygulama ayarlarından gelir
    conf = config.get_section(config.config_ini_section) or {}
    conf["sqlalchemy.url"] = settings.DATABASE_URL

    connectable = engine_from_config(
        conf,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
