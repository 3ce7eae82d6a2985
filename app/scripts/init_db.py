# app/scripts/init_db.py
import logging
from alembic.config import Config
from alembic import command
from pathlib import Path

from sqlalchemy import text
from app.core.database import db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).parent.parent.parent / "alembic.ini"

def init_database() -> bool:
    """Bring the database schema up to date with all migrations"""
    try:
        alembic_cfg = Config(str(ALEMBIC_INI))
        alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))

        command.upgrade(alembic_cfg, "head")

        with db.session() as session:
            session.execute(text("SELECT 1"))
            logger.info("Database connection successful")

        logger.info("Database initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return False

if __name__ == "__main__":
    raise SystemExit(0 if init_database() else 1)
