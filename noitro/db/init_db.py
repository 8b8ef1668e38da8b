import logging

from alembic.config import Config
from alembic import command
from sqlalchemy import inspect

from noitro.core.config import settings
from noitro.db.session import Database

logger = logging.getLogger(__name__)

def init_db(alembic_ini: str = "alembic.ini") -> None:
    """
    Initialize the database by running Alembic migrations.
    """
    try:
        alembic_cfg = Config(alembic_ini)
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations applied successfully")
    except Exception as e:
        logger.error(f"Error applying database migrations: {e}")
        raise


def create_all_tables(database: Database) -> bool:
    try:
        existing_tables = inspect(database.engine).get_table_names()

        database.create_all()

        new_tables = set(inspect(database.engine).get_table_names()) - set(existing_tables)
        if new_tables:
            logger.info(f"Created new tables: {new_tables}")

        return True
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info(f"Applying migrations to {settings.DATABASE_URL}")
    init_db()
    logger.info("Database tables created")
