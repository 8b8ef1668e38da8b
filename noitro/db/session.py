from datetime import datetime, timezone
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for all SQLAlchemy models
Base = declarative_base()

def utcnow() -> datetime:
    """Naive UTC timestamp, the representation every DateTime column uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

class Database:
    """
    Owns the engine and session factory for one database.

    Built by the application factory and stored on ``app.state``; nothing
    connects at import time.
    """

    def __init__(self, url: str, echo: bool = False):
        if not url:
            logger.error("DATABASE_URL is not set or empty!")
            raise ValueError("DATABASE_URL environment variable is required")

        self.url = url
        self.engine = self._create_engine(url, echo)
        # Session factory for database interactions
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    @staticmethod
    def _create_engine(url: str, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Share the single in-memory connection across sessions
                kwargs["poolclass"] = StaticPool
            engine = create_engine(url, echo=echo, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        else:
            engine = create_engine(
                url,
                echo=echo,
                pool_pre_ping=True,  # Check connection before using from pool
                pool_recycle=3600,   # Recycle connections after 1 hour
            )
        logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
        return engine

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        # Register every model on Base.metadata before creating tables
        import noitro.db.base  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        import noitro.db.base  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
