# career_canvas/database.py
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


def build_database_url(settings: Settings):
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return URL.create(
        "postgresql+psycopg2",
        username=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD,
        host=settings.POSTGRES_HOST,
        port=settings.POSTGRES_PORT,
        database=settings.POSTGRES_DB,
    )


class Database:
    """
    Owns the engine (and its connection pool) plus the session factory.
    One instance is created per application and kept on ``app.state``.
    """

    def __init__(self, url=None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.url = url if url is not None else build_database_url(settings)

        if str(self.url).startswith("sqlite"):
            # In-memory SQLite needs a single shared connection across threads
            self.engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                self.url,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
                pool_pre_ping=True,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def name(self) -> Optional[str]:
        return self.engine.url.database

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        """Creates all defined database tables."""
        # Models must be imported so their tables are registered on Base.metadata
        from . import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created or already exist.")

    def drop_all(self):
        from . import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def table_names(self) -> list[str]:
        return inspect(self.engine).get_table_names()

    def dispose(self):
        self.engine.dispose()


# Dependency to get a DB session
def get_db(request: Request) -> Iterator[Session]:
    """Provides a database session for a request and closes it afterwards."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Database().create_all()
