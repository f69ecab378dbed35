# mentorship_api/database.py
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.engine import URL, make_url
from .config import get_settings

logger = logging.getLogger(__name__)

def get_engine():
    settings = get_settings()
    if settings.DATABASE_URL:
        url = make_url(settings.DATABASE_URL)
        if url.get_backend_name() == "sqlite":
            # SQLite connections are shared across the threads of the test client
            return create_engine(url, connect_args={"check_same_thread": False})
        return create_engine(
            url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    DATABASE_URL = URL.create(
        "postgresql+psycopg2",
        username=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD,
        host=settings.POSTGRES_HOST,
        port=settings.POSTGRES_PORT,
        database=settings.POSTGRES_DB,
    )
    return create_engine(
        DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

# Create the SQLAlchemy engine globally after defining get_engine
engine = get_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """Provides a database session for a request and closes it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_db_and_tables():
    """Creates all defined database tables."""
    # Models must be imported so they register on Base.metadata
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created or already exist.")

if __name__ == "__main__":
    create_db_and_tables()
