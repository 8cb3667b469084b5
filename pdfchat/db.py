from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import settings


class Base(DeclarativeBase):
    pass


# Normalize DATABASE_URL for SQLAlchemy if needed
def _normalize_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        # Convert deprecated postgres:// to postgresql+psycopg2://
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    if url.startswith("postgresql://"):
        # Prefer explicit driver
        return url.replace("postgresql://", "postgresql+psycopg2://", 1)
    if url.startswith("postgresql+psycopg://"):
        # Map psycopg v3 DSN to psycopg2 since psycopg2-binary is installed
        return url.replace("postgresql+psycopg://", "postgresql+psycopg2://", 1)
    return url


def create_db_engine(url: str):
    url = _normalize_database_url(url)
    if url.startswith("sqlite"):
        # SQLite connections are handed between the event loop and the threadpool
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
