import os
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from booth_booker.config import settings


def build_engine(url: str):
    """Create an engine; SQLite needs cross-thread access for FastAPI's threadpool."""
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_database():
    url = make_url(settings.DATABASE_URL)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = os.path.dirname(url.database)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
    # Registers every model with Base.metadata
    from booth_booker import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
