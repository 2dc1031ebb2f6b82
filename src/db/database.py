"""Generate database session"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import get_config
from src.db.schema import Base

engine = create_engine(get_config().storage.database_url)
SessionLocal = sessionmaker(bind=engine)


def create_tables() -> None:
    """Ensure all tables are created (safe to call again: existing tables are left alone)"""
    Base.metadata.create_all(bind=engine)


# the configured database is ready to use as soon as this module is imported
create_tables()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
