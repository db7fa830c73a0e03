"""
Session plumbing for the personnel and syllabus directory.
The remedy engine never touches this; ProgramContext.from_db reads through it.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dfp.config import get_settings
from dfp.models import Base

DATABASE_URL = get_settings().database_url

engine = create_engine(DATABASE_URL, echo=False)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db():
    """Create the directory tables (instructors, trainees, syllabus, ingestion runs)."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """FastAPI dependency: one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
