from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime, JSON, Text
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


# ── Personnel ─────────────────────────────────────────────────────────────────

class Instructor(Base):
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True)             # service id number
    name = Column(String, nullable=False, unique=True) # display name used on the program
    rank = Column(String, nullable=True)
    role = Column(String, nullable=False, default="QFI")  # "QFI" | "SIM IP"
    unavailability = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Trainee(Base):
    __tablename__ = "trainees"

    id = Column(Integer, primary_key=True)
    full_name = Column(String, nullable=False, unique=True)  # e.g. "Smith, J – ADF301"
    name = Column(String, nullable=True)
    rank = Column(String, nullable=True)
    course = Column(String, nullable=True)
    is_paused = Column(Boolean, default=False)
    unavailability = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# ── Syllabus ──────────────────────────────────────────────────────────────────

class SyllabusItem(Base):
    __tablename__ = "syllabus_items"

    id = Column(String, primary_key=True)              # e.g. "BGF1"
    code = Column(String, nullable=True)
    phase = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=True)               # "Flight" | "FTD" | "Ground School"
    pre_flight_time = Column(Float, default=0.0)       # hours
    post_flight_time = Column(Float, default=0.0)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# ── Ingestion tracking ────────────────────────────────────────────────────────

class IngestionRun(Base):
    __tablename__ = "ingestion_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_at = Column(DateTime, server_default=func.now())
    source_hash = Column(String, nullable=False)       # hash of input files
    status = Column(String, default="success")
    diff_summary = Column(JSON, default=dict)          # what changed
