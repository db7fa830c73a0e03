"""
Ingestion against a throwaway bucket and an in-memory DB.

  pytest dfp/ingestion/test_ingestion.py
"""
import json

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dfp.ingestion.job import run_ingestion
from dfp.models import Base, IngestionRun, Instructor, SyllabusItem
from dfp.remedy.context import ProgramContext
from dfp.config import Settings

INSTRUCTORS = [
    {"id": 1, "name": "Flt Lt Ash", "rank": "FLTLT", "role": "QFI", "unavailability": [
        {"start_date": "2025-07-07", "end_date": "2025-07-07", "all_day": False,
         "start_time": "10:00", "end_time": "1200", "reason": "Appointment"},
    ]},
    {"id": 2, "name": "Mr Hill", "role": "SIM IP"},
]
TRAINEES = [{"id": 11, "full_name": "Off Cdt Bell", "is_paused": True}]
SYLLABUS = [{"id": "BGF1", "pre_flight_time": 0.5, "post_flight_time": 0.25}]


def write_bucket(bucket, instructors=INSTRUCTORS, trainees=TRAINEES, syllabus=SYLLABUS):
    bucket.mkdir(exist_ok=True)
    (bucket / "instructors.json").write_text(json.dumps(instructors))
    (bucket / "trainees.json").write_text(json.dumps(trainees))
    (bucket / "syllabus.json").write_text(json.dumps(syllabus))
    return bucket


@pytest.fixture
def db():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()


def test_first_run_loads_everything(db, tmp_path):
    bucket = write_bucket(tmp_path / "bucket")
    result = run_ingestion(db, bucket_dir=bucket)

    assert result["status"] == "success"
    assert db.query(Instructor).count() == 2
    ash = db.get(Instructor, 1)
    assert ash.unavailability[0]["start_time"] == "1000"
    assert ash.unavailability[0]["reason"] == "Appointment"
    assert db.get(SyllabusItem, "BGF1").pre_flight_time == 0.5


def test_unchanged_bucket_is_skipped(db, tmp_path):
    bucket = write_bucket(tmp_path / "bucket")
    first = run_ingestion(db, bucket_dir=bucket)
    second = run_ingestion(db, bucket_dir=bucket)

    assert second == {"status": "skipped", "reason": "bucket unchanged", "hash": first["hash"]}
    assert run_ingestion(db, bucket_dir=bucket, force=True)["status"] == "success"


def test_changed_record_is_upserted(db, tmp_path):
    bucket = write_bucket(tmp_path / "bucket")
    run_ingestion(db, bucket_dir=bucket)

    write_bucket(bucket, syllabus=[{"id": "BGF1", "pre_flight_time": 1.0, "post_flight_time": 0.25}])
    result = run_ingestion(db, bucket_dir=bucket)

    assert result["diff"]["syllabus"] == {"upserted": ["BGF1"], "unchanged": []}
    assert result["diff"]["instructors"]["upserted"] == []
    assert db.get(SyllabusItem, "BGF1").pre_flight_time == 1.0


def test_invalid_record_fails_run_and_is_recorded(db, tmp_path):
    bucket = write_bucket(tmp_path / "bucket",
                          syllabus=[{"id": "BGF1", "pre_flight_time": -0.5}])
    with pytest.raises(ValidationError):
        run_ingestion(db, bucket_dir=bucket)

    [run] = db.query(IngestionRun).all()
    assert run.status == "failed"
    assert db.query(Instructor).count() == 0


def test_directory_feeds_program_context(db, tmp_path):
    run_ingestion(db, bucket_dir=write_bucket(tmp_path / "bucket"))
    context = ProgramContext.from_db(db, Settings(flight_turnaround=0.75))

    assert context.flight_turnaround == 0.75
    assert {i.name: i.role for i in context.instructors} == {"Flt Lt Ash": "QFI", "Mr Hill": "SIM IP"}
    assert context.trainees[0].is_paused
    assert context.syllabus_details["BGF1"].post_flight_time == 0.25

    ash = next(i for i in context.instructors if i.name == "Flt Lt Ash")
    assert context.is_person_statically_unavailable(ash, 11.0, 12.0, "2025-07-07", "flight")


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
