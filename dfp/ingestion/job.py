"""
Ingestion pipeline — reads bucket files, validates, upserts the personnel and
syllabus directory the remedy engine checks people against.
Idempotent: same input = same hash = skips re-insert.
"""
import json
import hashlib
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from dfp.config import get_settings
from dfp.models import Instructor, Trainee, SyllabusItem, IngestionRun
from dfp.ingestion.schemas import InstructorSchema, TraineeSchema, SyllabusItemSchema

log = logging.getLogger(__name__)

# filename → (ORM model, schema, natural key)
SOURCES = {
    "instructors.json": (Instructor, InstructorSchema, "id"),
    "trainees.json":    (Trainee, TraineeSchema, "id"),
    "syllabus.json":    (SyllabusItem, SyllabusItemSchema, "id"),
}


# ── Helpers ───────────────────────────────────────────────────────────────────

def _hash_file(path: Path) -> str:
    return hashlib.md5(path.read_bytes()).hexdigest()


def _bucket_hash(bucket_dir: Path) -> str:
    """Single hash of all bucket files combined."""
    combined = "".join(
        _hash_file(f) for f in sorted(bucket_dir.iterdir()) if f.is_file()
    )
    return hashlib.md5(combined.encode()).hexdigest()


def _load_json(bucket_dir: Path, filename: str) -> list:
    path = bucket_dir / filename
    if not path.exists():
        return []
    return json.loads(path.read_text())


# ── Upsert ────────────────────────────────────────────────────────────────────

def _upsert(db: Session, bucket_dir: Path, filename: str) -> dict:
    model, schema, key = SOURCES[filename]
    records = [schema(**r) for r in _load_json(bucket_dir, filename)]  # validates
    diff = {"upserted": [], "unchanged": []}

    for r in records:
        data = r.model_dump(mode="json")
        existing = db.get(model, data[key])

        if existing:
            changed = {k: v for k, v in data.items() if getattr(existing, k) != v}
            if changed:
                for k, v in changed.items():
                    setattr(existing, k, v)
                diff["upserted"].append(data[key])
            else:
                diff["unchanged"].append(data[key])
        else:
            db.add(model(**data))
            diff["upserted"].append(data[key])

    return diff


# ── Main entry point ──────────────────────────────────────────────────────────

def run_ingestion(db: Session, force: bool = False,
                  bucket_dir: Optional[Path] = None) -> dict:
    """
    Run full ingestion. Skips if bucket hash unchanged (idempotent).
    Set force=True to re-ingest regardless.
    """
    bucket_dir = Path(bucket_dir or get_settings().bucket_dir)
    bucket_hash = _bucket_hash(bucket_dir)

    # Idempotency check
    if not force:
        last_run = (
            db.query(IngestionRun)
            .filter(IngestionRun.status == "success")
            .order_by(IngestionRun.id.desc())
            .first()
        )
        if last_run and last_run.source_hash == bucket_hash:
            return {
                "status": "skipped",
                "reason": "bucket unchanged",
                "hash": bucket_hash
            }

    diff_summary = {}
    try:
        diff_summary["instructors"] = _upsert(db, bucket_dir, "instructors.json")
        diff_summary["trainees"]    = _upsert(db, bucket_dir, "trainees.json")
        diff_summary["syllabus"]    = _upsert(db, bucket_dir, "syllabus.json")

        db.add(IngestionRun(
            source_hash=bucket_hash,
            status="success",
            diff_summary=diff_summary
        ))
        db.commit()

    except Exception as e:
        db.rollback()
        db.add(IngestionRun(
            source_hash=bucket_hash,
            status="failed",
            diff_summary={"error": str(e)}
        ))
        db.commit()
        raise

    log.info("ingested %s from %s",
             {k: len(v["upserted"]) for k, v in diff_summary.items()}, bucket_dir)
    return {
        "status": "success",
        "hash": bucket_hash,
        "diff": diff_summary,
    }
