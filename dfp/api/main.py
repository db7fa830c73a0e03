"""
FastAPI app — remedy endpoints for the scheduling UI:
  POST /ingest/run
  POST /conflicts/detect
  POST /remedies/timeshift
"""
import logging

from fastapi import FastAPI, Depends, HTTPException
from sqlalchemy.orm import Session

from dfp.api.schemas import DetectRequest, TimeShiftRequest
from dfp.config import get_settings
from dfp.database import get_db, init_db
from dfp.ingestion.job import run_ingestion
from dfp.remedy.context import ProgramContext
from dfp.remedy.engine import generate_targeted_time_shift_remedies
from dfp.remedy.violations import detect_turnaround_violations

log = logging.getLogger(__name__)

app = FastAPI(title="DFP Remedy API", version="1.0.0")


# Initialize DB tables on startup
@app.on_event("startup")
def startup():
    init_db()
    log.info("database initialized")


# ── Ingestion ─────────────────────────────────────────────────────────────────

@app.post("/ingest/run")
def ingest_run(force: bool = False, db: Session = Depends(get_db)):
    """
    Load instructors, trainees and syllabus buffers from the bucket.
    Idempotent (skips if unchanged unless force=True).
    """
    try:
        return run_ingestion(db, force=force)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# ── Conflict detection ────────────────────────────────────────────────────────

@app.post("/conflicts/detect")
def conflicts_detect(req: DetectRequest, db: Session = Depends(get_db)):
    """Turnaround violations for one event against the rest of the day."""
    try:
        context = ProgramContext.from_db(db)
        violations = detect_turnaround_violations(
            req.event.to_event(), [e.to_event() for e in req.events], context
        )
        return {
            "event_id": req.event.id,
            "violations": [{"kind": v.kind.value, "message": v.message} for v in violations],
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# ── Remedies ──────────────────────────────────────────────────────────────────

@app.post("/remedies/timeshift")
def remedies_timeshift(req: TimeShiftRequest, db: Session = Depends(get_db)):
    """
    Suggest a new start time (and instructor if the original crew can't make it).
    An empty list means no automated solution; manual intervention required.
    """
    try:
        settings = get_settings()
        context = ProgramContext.from_db(db, settings)
        if req.now_hours is not None:
            pinned = req.now_hours
            context.clock = lambda: pinned

        flying_end_time = req.flying_end_time
        if flying_end_time is None:
            flying_end_time = settings.flying_end_time

        remedies = generate_targeted_time_shift_remedies(
            req.conflicted_event.to_event(),
            [e.to_event() for e in req.events],
            req.violations,
            flying_end_time,
            context,
        )
        return {
            "event_id": req.conflicted_event.id,
            "remedies": [r.to_dict() for r in remedies],
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# ── Health check ──────────────────────────────────────────────────────────────

@app.get("/")
def root():
    return {
        "service": "DFP Remedy API",
        "version": "1.0.0",
        "endpoints": ["/ingest/run", "/conflicts/detect", "/remedies/timeshift"]
    }
