"""
What the remedy engine needs from the outside world.

RemedyContext is the contract; ProgramContext is the production version,
backed by the personnel/syllabus tables and the config turnaround settings.
Tests pass their own double with a fixed clock.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Protocol

from sqlalchemy.orm import Session

from dfp import models
from dfp.config import Settings, get_settings
from dfp.remedy.instructors import generate_instructor_remedies_at_time
from dfp.scheduling.availability import get_personnel, is_person_statically_unavailable
from dfp.scheduling.booking import SyllabusLookup, get_event_booking_window
from dfp.scheduling.domain import (
    BookingWindow, Event, Instructor, InstructorRemedy, Person,
    SyllabusItemDetail, Trainee, UnavailabilityPeriod,
)


class RemedyContext(Protocol):
    flight_turnaround: float
    ftd_turnaround: float
    max_crew_duty_period: float
    syllabus_details: SyllabusLookup
    instructors: list[Instructor]
    trainees: list[Trainee]

    def get_personnel(self, event: Event) -> list[str]: ...

    def get_event_booking_window(self, event: Event,
                                 syllabus_details: SyllabusLookup) -> BookingWindow: ...

    def is_person_statically_unavailable(self, person: Person, start: float, end: float,
                                         d: str, event_type) -> bool: ...

    def generate_instructor_remedies_at_time(self, conflicted_event: Event,
                                             all_events: list[Event],
                                             at_time: float) -> list[InstructorRemedy]: ...

    def now_hours(self) -> float: ...


def wall_clock_hours() -> float:
    now = datetime.now()
    return now.hour + now.minute / 60


@dataclass
class ProgramContext:
    flight_turnaround: float
    ftd_turnaround: float
    max_crew_duty_period: float
    syllabus_details: dict[str, SyllabusItemDetail] = field(default_factory=dict)
    instructors: list[Instructor] = field(default_factory=list)
    trainees: list[Trainee] = field(default_factory=list)
    clock: Callable[[], float] = wall_clock_hours

    @classmethod
    def from_db(cls, db: Session, settings: Optional[Settings] = None) -> "ProgramContext":
        settings = settings or get_settings()
        instructors, trainees, syllabus = load_directory(db)
        return cls(
            flight_turnaround=settings.flight_turnaround,
            ftd_turnaround=settings.ftd_turnaround,
            max_crew_duty_period=settings.max_crew_duty_period,
            syllabus_details={s.id: s for s in syllabus},
            instructors=instructors,
            trainees=trainees,
        )

    def get_personnel(self, event: Event) -> list[str]:
        return get_personnel(event)

    def get_event_booking_window(self, event: Event,
                                 syllabus_details: SyllabusLookup) -> BookingWindow:
        return get_event_booking_window(event, syllabus_details)

    def is_person_statically_unavailable(self, person: Person, start: float, end: float,
                                         d: str, event_type) -> bool:
        return is_person_statically_unavailable(person, start, end, d, event_type)

    def generate_instructor_remedies_at_time(self, conflicted_event: Event,
                                             all_events: list[Event],
                                             at_time: float) -> list[InstructorRemedy]:
        return generate_instructor_remedies_at_time(
            conflicted_event, all_events, at_time,
            instructors=self.instructors,
            trainees=self.trainees,
            syllabus_details=self.syllabus_details,
            max_crew_duty_period=self.max_crew_duty_period,
        )

    def now_hours(self) -> float:
        return self.clock()


# ── Directory loading ─────────────────────────────────────────────────────────

def load_directory(db: Session) -> tuple[list[Instructor], list[Trainee], list[SyllabusItemDetail]]:
    """Personnel + syllabus rows → domain dataclasses."""
    instructors = [
        Instructor(
            name=row.name, rank=row.rank or "", role=row.role,
            unavailability=_periods(row.unavailability),
        )
        for row in db.query(models.Instructor).all()
    ]
    trainees = [
        Trainee(
            full_name=row.full_name, name=row.name or "", rank=row.rank or "",
            course=row.course or "", is_paused=bool(row.is_paused),
            unavailability=_periods(row.unavailability),
        )
        for row in db.query(models.Trainee).all()
    ]
    syllabus = [
        SyllabusItemDetail(
            id=row.id, pre_flight_time=row.pre_flight_time or 0.0,
            post_flight_time=row.post_flight_time or 0.0,
            code=row.code, phase=row.phase, description=row.description, type=row.type,
        )
        for row in db.query(models.SyllabusItem).all()
    ]
    return instructors, trainees, syllabus


def _periods(raw) -> list[UnavailabilityPeriod]:
    return [UnavailabilityPeriod(**p) for p in (raw or [])]
