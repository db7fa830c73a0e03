"""
Domain types for the daily flying program.

Times are hours as floats (8.5 == 08:30). Dates are ISO strings ("2025-07-07").
Everything here is a value object. The remedy engine reads these and hands
back new ones, it never mutates what the caller owns.
"""
from dataclasses import dataclass, field, replace, asdict
from enum import Enum
from typing import Optional, Union


class EventType(str, Enum):
    FLIGHT = "flight"
    FTD = "ftd"
    GROUND = "ground"
    CPT = "cpt"
    DEPLOYMENT = "deployment"


STANDBY_PREFIX = "STBY"


# ── Program ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Event:
    id: str
    date: str
    type: EventType
    start_time: float
    duration: float
    resource_id: str                       # tail number, FTD line or STBY placeholder
    flight_number: str = ""                # syllabus item id
    instructor: Optional[str] = None
    student: Optional[str] = None
    pilot: Optional[str] = None
    crew: Optional[str] = None
    attendees: tuple[str, ...] = ()

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    @property
    def is_standby(self) -> bool:
        return self.resource_id.startswith(STANDBY_PREFIX)

    def shifted_to(self, start_time: float) -> "Event":
        """Hypothetical copy of this event at another start time."""
        return replace(self, start_time=start_time)


@dataclass(frozen=True)
class BookingWindow:
    start: float
    end: float

    def overlaps(self, other: "BookingWindow") -> bool:
        return self.start < other.end and self.end > other.start

    @property
    def hours(self) -> float:
        return self.end - self.start


@dataclass
class SyllabusItemDetail:
    id: str
    pre_flight_time: float = 0.0
    post_flight_time: float = 0.0
    code: Optional[str] = None
    phase: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None             # "Flight" | "FTD" | "Ground School"


# ── People ────────────────────────────────────────────────────────────────────

@dataclass
class UnavailabilityPeriod:
    start_date: str
    end_date: str                          # exclusive for all-day periods
    all_day: bool = True
    start_time: Optional[str] = None       # "HHMM"
    end_time: Optional[str] = None
    reason: str = "Other"
    id: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class Instructor:
    name: str
    rank: str = ""
    role: str = "QFI"                      # "QFI" | "SIM IP"
    unavailability: list[UnavailabilityPeriod] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name


@dataclass
class Trainee:
    full_name: str
    name: str = ""
    rank: str = ""
    course: str = ""
    is_paused: bool = False
    unavailability: list[UnavailabilityPeriod] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.full_name


Person = Union[Instructor, Trainee]


# ── Remedies ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InstructorOption:
    name: str
    rank: str = ""
    duty_hours: float = 0.0
    flights_today: int = 0
    ftds_today: int = 0
    cpts_today: int = 0
    ground_today: int = 0


@dataclass(frozen=True)
class TimeShiftRemedy:
    new_start_time: float
    instructor: InstructorOption
    type: str = "timeshift"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class InstructorRemedy:
    instructor: InstructorOption
    type: str = "instructor"

    def to_dict(self) -> dict:
        return asdict(self)


Remedy = Union[TimeShiftRemedy, InstructorRemedy]
