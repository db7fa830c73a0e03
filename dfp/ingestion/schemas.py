from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from enum import Enum


class InstructorRole(str, Enum):
    QFI = "QFI"
    SIM_IP = "SIM IP"


class UnavailabilityReason(str, Enum):
    TMUF = "TMUF"
    TMUF_GROUND_ONLY = "TMUF - Ground Duties only"
    LEAVE = "Leave"
    APPOINTMENT = "Appointment"
    OTHER = "Other"


class UnavailabilitySchema(BaseModel):
    id: Optional[str] = None
    start_date: str                 # ISO date
    end_date: str                   # exclusive when all_day
    all_day: bool = True
    start_time: Optional[str] = None  # "HHMM"
    end_time: Optional[str] = None
    reason: UnavailabilityReason = UnavailabilityReason.OTHER
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def valid_hhmm(cls, v):
        if v is None:
            return v
        digits = v.replace(":", "")
        assert len(digits) == 4 and digits.isdigit(), f"Bad time: {v}"
        h, m = int(digits[:2]), int(digits[2:])
        assert 0 <= h <= 24 and 0 <= m <= 59, f"Bad time: {v}"
        return digits

    @model_validator(mode="after")
    def dates_in_order(self):
        assert self.start_date <= self.end_date, \
            f"Unavailability ends before it starts: {self.start_date} > {self.end_date}"
        return self


class InstructorSchema(BaseModel):
    id: int
    name: str
    rank: Optional[str] = None
    role: InstructorRole = InstructorRole.QFI
    unavailability: list[UnavailabilitySchema] = []


class TraineeSchema(BaseModel):
    id: int
    full_name: str
    name: Optional[str] = None
    rank: Optional[str] = None
    course: Optional[str] = None
    is_paused: bool = False
    unavailability: list[UnavailabilitySchema] = []


class SyllabusItemSchema(BaseModel):
    id: str
    code: Optional[str] = None
    phase: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    pre_flight_time: float = 0.0
    post_flight_time: float = 0.0

    @field_validator("pre_flight_time", "post_flight_time")
    @classmethod
    def non_negative(cls, v):
        assert v >= 0, f"Buffer can't be negative: {v}"
        return v
