from pydantic import BaseModel, field_validator
from typing import Optional

from dfp.scheduling.domain import Event, EventType


class EventSchema(BaseModel):
    id: str
    date: str
    type: EventType
    start_time: float
    duration: float
    resource_id: str
    flight_number: str = ""
    instructor: Optional[str] = None
    student: Optional[str] = None
    pilot: Optional[str] = None
    crew: Optional[str] = None
    attendees: list[str] = []

    @field_validator("start_time")
    @classmethod
    def not_before_midnight(cls, v):
        assert v >= 0, f"start_time must be >= 0, got {v}"
        return v

    @field_validator("duration")
    @classmethod
    def positive_duration(cls, v):
        assert v > 0, f"duration must be > 0, got {v}"
        return v

    def to_event(self) -> Event:
        data = self.model_dump()
        data["attendees"] = tuple(data["attendees"])
        return Event(**data)


class DetectRequest(BaseModel):
    event: EventSchema
    events: list[EventSchema]


class TimeShiftRequest(BaseModel):
    conflicted_event: EventSchema
    events: list[EventSchema]
    violations: list[str]                   # detector messages or ViolationKind values
    flying_end_time: Optional[float] = None   # defaults to DFP_FLYING_END_TIME
    now_hours: Optional[float] = None         # pin the clock, e.g. when planning ahead
