"""
Utility functions for people/time availability checks.

Static availability only looks at a person's unavailability records (leave,
TMUF, appointments). Whether they are already booked on another event is a
separate question, see dfp.scheduling.state.
"""

from dfp.scheduling.domain import Event, EventType, Person, Trainee, UnavailabilityPeriod

END_OF_DAY = 24.0
GROUND_DUTIES_ONLY = "TMUF - Ground Duties only"
FLYING_TYPES = (EventType.FLIGHT, EventType.FTD)


def parse_hhmm(t: str) -> float:
    """'0930' or '09:30' → 9.5"""
    t = t.strip().replace(":", "")
    return int(t[:-2] or 0) + int(t[-2:]) / 60


def format_hhmm(hours: float) -> str:
    """9.5 → '0930'"""
    total = int(round(hours * 60))
    return f"{total // 60:02d}{total % 60:02d}"


def get_personnel(event: Event) -> list[str]:
    """Everyone on the event (instructor, student, pilot, crew, attendees), de-duplicated."""
    names = [event.instructor, event.student, event.pilot, event.crew, *event.attendees]
    seen = []
    for n in names:
        if n and n not in seen:
            seen.append(n)
    return seen


def period_covers_date(period: UnavailabilityPeriod, d: str) -> bool:
    """All-day periods end on the first day back, so their end date is exclusive."""
    if period.all_day:
        return period.start_date <= d < period.end_date
    return period.start_date <= d <= period.end_date


def period_hours_on(period: UnavailabilityPeriod, d: str) -> tuple[float, float]:
    """
    The part of `d` a period blocks, as (start, end) hours.
    Multi-day timed periods block from start_time on the first day,
    until end_time on the last, and the whole day in between.
    """
    if period.all_day:
        return 0.0, END_OF_DAY

    start = parse_hhmm(period.start_time) if period.start_time else 0.0
    end = parse_hhmm(period.end_time) if period.end_time else END_OF_DAY

    if period.start_date == period.end_date:
        return start, end
    if d == period.start_date:
        return start, END_OF_DAY
    if d == period.end_date:
        return 0.0, end
    return 0.0, END_OF_DAY


def _blocks_event_type(period: UnavailabilityPeriod, event_type) -> bool:
    if period.reason == GROUND_DUTIES_ONLY:
        return event_type in FLYING_TYPES
    return True


def is_person_statically_unavailable(person: Person, start: float, end: float,
                                     d: str, event_type=None) -> bool:
    """
    True if any unavailability record covers `d` and intersects [start, end).
    Ground-duties-only TMUF only rules a person out of flights and FTDs.
    """
    if isinstance(person, Trainee) and person.is_paused:
        return True

    for period in person.unavailability:
        if not period_covers_date(period, d):
            continue
        if event_type is not None and not _blocks_event_type(period, event_type):
            continue
        p_start, p_end = period_hours_on(period, d)
        if p_start < end and start < p_end:
            return True
    return False
