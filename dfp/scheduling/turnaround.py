"""
Business rules for the gap between two events on the same resource.
Used by the conflict detector and the remedy engine alike.
"""
from typing import Callable

from dfp.scheduling.availability import get_personnel
from dfp.scheduling.booking import SyllabusLookup, post_flight_time, pre_flight_time
from dfp.scheduling.domain import Event, EventType


def base_turnaround(event_type, flight_turnaround: float, ftd_turnaround: float) -> float:
    """Aircraft and FTD lines need turning around; everything else doesn't."""
    if event_type == EventType.FLIGHT:
        return flight_turnaround
    if event_type == EventType.FTD:
        return ftd_turnaround
    return 0.0


def shares_crew(a: Event, b: Event,
                personnel: Callable[[Event], list[str]] = get_personnel) -> bool:
    crew_b = personnel(b)
    return any(p in crew_b for p in personnel(a))


def crew_gap(first: Event, second: Event, syllabus_details: SyllabusLookup) -> float:
    """Debrief of the earlier sortie plus brief of the later one."""
    return post_flight_time(first, syllabus_details) + pre_flight_time(second, syllabus_details)


def effective_turnaround(first: Event, second: Event, base: float,
                         syllabus_details: SyllabusLookup,
                         personnel: Callable[[Event], list[str]] = get_personnel) -> float:
    """
    Minimum legal gap between `first` and the `second` event that follows it.
    A line turns around faster than a crew can debrief and re-brief, so when
    the same people fly back-to-back the larger of the two binds.
    """
    if shares_crew(first, second, personnel):
        return max(base, crew_gap(first, second, syllabus_details))
    return base
