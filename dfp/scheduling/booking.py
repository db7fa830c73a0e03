"""
Booking windows — the real-world time a crew is tied up by an event.

A sortie on the board runs start → start + duration, but the crew is busy from
the pre-flight brief until the post-flight debrief. Buffers come from the
syllabus item the event is flying (Event.flight_number).
"""
from typing import Iterable, Optional, Union

from dfp.scheduling.domain import BookingWindow, Event, SyllabusItemDetail

SyllabusLookup = Union[dict[str, SyllabusItemDetail], Iterable[SyllabusItemDetail]]


def find_syllabus_item(flight_number: str,
                       syllabus_details: SyllabusLookup) -> Optional[SyllabusItemDetail]:
    if isinstance(syllabus_details, dict):
        return syllabus_details.get(flight_number)
    for item in syllabus_details:
        if item.id == flight_number:
            return item
    return None


def pre_flight_time(event: Event, syllabus_details: SyllabusLookup) -> float:
    item = find_syllabus_item(event.flight_number, syllabus_details)
    return (item.pre_flight_time or 0.0) if item else 0.0


def post_flight_time(event: Event, syllabus_details: SyllabusLookup) -> float:
    item = find_syllabus_item(event.flight_number, syllabus_details)
    return (item.post_flight_time or 0.0) if item else 0.0


def get_event_booking_window(event: Event,
                             syllabus_details: SyllabusLookup) -> BookingWindow:
    """
    [start - pre_flight, start + duration + post_flight].
    Pass the hypothetical event (Event.shifted_to) when testing a candidate time.
    No syllabus entry → no buffers.
    """
    item = find_syllabus_item(event.flight_number, syllabus_details)
    pre = (item.pre_flight_time or 0.0) if item else 0.0
    post = (item.post_flight_time or 0.0) if item else 0.0
    return BookingWindow(start=event.start_time - pre, end=event.end_time + post)
