"""
Instructor substitution — who else could take this event at a given time.

Nobody but the instructor changes, so the rest of the crew must already be
free at the new time; if not, there is nothing to offer.

Strategy (greedy, least-loaded first):
  For each instructor not already on the event:
    1. Skip if not qualified for the event type
    2. Skip if statically unavailable over the booking window
    3. Skip if already booked on an overlapping event that day
    4. Skip if taking the event would break the crew duty period
    5. Otherwise → candidate, with today's load attached
"""

from typing import Sequence

from dfp.scheduling.availability import get_personnel, is_person_statically_unavailable
from dfp.scheduling.booking import SyllabusLookup, get_event_booking_window
from dfp.scheduling.state import ProgramState
from dfp.scheduling.domain import (
    BookingWindow, Event, EventType, Instructor, InstructorOption, InstructorRemedy,
    Trainee,
)

SIM_IP = "SIM IP"
QFI = "QFI"


def instructor_can_take(instructor: Instructor, event_type) -> bool:
    """Flights need a QFI. FTDs take a QFI or a SIM IP. Anything else, anyone."""
    if event_type == EventType.FLIGHT:
        return instructor.role == QFI
    if event_type == EventType.FTD:
        return instructor.role in (QFI, SIM_IP)
    return True


def generate_instructor_remedies_at_time(
    conflicted_event: Event,
    all_events: list[Event],
    at_time: float,
    *,
    instructors: list[Instructor],
    trainees: Sequence[Trainee] = (),
    syllabus_details: SyllabusLookup,
    max_crew_duty_period: float,
) -> list[InstructorRemedy]:
    shifted = conflicted_event.shifted_to(at_time)
    window = get_event_booking_window(shifted, syllabus_details)
    state = ProgramState.build(e for e in all_events if e.date == conflicted_event.date)
    on_event = set(get_personnel(conflicted_event))

    if not _rest_of_crew_available(conflicted_event, window, state, trainees, syllabus_details):
        return []

    remedies = []
    for inst in instructors:
        if inst.name in on_event:
            continue
        if not instructor_can_take(inst, conflicted_event.type):
            continue
        if is_person_statically_unavailable(inst, window.start, window.end,
                                            conflicted_event.date, conflicted_event.type):
            continue
        if not state.is_free(inst.name, window, conflicted_event.date,
                             syllabus_details, exclude_id=conflicted_event.id):
            continue

        duty = state.duty_window(inst.name, conflicted_event.date, syllabus_details,
                                 extra=window, exclude_id=conflicted_event.id)
        if duty.hours > max_crew_duty_period:
            continue

        remedies.append(InstructorRemedy(
            instructor=_make_option(inst, state, conflicted_event, duty.hours)
        ))

    remedies.sort(key=lambda r: (r.instructor.duty_hours, r.instructor.name))
    return remedies


# ── Option builder ────────────────────────────────────────────────────────────

def _make_option(inst: Instructor, state: ProgramState,
                 conflicted_event: Event, duty_hours: float) -> InstructorOption:
    today = state.events_for(inst.name, conflicted_event.date, exclude_id=conflicted_event.id)
    return InstructorOption(
        name=inst.name,
        rank=inst.rank,
        duty_hours=round(duty_hours, 2),
        flights_today=_count(today, EventType.FLIGHT),
        ftds_today=_count(today, EventType.FTD),
        cpts_today=_count(today, EventType.CPT),
        ground_today=_count(today, EventType.GROUND),
    )


def _count(events: list[Event], event_type: EventType) -> int:
    return sum(1 for e in events if e.type == event_type)


def _rest_of_crew_available(conflicted_event: Event, window: BookingWindow,
                            state: ProgramState, trainees: Sequence[Trainee],
                            syllabus_details: SyllabusLookup) -> bool:
    """Students, pilots, crew and attendees stay on the event whoever instructs it."""
    known = {t.full_name: t for t in trainees}
    for name in get_personnel(conflicted_event):
        if name == conflicted_event.instructor:
            continue
        trainee = known.get(name)
        if trainee is not None and is_person_statically_unavailable(
                trainee, window.start, window.end,
                conflicted_event.date, conflicted_event.type):
            return False
        if not state.is_free(name, window, conflicted_event.date,
                             syllabus_details, exclude_id=conflicted_event.id):
            return False
    return True
