"""
Time-shift remedy engine — proposes a new start time (and, if needed, a new
instructor) for an event that breaks turnaround with its neighbour.

Strategy (single candidate, strict priority):
  PREV_TURNAROUND present → DELAY
    1. Previous real (non-STBY) event on the line; none → nothing to do
    2. required = prev.end + effective turnaround (crew gap if shared crew)
    3. latest   = next.start - duration - base turnaround, else flying end - duration
    4. candidate = required + buffer, must not pass latest
  else NEXT_TURNAROUND present → EARLY
    1. Next event on the line; none → nothing to do
    2. new start = next.start - effective turnaround - duration
    3. can't brief in the past: new start - pre-flight >= now
    4. earliest = prev.end + base turnaround, else unbounded
    5. candidate = new start - buffer, must not pass earliest
  Then for the candidate:
    original crew free → one timeshift with the original instructor
    otherwise         → one timeshift per substitute instructor, or nothing

Previous-conflicts are resolved before next-conflicts. If an event has both,
only the delay is proposed; the caller re-runs after applying it.

Infeasible always means an empty list, never an exception.
"""
import logging
import math
from dataclasses import replace
from typing import Iterable, Optional, Union

from dfp.remedy.context import RemedyContext
from dfp.remedy.violations import Violation, ViolationKind, violation_kinds
from dfp.scheduling.booking import pre_flight_time
from dfp.scheduling.state import ProgramState
from dfp.scheduling.turnaround import base_turnaround, effective_turnaround
from dfp.scheduling.domain import (
    Event, InstructorOption, Person, Remedy, TimeShiftRemedy,
)

log = logging.getLogger(__name__)

BUFFER_HOURS = 5 / 60


def generate_targeted_time_shift_remedies(
    conflicted_event: Event,
    all_events: list[Event],
    violations: Iterable[Union[Violation, ViolationKind, str]],
    flying_end_time: float,
    context: RemedyContext,
) -> list[TimeShiftRemedy]:
    kinds = violation_kinds(violations)
    day_events = [e for e in all_events if e.date == conflicted_event.date]
    state = ProgramState.build(day_events)
    base = base_turnaround(conflicted_event.type,
                           context.flight_turnaround, context.ftd_turnaround)

    if ViolationKind.PREV_TURNAROUND in kinds:
        if ViolationKind.NEXT_TURNAROUND in kinds:
            log.debug("event %s: next-turnaround deferred until the delay is applied",
                      conflicted_event.id)
        candidate = _delay_candidate(conflicted_event, state, base, flying_end_time, context)
    elif ViolationKind.NEXT_TURNAROUND in kinds:
        candidate = _early_candidate(conflicted_event, state, base, context)
    else:
        return []

    if candidate is None:
        return []
    return _remedies_at(conflicted_event, day_events, candidate, context)


def apply_remedy(event: Event, remedy: Remedy) -> Event:
    """The updated copy of `event` once a remedy is accepted."""
    changes = {}
    if isinstance(remedy, TimeShiftRemedy):
        changes["start_time"] = remedy.new_start_time
    if remedy.instructor.name:
        changes["instructor"] = remedy.instructor.name
    return replace(event, **changes)


# ── Branches ──────────────────────────────────────────────────────────────────

def _delay_candidate(event: Event, state: ProgramState, base: float,
                     flying_end_time: float, context: RemedyContext) -> Optional[float]:
    prev_event = state.previous_on_resource(event, skip_standby=True)
    if prev_event is None:
        log.debug("event %s: no previous real event to delay past", event.id)
        return None

    gap = effective_turnaround(prev_event, event, base,
                               context.syllabus_details, context.get_personnel)
    required_start = prev_event.end_time + gap

    next_event = state.next_on_resource(event)
    if next_event is not None:
        max_start = next_event.start_time - event.duration - base
    else:
        max_start = flying_end_time - event.duration

    if required_start + BUFFER_HOURS > max_start:
        log.debug("event %s: delay to %.3f doesn't fit before %.3f",
                  event.id, required_start + BUFFER_HOURS, max_start)
        return None
    return required_start + BUFFER_HOURS


def _early_candidate(event: Event, state: ProgramState, base: float,
                     context: RemedyContext) -> Optional[float]:
    next_event = state.next_on_resource(event)
    if next_event is None:
        return None

    gap = effective_turnaround(event, next_event, base,
                               context.syllabus_details, context.get_personnel)
    new_start = next_event.start_time - gap - event.duration

    if new_start - pre_flight_time(event, context.syllabus_details) < context.now_hours():
        log.debug("event %s: brief for %.3f would be in the past", event.id, new_start)
        return None

    prev_event = state.previous_on_resource(event)
    min_start = prev_event.end_time + base if prev_event is not None else -math.inf

    if new_start - BUFFER_HOURS < min_start:
        log.debug("event %s: moving early to %.3f runs into %s",
                  event.id, new_start - BUFFER_HOURS, prev_event.id)
        return None
    return new_start - BUFFER_HOURS


# ── Candidate validation ──────────────────────────────────────────────────────

def _remedies_at(event: Event, day_events: list[Event], at_time: float,
                 context: RemedyContext) -> list[TimeShiftRemedy]:
    if _original_crew_available(event, day_events, at_time, context):
        return [TimeShiftRemedy(new_start_time=at_time,
                                instructor=InstructorOption(name=event.instructor or ""))]

    substitutes = context.generate_instructor_remedies_at_time(event, day_events, at_time)
    return [TimeShiftRemedy(new_start_time=at_time, instructor=r.instructor)
            for r in substitutes]


def _find_person(name: str, context: RemedyContext) -> Optional[Person]:
    for inst in context.instructors:
        if inst.name == name:
            return inst
    for trainee in context.trainees:
        if trainee.full_name == name:
            return trainee
    return None


def _original_crew_available(event: Event, day_events: list[Event], at_time: float,
                             context: RemedyContext) -> bool:
    """Every known instructor/trainee on the event can make the shifted booking window."""
    window = context.get_event_booking_window(event.shifted_to(at_time), context.syllabus_details)

    for name in context.get_personnel(event):
        person = _find_person(name, context)
        if person is None:
            continue
        if context.is_person_statically_unavailable(person, window.start, window.end,
                                                    event.date, event.type):
            return False
        for other in day_events:
            if other.id == event.id or name not in context.get_personnel(other):
                continue
            if window.overlaps(context.get_event_booking_window(other, context.syllabus_details)):
                return False
    return True
