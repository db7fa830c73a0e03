"""
Turnaround violations — what the conflict detector hands the remedy engine.

Callers that still send the old human-readable strings go through
classify_violation(); the engine itself only ever looks at ViolationKind.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from dfp.scheduling.state import ProgramState
from dfp.scheduling.turnaround import base_turnaround, effective_turnaround
from dfp.scheduling.domain import Event

PREV_TURNAROUND_TEXT = "Turnaround violation with previous"
NEXT_TURNAROUND_TEXT = "Turnaround violation with next"

# float noise from hour arithmetic (≈ 0.4 s)
EPSILON = 1e-4


class ViolationKind(str, Enum):
    PREV_TURNAROUND = "PREV_TURNAROUND"
    NEXT_TURNAROUND = "NEXT_TURNAROUND"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    message: str


def classify_violation(message: str) -> ViolationKind:
    if message in ViolationKind._value2member_map_:
        return ViolationKind(message)
    if PREV_TURNAROUND_TEXT in message:
        return ViolationKind.PREV_TURNAROUND
    if NEXT_TURNAROUND_TEXT in message:
        return ViolationKind.NEXT_TURNAROUND
    return ViolationKind.OTHER


def violation_kinds(items: Iterable[Union[Violation, ViolationKind, str]]) -> set[ViolationKind]:
    kinds = set()
    for item in items:
        if isinstance(item, Violation):
            kinds.add(item.kind)
        elif isinstance(item, ViolationKind):
            kinds.add(item)
        else:
            kinds.add(classify_violation(item))
    return kinds


def detect_turnaround_violations(event: Event, all_events: list[Event], context) -> list[Violation]:
    """
    Check `event` against its neighbours on the same line.
    Uses the same effective turnaround the remedy engine repairs against,
    so a remedy applied here always clears the violation it was built for.
    """
    state = ProgramState.build(all_events)
    base = base_turnaround(event.type, context.flight_turnaround, context.ftd_turnaround)
    violations = []

    prev_event = state.previous_on_resource(event, skip_standby=True)
    if prev_event is not None:
        gap = effective_turnaround(prev_event, event, base,
                                   context.syllabus_details, context.get_personnel)
        if event.start_time + EPSILON < prev_event.end_time + gap:
            violations.append(Violation(
                ViolationKind.PREV_TURNAROUND,
                f"{PREV_TURNAROUND_TEXT} event {prev_event.flight_number or prev_event.id} "
                f"on {event.resource_id} (needs {gap:.2f}h)",
            ))

    next_event = state.next_on_resource(event)
    if next_event is not None:
        gap = effective_turnaround(event, next_event, base,
                                   context.syllabus_details, context.get_personnel)
        if next_event.start_time + EPSILON < event.end_time + gap:
            violations.append(Violation(
                ViolationKind.NEXT_TURNAROUND,
                f"{NEXT_TURNAROUND_TEXT} event {next_event.flight_number or next_event.id} "
                f"on {event.resource_id} (needs {gap:.2f}h)",
            ))

    return violations
