"""
Indexes what's already on the program for a day.
Acts as an in-memory lookup for the remedy search. Read-only, built per call.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from dfp.scheduling.availability import get_personnel
from dfp.scheduling.booking import SyllabusLookup, get_event_booking_window
from dfp.scheduling.domain import BookingWindow, Event


@dataclass
class ProgramState:
    events: list[Event] = field(default_factory=list)
    by_resource: dict = field(default_factory=dict)   # (date, resource_id) → [Event] by start
    by_person: dict = field(default_factory=dict)     # (date, name) → [Event]

    @classmethod
    def build(cls, events: Iterable[Event]) -> "ProgramState":
        state = cls()
        for e in events:
            state.add(e)
        for key in state.by_resource:
            state.by_resource[key].sort(key=lambda e: e.start_time)
        return state

    def add(self, event: Event):
        self.events.append(event)
        self.by_resource.setdefault((event.date, event.resource_id), []).append(event)
        for name in get_personnel(event):
            self.by_person.setdefault((event.date, name), []).append(event)

    # ── Resource line ─────────────────────────────────────────────────────────

    def on_resource(self, event: Event) -> list[Event]:
        return self.by_resource.get((event.date, event.resource_id), [])

    def previous_on_resource(self, event: Event,
                             skip_standby: bool = False) -> Optional[Event]:
        """Latest event on the same line starting strictly before `event`."""
        prev = None
        for e in self.on_resource(event):
            if e.start_time >= event.start_time:
                break
            if skip_standby and e.is_standby:
                continue
            prev = e
        return prev

    def next_on_resource(self, event: Event) -> Optional[Event]:
        """Earliest event on the same line starting strictly after `event`."""
        for e in self.on_resource(event):
            if e.start_time > event.start_time:
                return e
        return None

    # ── People ────────────────────────────────────────────────────────────────

    def events_for(self, name: str, d: str, exclude_id: Optional[str] = None) -> list[Event]:
        return [e for e in self.by_person.get((d, name), []) if e.id != exclude_id]

    def is_free(self, name: str, window: BookingWindow, d: str,
                syllabus_details: SyllabusLookup, exclude_id: Optional[str] = None) -> bool:
        for e in self.events_for(name, d, exclude_id):
            if window.overlaps(get_event_booking_window(e, syllabus_details)):
                return False
        return True

    def duty_window(self, name: str, d: str, syllabus_details: SyllabusLookup,
                    extra: Optional[BookingWindow] = None,
                    exclude_id: Optional[str] = None) -> Optional[BookingWindow]:
        """Earliest brief to latest debrief for `name` on `d`, optionally with one more window."""
        windows = [get_event_booking_window(e, syllabus_details)
                   for e in self.events_for(name, d, exclude_id)]
        if extra is not None:
            windows.append(extra)
        if not windows:
            return None
        return BookingWindow(start=min(w.start for w in windows),
                             end=max(w.end for w in windows))
