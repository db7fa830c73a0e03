"""
Instructor substitution search and turnaround detection with the production
ProgramContext (built in memory, no DB).

  pytest dfp/remedy/test_substitution.py
"""
import pytest

from dfp.remedy.context import ProgramContext
from dfp.remedy.engine import BUFFER_HOURS, apply_remedy, generate_targeted_time_shift_remedies
from dfp.remedy.instructors import generate_instructor_remedies_at_time, instructor_can_take
from dfp.remedy.violations import (
    ViolationKind, classify_violation, detect_turnaround_violations, violation_kinds,
)
from dfp.scheduling.domain import (
    Event, EventType, Instructor, SyllabusItemDetail, Trainee, UnavailabilityPeriod,
)

DAY = "2025-07-07"


def event(id, start, duration=1.0, resource="A001", type=EventType.FLIGHT, **kw) -> Event:
    return Event(id=id, date=DAY, type=type, start_time=start, duration=duration,
                 resource_id=resource, **kw)


INSTRUCTORS = [
    Instructor("Flt Lt Ash", rank="FLTLT"),
    Instructor("Flt Lt Fox", rank="FLTLT"),                        # free all day
    Instructor("Flt Lt Gray", rank="FLTLT"),                       # flew earlier
    Instructor("Mr Hill", rank="CIV", role="SIM IP"),              # FTD only
    Instructor("Sqn Ldr Ives", rank="SQNLDR", unavailability=[
        UnavailabilityPeriod(start_date=DAY, end_date="2025-07-08", all_day=True, reason="Leave"),
    ]),
    Instructor("Flt Lt Jones", rank="FLTLT"),                      # busy at the new time
    Instructor("Flt Lt King", rank="FLTLT"),                       # would blow duty
]

DAY_EVENTS = [
    event("G1", 7.0, resource="A002", instructor="Flt Lt Gray", student="Off Cdt Cole"),
    event("J1", 11.0, resource="A003", instructor="Flt Lt Jones"),
    event("K1", 23.0, duration=0.5, resource="A004", instructor="Flt Lt King"),
]


# ── Qualification ─────────────────────────────────────────────────────────────

def test_instructor_qualification_by_event_type():
    qfi, sim_ip = Instructor("A"), Instructor("B", role="SIM IP")
    assert instructor_can_take(qfi, EventType.FLIGHT)
    assert not instructor_can_take(sim_ip, EventType.FLIGHT)
    assert instructor_can_take(sim_ip, EventType.FTD)
    assert instructor_can_take(sim_ip, EventType.GROUND)


# ── Substitution search ───────────────────────────────────────────────────────

def test_substitutes_are_free_qualified_and_least_loaded_first():
    conflicted = event("C", 10.2, instructor="Flt Lt Ash", student="Off Cdt Bell")
    remedies = generate_instructor_remedies_at_time(
        conflicted, DAY_EVENTS + [conflicted], 10.5 + BUFFER_HOURS,
        instructors=INSTRUCTORS, syllabus_details=[], max_crew_duty_period=12.0,
    )

    names = [r.instructor.name for r in remedies]
    assert names == ["Flt Lt Fox", "Flt Lt Gray"]
    assert all(r.type == "instructor" for r in remedies)

    fox, gray = (r.instructor for r in remedies)
    assert fox.duty_hours == 1.0 and fox.flights_today == 0
    assert gray.duty_hours == pytest.approx(4.58, abs=0.01)
    assert gray.flights_today == 1


def test_sim_ip_offered_for_ftd():
    conflicted = event("C", 10.0, resource="FTD1", type=EventType.FTD, instructor="Flt Lt Ash")
    remedies = generate_instructor_remedies_at_time(
        conflicted, [conflicted], 10.0,
        instructors=INSTRUCTORS, syllabus_details=[], max_crew_duty_period=12.0,
    )
    assert "Mr Hill" in [r.instructor.name for r in remedies]
    assert "Sqn Ldr Ives" not in [r.instructor.name for r in remedies]


def test_booking_buffers_count_towards_busy_and_duty():
    syllabus = [SyllabusItemDetail("BGF5", pre_flight_time=1.0, post_flight_time=0.5)]
    conflicted = event("C", 10.0, flight_number="BGF5", instructor="Flt Lt Ash")
    # Fox debriefs until 9.5 + 0.5 = 10.0, C's brief starts at 9.0 → clash
    fox_sortie = event("F1", 8.5, resource="A005", flight_number="BGF5", instructor="Flt Lt Fox")
    remedies = generate_instructor_remedies_at_time(
        conflicted, [conflicted, fox_sortie], 10.0,
        instructors=[Instructor("Flt Lt Fox")], syllabus_details=syllabus,
        max_crew_duty_period=12.0,
    )
    assert remedies == []


# ── End to end through ProgramContext ─────────────────────────────────────────

@pytest.fixture
def context():
    return ProgramContext(
        flight_turnaround=0.5,
        ftd_turnaround=0.25,
        max_crew_duty_period=12.0,
        instructors=INSTRUCTORS,
        trainees=[Trainee("Off Cdt Bell"), Trainee("Off Cdt Cole")],
        clock=lambda: 7.0,
    )


def test_delay_with_substitute_instructor(context):
    prev = event("P", 9.0)
    conflicted = event("C", 10.2, instructor="Flt Lt Ash", student="Off Cdt Bell")
    ash_ftd = event("F", 11.0, resource="FTD1", type=EventType.FTD, instructor="Flt Lt Ash")
    events = DAY_EVENTS + [prev, conflicted, ash_ftd]

    remedies = generate_targeted_time_shift_remedies(
        conflicted, events, ["Turnaround violation with previous event"], 18.0, context)

    assert [r.instructor.name for r in remedies] == ["Flt Lt Fox", "Flt Lt Gray"]
    assert all(r.new_start_time == pytest.approx(10.5 + BUFFER_HOURS) for r in remedies)

    updated = apply_remedy(conflicted, remedies[0])
    assert updated.instructor == "Flt Lt Fox"
    assert updated.start_time == pytest.approx(10.5 + BUFFER_HOURS)


def test_no_substitute_when_trainee_is_busy_at_new_time(context):
    prev = event("P", 9.0)
    conflicted = event("C", 10.2, instructor="Flt Lt Ash", student="Off Cdt Bell")
    lecture = event("G", 10.5, resource="CLASS1", type=EventType.GROUND,
                    attendees=("Off Cdt Bell",))

    remedies = generate_targeted_time_shift_remedies(
        conflicted, [prev, conflicted, lecture], [ViolationKind.PREV_TURNAROUND], 18.0, context)

    assert remedies == []


def test_no_substitute_when_trainee_is_unavailable():
    bell = Trainee("Off Cdt Bell", unavailability=[
        UnavailabilityPeriod(start_date=DAY, end_date=DAY, all_day=False,
                             start_time="1030", end_time="1200", reason="Appointment"),
    ])
    conflicted = event("C", 10.2, instructor="Flt Lt Ash", student="Off Cdt Bell")
    kwargs = dict(instructors=INSTRUCTORS, syllabus_details=[], max_crew_duty_period=12.0)

    assert generate_instructor_remedies_at_time(
        conflicted, [conflicted], 10.5 + BUFFER_HOURS, trainees=[bell], **kwargs) == []
    # same trainee, earlier slot clear of the appointment
    assert generate_instructor_remedies_at_time(
        conflicted, [conflicted], 8.0, trainees=[bell], **kwargs) != []


# ── Violations ────────────────────────────────────────────────────────────────

def test_classify_violation_messages():
    assert classify_violation("Turnaround violation with previous event BGF1") == ViolationKind.PREV_TURNAROUND
    assert classify_violation("Turnaround violation with next event BGF3") == ViolationKind.NEXT_TURNAROUND
    assert classify_violation("NEXT_TURNAROUND") == ViolationKind.NEXT_TURNAROUND
    assert classify_violation("Trainee exceeds daily event limit") == ViolationKind.OTHER
    assert violation_kinds(["x", ViolationKind.PREV_TURNAROUND]) == {
        ViolationKind.OTHER, ViolationKind.PREV_TURNAROUND}


def test_detect_turnaround_violations_both_sides(context):
    prev = event("P", 9.0, flight_number="BGF1")
    conflicted = event("C", 10.2, flight_number="BGF2")
    nxt = event("N", 11.4, flight_number="BGF3")

    found = detect_turnaround_violations(conflicted, [prev, conflicted, nxt], context)

    assert [v.kind for v in found] == [ViolationKind.PREV_TURNAROUND, ViolationKind.NEXT_TURNAROUND]
    assert found[0].message.startswith("Turnaround violation with previous")
    assert found[1].message.startswith("Turnaround violation with next")


def test_detect_exact_gap_is_not_a_violation(context):
    prev = event("P", 9.0)
    conflicted = event("C", 10.5)   # exactly prev.end + 0.5
    assert detect_turnaround_violations(conflicted, [prev, conflicted], context) == []


def test_applied_remedy_clears_the_violation(context):
    prev = event("P", 9.0)
    conflicted = event("C", 10.2)
    violations = detect_turnaround_violations(conflicted, [prev, conflicted], context)
    [remedy] = generate_targeted_time_shift_remedies(conflicted, [prev, conflicted], violations, 18.0, context)

    moved = apply_remedy(conflicted, remedy)
    assert detect_turnaround_violations(moved, [prev, moved], context) == []


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
