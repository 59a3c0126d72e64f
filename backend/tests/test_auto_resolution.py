from timetable_validator.schemas.policy import ValidationPolicy
from timetable_validator.services.auto_resolution import (
    allowed_periods_for,
    attempt_auto_resolution,
    has_conflict_at_period,
)
from timetable_validator.services.hard_constraints import (
    check_room_conflicts,
    check_subject_multiplicity,
    run_hard_checks,
)


def _conflicts(entries):
    by_kind = run_hard_checks(entries)
    return [conflict for conflicts in by_kind.values() for conflict in conflicts]


def test_second_entry_moves_to_first_free_period(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t2"),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert len(resolutions) == 1
    resolution = resolutions[0]
    assert resolution.entry_id == "e2"
    assert resolution.original_period == 1
    assert resolution.new_period == 2
    assert resolution.succeeded is True
    assert resolution.type == "period-shift"
    assert resolution.reason == "Resolved room conflict"
    assert repaired[0] is entries[0]
    assert repaired[1].period == 2
    assert repaired[1].time_slot_id == "ts2"


def test_input_entries_are_left_untouched(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t2"),
    ]

    attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert [entry.period for entry in entries] == [1, 1]
    assert entries[1].time_slot_id == "ts1"


def test_occupied_periods_are_skipped(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t2"),
        make_entry("e3", room="R1", teacher="t3", period=2),
        make_entry("e4", room="R9", teacher="t2", period=3),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert [(resolution.entry_id, resolution.new_period) for resolution in resolutions] == [("e2", 4)]
    assert repaired[1].period == 4


def test_no_resolution_when_teacher_is_busy_all_day(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t2"),
    ]
    entries += [make_entry(f"busy{period}", room=f"R{period + 10}", teacher="t2", period=period) for period in range(2, 7)]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert resolutions == []
    assert repaired[1].period == 1
    assert len(check_room_conflicts(repaired)) == 1


def test_department_range_limits_candidate_periods(make_entry, chemistry_policy):
    entries = [
        make_entry("e1", room="R1", teacher="t1", department="d2", period=4),
        make_entry("e2", room="R1", teacher="t2", department="d2", period=4),
    ]

    assert allowed_periods_for(entries[1], chemistry_policy) == [3, 4, 5, 6]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, chemistry_policy)

    assert resolutions[0].new_period == 3
    assert repaired[1].period == 3


def test_no_candidate_outside_department_range(make_entry):
    policy = ValidationPolicy(department_periods={"d2": {"start": 2, "end": 2}})
    entries = [
        make_entry("e1", room="R1", teacher="t1", department="d2", period=2),
        make_entry("e2", room="R1", teacher="t2", department="d2", period=2),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, policy)

    assert resolutions == []
    assert repaired[1].period == 2


def test_subject_multiplicity_is_never_auto_resolved(make_entry):
    entries = [
        make_entry("x1", room="R1", teacher="t1", period=1),
        make_entry("x1", room="R2", teacher="t2", period=3),
    ]
    conflicts = check_subject_multiplicity(entries)

    repaired, resolutions = attempt_auto_resolution(conflicts, entries, ValidationPolicy())

    assert resolutions == []
    assert [entry.period for entry in repaired] == [1, 3]


def test_entry_in_room_and_teacher_conflict_moves_once(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t1"),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert [(resolution.entry_id, resolution.new_period) for resolution in resolutions] == [("e2", 2)]
    assert _conflicts(repaired) == []


def test_canonical_entries_of_any_group_stay_in_place(make_entry):
    # e2 trails e1 in the room group but leads the teacher group with e3.
    entries = [
        make_entry("e1", room="R1", teacher="t1"),
        make_entry("e2", room="R1", teacher="t2"),
        make_entry("e3", room="R3", teacher="t2"),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert [resolution.entry_id for resolution in resolutions] == ["e3"]
    assert repaired[0].period == 1
    assert repaired[1].period == 1
    assert repaired[2].period == 2


def test_has_conflict_at_period_checks_teacher_and_room(make_entry):
    entries = [
        make_entry("e1", room="R1", teacher="t1", period=1),
        make_entry("e2", room="R2", teacher="t1", period=2),
        make_entry("e3", room="R1", teacher="t3", period=3),
        make_entry("e4", room="R4", teacher="t4", period=4, day="Tuesday"),
    ]

    assert has_conflict_at_period(entries, 0, 2) is True
    assert has_conflict_at_period(entries, 0, 3) is True
    assert has_conflict_at_period(entries, 0, 4) is False
    assert has_conflict_at_period(entries, 0, 1) is False


def test_duplicate_record_leader_stays_when_it_trails_a_room_conflict(make_entry):
    entries = [
        make_entry("e9", room="R1", teacher="t9", subject="s5"),
        make_entry("x1", room="R1", teacher="t1"),
        make_entry("x1", room="R2", teacher="t2", period=3),
    ]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, ValidationPolicy())

    assert resolutions == []
    assert [entry.period for entry in repaired] == [1, 1, 3]


def test_repair_range_follows_the_subject_department(make_entry, reference, chemistry_policy):
    # s2 belongs to d2 even though both classes are recorded under d1.
    entries = [
        make_entry("e1", room="R1", teacher="t1", subject="s2", department="d1"),
        make_entry("e2", room="R1", teacher="t2", subject="s2", department="d1"),
    ]
    subjects = reference.subject_map()

    assert allowed_periods_for(entries[1], chemistry_policy) == [1, 2, 3, 4, 5, 6]
    assert allowed_periods_for(entries[1], chemistry_policy, subjects) == [3, 4, 5, 6]

    repaired, resolutions = attempt_auto_resolution(_conflicts(entries), entries, chemistry_policy, subjects)

    assert [(resolution.entry_id, resolution.new_period) for resolution in resolutions] == [("e2", 3)]
    assert repaired[1].period == 3
