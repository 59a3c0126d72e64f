from __future__ import annotations

from typing import Sequence

from timetable_validator.schemas.policy import ValidationPolicy
from timetable_validator.schemas.reference import ReferenceData, Room, Subject
from timetable_validator.schemas.timetable import ScheduleEntry
from timetable_validator.schemas.validation import Violation, ViolationKind


def owning_department(entry: ScheduleEntry, subjects: dict[str, Subject]) -> str:
    """Department whose period policy governs ``entry``: its subject's, else its own."""
    subject = subjects.get(entry.subject_id)
    if subject is not None:
        return subject.department_id
    return entry.department_id


def check_department_patterns(
    entries: Sequence[ScheduleEntry],
    subjects: dict[str, Subject],
) -> list[Violation]:
    violations: list[Violation] = []
    for entry in entries:
        subject = subjects.get(entry.subject_id)
        if subject is None or subject.department_id == entry.department_id:
            continue
        violations.append(
            Violation(
                kind=ViolationKind.department_pattern,
                description="Subject assignment does not match department",
                entry=entry,
                expected=subject.department_id,
                actual=entry.department_id,
            )
        )
    return violations


def check_period_restrictions(
    entries: Sequence[ScheduleEntry],
    subjects: dict[str, Subject],
    policy: ValidationPolicy,
) -> list[Violation]:
    violations: list[Violation] = []
    if not policy.department_periods:
        return violations
    for entry in entries:
        department_id = owning_department(entry, subjects)
        restriction = policy.restriction_for(department_id)
        if restriction is None or restriction.contains(entry.period):
            continue
        violations.append(
            Violation(
                kind=ViolationKind.subject_period_restriction,
                description=f"Department {department_id} subjects should only use {restriction.describe().lower()}",
                entry=entry,
                expected=restriction.describe(),
                actual=f"Period {entry.period}",
            )
        )
    return violations


def _resolve_room(entry: ScheduleEntry, rooms_by_id: dict[str, Room], rooms_by_name: dict[str, Room]) -> Room | None:
    if entry.room_id and entry.room_id in rooms_by_id:
        return rooms_by_id[entry.room_id]
    return rooms_by_name.get(entry.room.lower())


def check_room_usage(entries: Sequence[ScheduleEntry], rooms: Sequence[Room]) -> list[Violation]:
    rooms_by_id = {room.id: room for room in rooms}
    rooms_by_name = {room.name.strip().lower(): room for room in rooms}
    violations: list[Violation] = []
    for entry in entries:
        room = _resolve_room(entry, rooms_by_id, rooms_by_name)
        if room is None or not room.primary_department_id:
            continue
        if room.primary_department_id == entry.department_id or room.available_for_other_departments:
            continue
        violations.append(
            Violation(
                kind=ViolationKind.room_usage_permission,
                description="Department using room not available to them",
                entry=entry,
                expected=f"Room for department {room.primary_department_id}",
                actual=f"Used by department {entry.department_id}",
            )
        )
    return violations


def run_soft_checks(
    entries: Sequence[ScheduleEntry],
    reference: ReferenceData,
    policy: ValidationPolicy,
) -> list[Violation]:
    subjects = reference.subject_map()
    return [
        *check_department_patterns(entries, subjects),
        *check_period_restrictions(entries, subjects, policy),
        *check_room_usage(entries, reference.rooms),
    ]
