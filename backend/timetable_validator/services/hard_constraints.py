from __future__ import annotations

from collections import defaultdict
from typing import Callable, Sequence

from timetable_validator.schemas.timetable import ScheduleEntry
from timetable_validator.schemas.validation import Conflict, ConflictKind

SlotKey = tuple[str, str, int]


def _group_by_slot(
    entries: Sequence[ScheduleEntry],
    resource: Callable[[ScheduleEntry], str],
) -> dict[SlotKey, list[int]]:
    # dict keeps first-seen order, so the first index in each group is canonical.
    groups: dict[SlotKey, list[int]] = defaultdict(list)
    for index, entry in enumerate(entries):
        resource_id = resource(entry)
        if not resource_id:
            continue
        groups[(resource_id, entry.day, entry.period)].append(index)
    return groups


def check_room_conflicts(entries: Sequence[ScheduleEntry]) -> list[Conflict]:
    conflicts: list[Conflict] = []
    for (_, day, period), indexes in _group_by_slot(entries, lambda entry: entry.room_key).items():
        if len(indexes) < 2:
            continue
        in_slot = [entries[index] for index in indexes]
        listing = ", ".join(f"{entry.label} ({entry.teacher_id or 'unassigned'})" for entry in in_slot)
        conflicts.append(
            Conflict(
                kind=ConflictKind.room,
                description=f"Room conflict: Multiple classes scheduled in room {in_slot[0].room}",
                entries=in_slot,
                entry_indexes=indexes,
                day=day,
                period=period,
                time_slot=in_slot[0].time_slot_id,
                details=f"Conflicting classes: {listing}",
            )
        )
    return conflicts


def check_teacher_conflicts(
    entries: Sequence[ScheduleEntry],
    teacher_names: dict[str, str] | None = None,
) -> list[Conflict]:
    teacher_names = teacher_names or {}
    conflicts: list[Conflict] = []
    for (teacher_id, day, period), indexes in _group_by_slot(entries, lambda entry: entry.teacher_id).items():
        if len(indexes) < 2:
            continue
        in_slot = [entries[index] for index in indexes]
        listing = ", ".join(f"{entry.label} in {entry.room or 'unassigned room'}" for entry in in_slot)
        teacher_name = teacher_names.get(teacher_id, teacher_id)
        conflicts.append(
            Conflict(
                kind=ConflictKind.teacher,
                description=f"Teacher conflict: Teacher {teacher_name} has multiple classes scheduled",
                entries=in_slot,
                entry_indexes=indexes,
                day=day,
                period=period,
                time_slot=in_slot[0].time_slot_id,
                details=f"Conflicting classes: {listing}",
            )
        )
    return conflicts


def check_subject_multiplicity(entries: Sequence[ScheduleEntry]) -> list[Conflict]:
    """Flag the same entry id recorded twice for one subject, semester and day.

    A subject recurring on different days is legitimate; only repeated ids
    inside one (subject, semester, day) bucket count as duplicates.
    """
    buckets: dict[tuple[str, str], dict[str, dict[str, list[int]]]] = defaultdict(
        lambda: defaultdict(lambda: defaultdict(list))
    )
    for index, entry in enumerate(entries):
        buckets[(entry.subject_id, entry.semester_id)][entry.day][entry.id].append(index)

    conflicts: list[Conflict] = []
    for by_day in buckets.values():
        for day, by_id in by_day.items():
            for entry_id, indexes in by_id.items():
                if len(indexes) < 2:
                    continue
                duplicates = [entries[index] for index in indexes]
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.subject_multiplicity,
                        description=f"Duplicate entry IDs for subject {duplicates[0].label}",
                        entries=duplicates,
                        entry_indexes=indexes,
                        day=day,
                        period=duplicates[0].period,
                        time_slot=duplicates[0].time_slot_id,
                        details=f'Duplicate ID "{entry_id}" found {len(indexes)} times',
                    )
                )
    return conflicts


def run_hard_checks(
    entries: Sequence[ScheduleEntry],
    teacher_names: dict[str, str] | None = None,
) -> dict[ConflictKind, list[Conflict]]:
    return {
        ConflictKind.room: check_room_conflicts(entries),
        ConflictKind.teacher: check_teacher_conflicts(entries, teacher_names),
        ConflictKind.subject_multiplicity: check_subject_multiplicity(entries),
    }
