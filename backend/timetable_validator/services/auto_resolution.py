from __future__ import annotations

import logging
from typing import Sequence

from timetable_validator.schemas.policy import ValidationPolicy
from timetable_validator.schemas.reference import Subject
from timetable_validator.schemas.timetable import ScheduleEntry
from timetable_validator.schemas.validation import RELOCATABLE_KINDS, Conflict, Resolution
from timetable_validator.services.soft_constraints import owning_department

logger = logging.getLogger(__name__)


def _shares_resource(entry: ScheduleEntry, other: ScheduleEntry) -> bool:
    if entry.teacher_id and entry.teacher_id == other.teacher_id:
        return True
    if entry.room_key and entry.room_key == other.room_key:
        return True
    return bool(entry.room) and entry.room == other.room


def has_conflict_at_period(entries: Sequence[ScheduleEntry], index: int, period: int) -> bool:
    """True when another entry on the same day and ``period`` shares a teacher or room with ``entries[index]``."""
    entry = entries[index]
    for other_index, other in enumerate(entries):
        if other_index == index or other.day != entry.day or other.period != period:
            continue
        if _shares_resource(entry, other):
            return True
    return False


def allowed_periods_for(
    entry: ScheduleEntry,
    policy: ValidationPolicy,
    subjects: dict[str, Subject] | None = None,
) -> list[int]:
    return policy.allowed_periods(owning_department(entry, subjects or {}))


def attempt_auto_resolution(
    conflicts: Sequence[Conflict],
    entries: Sequence[ScheduleEntry],
    policy: ValidationPolicy,
    subjects: dict[str, Subject] | None = None,
) -> tuple[list[ScheduleEntry], list[Resolution]]:
    """Greedily shift non-canonical entries of room/teacher conflicts to a free period.

    Returns a new entry list with the shifts applied plus one successful
    Resolution per moved entry. Entries with no free period are left where
    they are and get no record. ``entries`` itself is not modified.
    """
    repaired = list(entries)
    resolutions: list[Resolution] = []

    relocatable = [conflict for conflict in conflicts if conflict.kind in RELOCATABLE_KINDS]
    # Leaders of every group stay put, duplicate-record groups included.
    canonical = {conflict.entry_indexes[0] for conflict in conflicts}

    for conflict in relocatable:
        for index in conflict.entry_indexes[1:]:
            if index in canonical:
                continue
            entry = repaired[index]
            # An earlier shift may already have cleared this slot.
            if not has_conflict_at_period(repaired, index, entry.period):
                continue

            for period in allowed_periods_for(entry, policy, subjects):
                if period == entry.period or has_conflict_at_period(repaired, index, period):
                    continue
                repaired[index] = entry.moved_to(period, policy.time_slot_prefix)
                resolutions.append(
                    Resolution(
                        entry_id=entry.id,
                        entry_index=index,
                        original_period=entry.period,
                        new_period=period,
                        reason=f"Resolved {conflict.kind.value} conflict",
                        succeeded=True,
                    )
                )
                logger.debug(
                    "Moved entry %s on %s from period %d to %d (%s conflict)",
                    entry.id,
                    entry.day,
                    entry.period,
                    period,
                    conflict.kind.value,
                )
                break
            else:
                logger.info(
                    "No free period for entry %s on %s; %s conflict needs manual review",
                    entry.id,
                    entry.day,
                    conflict.kind.value,
                )

    return repaired, resolutions
