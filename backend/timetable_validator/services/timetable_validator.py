from __future__ import annotations

import logging
from typing import Iterable

from timetable_validator.schemas.policy import ValidationPolicy
from timetable_validator.schemas.reference import ReferenceData
from timetable_validator.schemas.timetable import ScheduleEntry
from timetable_validator.schemas.validation import (
    Conflict,
    ConflictKind,
    ValidationResult,
    ValidationSummary,
)
from timetable_validator.services.auto_resolution import attempt_auto_resolution
from timetable_validator.services.hard_constraints import run_hard_checks
from timetable_validator.services.room_normalizer import normalize_room_ids
from timetable_validator.services.soft_constraints import run_soft_checks

logger = logging.getLogger(__name__)


def _flatten(by_kind: dict[ConflictKind, list[Conflict]]) -> list[Conflict]:
    return [
        *by_kind[ConflictKind.room],
        *by_kind[ConflictKind.teacher],
        *by_kind[ConflictKind.subject_multiplicity],
    ]


class TimetableValidator:
    def __init__(self, reference: ReferenceData | None = None, policy: ValidationPolicy | None = None):
        self.reference = reference or ReferenceData()
        self.policy = policy or ValidationPolicy()
        self.subjects = self.reference.subject_map()
        self.teacher_names = self.reference.teacher_names()

    def prepare(self, entries: Iterable[ScheduleEntry]) -> list[ScheduleEntry]:
        normalized = [
            entry.moved_to(entry.period, self.policy.time_slot_prefix)
            for entry in normalize_room_ids(entries, self.reference.rooms)
        ]
        if self.policy.deterministic_order:
            normalized.sort(key=lambda entry: entry.id)
        return normalized

    def validate(self, entries: Iterable[ScheduleEntry]) -> ValidationResult:
        working = self.prepare(entries)

        initial = run_hard_checks(working, self.teacher_names)
        hard_conflicts = _flatten(initial)
        soft_violations = run_soft_checks(working, self.reference, self.policy)

        resolutions = []
        if hard_conflicts:
            working, resolutions = attempt_auto_resolution(hard_conflicts, working, self.policy, self.subjects)
            hard_conflicts = _flatten(run_hard_checks(working, self.teacher_names))

        summary = ValidationSummary(
            total_entries=len(working),
            room_conflicts=len(initial[ConflictKind.room]),
            teacher_conflicts=len(initial[ConflictKind.teacher]),
            subject_multiplicity_conflicts=len(initial[ConflictKind.subject_multiplicity]),
            remaining_hard_conflicts=len(hard_conflicts),
            soft_violations=len(soft_violations),
            resolutions_attempted=len(resolutions),
            resolutions_succeeded=sum(1 for resolution in resolutions if resolution.succeeded),
        )
        logger.info(
            "Validated %d entries: %d hard conflict(s) remaining, %d soft violation(s), %d/%d resolution(s) succeeded",
            summary.total_entries,
            summary.remaining_hard_conflicts,
            summary.soft_violations,
            summary.resolutions_succeeded,
            summary.resolutions_attempted,
        )

        return ValidationResult(
            is_valid=not hard_conflicts,
            hard_conflicts=hard_conflicts,
            soft_violations=soft_violations,
            resolutions=resolutions,
            summary=summary,
            entries=working,
        )


def validate_timetable(
    entries: Iterable[ScheduleEntry],
    reference: ReferenceData | None = None,
    policy: ValidationPolicy | None = None,
) -> ValidationResult:
    return TimetableValidator(reference, policy).validate(entries)
