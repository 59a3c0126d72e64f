from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from timetable_validator.schemas.timetable import ScheduleEntry


class ConflictKind(str, Enum):
    room = "room"
    teacher = "teacher"
    subject_multiplicity = "subject-multiplicity"


class ViolationKind(str, Enum):
    department_pattern = "department-pattern"
    subject_period_restriction = "subject-period-restriction"
    room_usage_permission = "room-usage-permission"


RELOCATABLE_KINDS = frozenset({ConflictKind.room, ConflictKind.teacher})


class Conflict(BaseModel):
    kind: ConflictKind
    severity: Literal["hard"] = "hard"
    description: str
    entries: list[ScheduleEntry] = Field(min_length=2)
    # Positions in the working collection, parallel to ``entries``.
    entry_indexes: list[int] = Field(min_length=2)
    day: str
    period: int | None = None
    time_slot: str | None = None
    details: str

    @property
    def entry_ids(self) -> list[str]:
        return [entry.id for entry in self.entries]


class Violation(BaseModel):
    kind: ViolationKind
    severity: Literal["soft"] = "soft"
    description: str
    entry: ScheduleEntry
    expected: str
    actual: str


class Resolution(BaseModel):
    type: Literal["period-shift"] = "period-shift"
    entry_id: str
    entry_index: int
    original_period: int
    new_period: int
    reason: str
    succeeded: bool


class ValidationSummary(BaseModel):
    total_entries: int = 0
    room_conflicts: int = 0
    teacher_conflicts: int = 0
    subject_multiplicity_conflicts: int = 0
    remaining_hard_conflicts: int = 0
    soft_violations: int = 0
    resolutions_attempted: int = 0
    resolutions_succeeded: int = 0


class ValidationResult(BaseModel):
    is_valid: bool
    hard_conflicts: list[Conflict] = Field(default_factory=list)
    soft_violations: list[Violation] = Field(default_factory=list)
    resolutions: list[Resolution] = Field(default_factory=list)
    summary: ValidationSummary
    entries: list[ScheduleEntry] = Field(default_factory=list)

    @property
    def unresolved_entry_ids(self) -> list[str]:
        """Ids of non-canonical entries still caught in a remaining hard conflict."""
        unresolved: list[str] = []
        seen: set[int] = set()
        for conflict in self.hard_conflicts:
            for index, entry in zip(conflict.entry_indexes[1:], conflict.entries[1:]):
                if index not in seen:
                    seen.add(index)
                    unresolved.append(entry.id)
        return unresolved

    @property
    def needs_manual_review(self) -> bool:
        moved = {resolution.entry_index for resolution in self.resolutions if resolution.succeeded}
        return any(
            not moved.intersection(conflict.entry_indexes)
            for conflict in self.hard_conflicts
        )
