from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from timetable_validator.schemas.timetable import DEFAULT_TIME_SLOT_PREFIX


class PeriodRange(BaseModel):
    start: int = Field(ge=1, le=24)
    end: int = Field(ge=1, le=24)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_order(self) -> "PeriodRange":
        if self.end < self.start:
            raise ValueError(f"Allowed period range {self.start}-{self.end} is empty")
        return self

    @classmethod
    def parse(cls, value: str) -> "PeriodRange":
        start, sep, end = value.strip().partition("-")
        if not sep:
            return cls(start=int(start), end=int(start))
        return cls(start=int(start), end=int(end))

    def periods(self) -> list[int]:
        return list(range(self.start, self.end + 1))

    def contains(self, period: int) -> bool:
        return self.start <= period <= self.end

    def describe(self) -> str:
        return f"Periods {self.start}-{self.end}"


class ValidationPolicy(BaseModel):
    """Institution policy the engine checks and repairs against."""

    default_periods: PeriodRange = Field(default_factory=lambda: PeriodRange(start=1, end=6))
    department_periods: dict[str, PeriodRange] = Field(default_factory=dict)
    time_slot_prefix: str = Field(default=DEFAULT_TIME_SLOT_PREFIX, min_length=1, max_length=10)
    deterministic_order: bool = False

    model_config = {"frozen": True}

    def restriction_for(self, department_id: str | None) -> PeriodRange | None:
        if department_id is None:
            return None
        return self.department_periods.get(department_id)

    def allowed_periods(self, department_id: str | None) -> list[int]:
        restriction = self.restriction_for(department_id)
        if restriction is not None:
            return restriction.periods()
        return self.default_periods.periods()
