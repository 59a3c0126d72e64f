from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_VALUES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

DAY_SHORT_MAP = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
    "Sat": "Saturday",
    "Sun": "Sunday",
}

DEFAULT_TIME_SLOT_PREFIX = "ts"


def normalize_day(value: str) -> str:
    day = value.strip()
    return DAY_SHORT_MAP.get(day, day)


def time_slot_for_period(period: int, prefix: str = DEFAULT_TIME_SLOT_PREFIX) -> str:
    return f"{prefix}{period}"


class ScheduleEntry(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    semester_id: str = Field(alias="semesterId", min_length=1, max_length=100)
    subject_id: str = Field(alias="subjectId", min_length=1, max_length=100)
    teacher_id: str = Field(default="", alias="teacherId", max_length=100)
    department_id: str = Field(alias="departmentId", min_length=1, max_length=100)
    day: str
    period: int = Field(ge=1, le=24)
    time_slot_id: str | None = Field(default=None, alias="timeSlotId")
    room: str = Field(default="", max_length=200)
    room_id: str | None = Field(default=None, alias="roomId")
    subject_code: str = Field(default="", alias="subjectCode", max_length=50)

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        day = normalize_day(value)
        if day not in DAY_VALUES:
            raise ValueError("Invalid day value")
        return day

    @field_validator("room", "teacher_id")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @model_validator(mode="after")
    def fill_time_slot(self) -> "ScheduleEntry":
        if not self.time_slot_id:
            self.time_slot_id = time_slot_for_period(self.period)
        return self

    @property
    def room_key(self) -> str:
        """Identity used for room grouping: the canonical id, else the raw label."""
        return self.room_id or self.room

    @property
    def label(self) -> str:
        return self.subject_code or self.subject_id

    def moved_to(self, period: int, prefix: str = DEFAULT_TIME_SLOT_PREFIX) -> "ScheduleEntry":
        return self.model_copy(update={"period": period, "time_slot_id": time_slot_for_period(period, prefix)})
