from __future__ import annotations

from pydantic import BaseModel, Field


class Department(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(default="", max_length=200)
    short_name: str | None = Field(default=None, alias="shortName", max_length=50)

    model_config = {"populate_by_name": True}


class Subject(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(default="", max_length=200)
    code: str = Field(default="", max_length=50)
    department_id: str = Field(alias="departmentId", min_length=1, max_length=100)
    semester_id: str | None = Field(default=None, alias="semesterId", max_length=100)

    model_config = {"populate_by_name": True}


class Room(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    type: str | None = None
    primary_department_id: str | None = Field(default=None, alias="primaryDepartmentId")
    available_for_other_departments: bool = Field(default=False, alias="availableForOtherDepartments")

    model_config = {"populate_by_name": True}


class Teacher(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(default="", max_length=200)
    department_id: str | None = Field(default=None, alias="departmentId")

    model_config = {"populate_by_name": True}


class ReferenceData(BaseModel):
    """Read-only lookup tables supplied by the caller."""

    departments: list[Department] = Field(default_factory=list)
    subjects: list[Subject] = Field(default_factory=list)
    rooms: list[Room] = Field(default_factory=list)
    teachers: list[Teacher] = Field(default_factory=list)

    model_config = {"frozen": True}

    def subject_map(self) -> dict[str, Subject]:
        return {subject.id: subject for subject in self.subjects}

    def room_map(self) -> dict[str, Room]:
        return {room.id: room for room in self.rooms}

    def teacher_names(self) -> dict[str, str]:
        return {teacher.id: teacher.name for teacher in self.teachers if teacher.name}
