from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from timetable_validator.core.exceptions import EntryDataError, ReferenceDataError
from timetable_validator.schemas.reference import Department, ReferenceData, Room, Subject, Teacher
from timetable_validator.schemas.timetable import ScheduleEntry

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

REFERENCE_FILES = {
    "departments": ("departments.json", Department),
    "subjects": ("subjects.json", Subject),
    "rooms": ("rooms.json", Room),
    "teachers": ("teachers.json", Teacher),
}


def read_json(path: Path) -> Any:
    try:
        # utf-8-sig drops a leading BOM if the export tool wrote one.
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ReferenceDataError(path.name, exc.strerror or str(exc)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReferenceDataError(path.name, f"invalid JSON ({exc.msg})") from exc


def load_reference_table(path: Path, model: type[ModelT]) -> list[ModelT]:
    """Load one reference table; a missing or malformed file yields an empty table."""
    try:
        data = read_json(path)
        if not isinstance(data, list):
            raise ReferenceDataError(path.name, "expected a JSON array")
        return TypeAdapter(list[model]).validate_python(data)
    except ReferenceDataError as exc:
        logger.warning("%s; continuing with an empty table", exc.message)
    except ValidationError as exc:
        logger.warning("Could not load %s: %d invalid record(s); continuing with an empty table", path.name, exc.error_count())
    return []


def load_reference_data(data_dir: Path) -> ReferenceData:
    tables = {
        key: load_reference_table(Path(data_dir) / filename, model)
        for key, (filename, model) in REFERENCE_FILES.items()
    }
    return ReferenceData(**tables)


def load_timetable_entries(path: Path) -> list[ScheduleEntry]:
    try:
        data = read_json(Path(path))
    except ReferenceDataError as exc:
        raise EntryDataError(exc.message, details=exc.details) from exc

    if isinstance(data, dict):
        records = data.get("timetableEntries", [])
    elif isinstance(data, list):
        records = data
    else:
        raise EntryDataError(f"{Path(path).name} does not hold a list of timetable entries")
    try:
        return TypeAdapter(list[ScheduleEntry]).validate_python(records)
    except ValidationError as exc:
        raise EntryDataError(
            f"{Path(path).name} holds {exc.error_count()} invalid entry field(s)",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


def write_resolved_entries(
    path: Path,
    entries: list[ScheduleEntry],
    *,
    original_file: str,
    resolutions_applied: int,
) -> None:
    payload = {
        "metadata": {
            "originalFile": original_file,
            "validatedAt": datetime.now(tz=timezone.utc).isoformat(),
            "autoResolutionsApplied": resolutions_applied,
            "totalEntries": len(entries),
        },
        "timetableEntries": [entry.model_dump(by_alias=True, mode="json") for entry in entries],
    }
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
