from __future__ import annotations

import logging
from typing import Iterable

from timetable_validator.schemas.reference import Room
from timetable_validator.schemas.timetable import ScheduleEntry

logger = logging.getLogger(__name__)


def room_name_index(rooms: Iterable[Room]) -> dict[str, str]:
    return {room.name.strip().lower(): room.id for room in rooms}


def normalize_room_ids(entries: Iterable[ScheduleEntry], rooms: Iterable[Room]) -> list[ScheduleEntry]:
    """Return copies of ``entries`` with ``room_id`` set to the canonical room id.

    Labels with no matching room keep their own text as the identity, so
    conflicts between them are still detected by name.
    """
    name_to_id = room_name_index(rooms)
    normalized: list[ScheduleEntry] = []
    unmapped: set[str] = set()
    for entry in entries:
        room_id = name_to_id.get(entry.room.lower())
        if room_id is None:
            room_id = entry.room
            if entry.room:
                unmapped.add(entry.room)
        normalized.append(entry.model_copy(update={"room_id": room_id}))
    if unmapped:
        logger.debug("Falling back to name identity for %d unmapped room label(s): %s", len(unmapped), ", ".join(sorted(unmapped)))
    return normalized
