from functools import lru_cache
import json
from pathlib import Path
from typing import Annotated

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from timetable_validator.core.exceptions import ConfigurationError
from timetable_validator.schemas.policy import PeriodRange, ValidationPolicy


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so the runner works from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="TIMETABLE_",
    )

    environment: str = "development"
    log_level: str | None = None

    first_period: int = 1
    periods_per_day: int = 6
    department_periods: Annotated[dict[str, str], NoDecode] = {}
    deterministic_order: bool = False
    time_slot_prefix: str = "ts"

    reference_data_dir: Path = Path("data")
    entries_file: str = "generated-timetable-entries.json"
    resolved_entries_file: str = "timetable-entries-resolved.json"

    @field_validator("department_periods", mode="before")
    @classmethod
    def split_department_periods(cls, value: str | dict[str, str]) -> dict[str, str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("{"):
                try:
                    parsed = json.loads(stripped)
                except json.JSONDecodeError as exc:
                    raise ValueError(f"Invalid JSON for department periods ({exc.msg})") from exc
                if not isinstance(parsed, dict):
                    raise ValueError("Department periods JSON must be an object")
                return {str(key).strip(): str(item).strip() for key, item in parsed.items()}
            ranges: dict[str, str] = {}
            for item in stripped.split(","):
                if not item.strip():
                    continue
                department_id, sep, period_range = item.partition("=")
                if not sep:
                    raise ValueError(f"Expected department=start-end, got {item.strip()!r}")
                ranges[department_id.strip()] = period_range.strip()
            return ranges
        return value

    def to_policy(self) -> ValidationPolicy:
        try:
            department_periods = {
                department_id: PeriodRange.parse(period_range)
                for department_id, period_range in self.department_periods.items()
            }
            return ValidationPolicy(
                default_periods=PeriodRange(start=self.first_period, end=self.periods_per_day),
                department_periods=department_periods,
                time_slot_prefix=self.time_slot_prefix,
                deterministic_order=self.deterministic_order,
            )
        except (ValidationError, ValueError) as exc:
            raise ConfigurationError(
                "Invalid period configuration",
                details={"error": str(exc)},
            ) from exc


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(
            "Invalid settings",
            details={"error": str(exc)},
        ) from exc
