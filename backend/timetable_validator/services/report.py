from __future__ import annotations

from timetable_validator.schemas.validation import ValidationResult


def render_report(result: ValidationResult) -> str:
    lines: list[str] = []
    summary = result.summary

    lines.append("=== TIMETABLE VALIDATION REPORT ===")
    lines.append(f"Total Entries: {summary.total_entries}")
    lines.append(f"Validation Status: {'VALID' if result.is_valid else 'INVALID'}")
    lines.append("")

    if result.hard_conflicts:
        lines.append("HARD CONFLICTS:")
        for number, conflict in enumerate(result.hard_conflicts, start=1):
            lines.append(f"{number}. {conflict.description}")
            lines.append(f"   Time: {conflict.day}, {conflict.time_slot}")
            lines.append(f"   Details: {conflict.details}")
            lines.append(f"   Affected entries: {len(conflict.entries)}")
            for entry in conflict.entries:
                lines.append(f"     - {entry.id}: {entry.label}")
            lines.append("")

    if result.soft_violations:
        lines.append("SOFT VIOLATIONS:")
        for number, violation in enumerate(result.soft_violations, start=1):
            lines.append(f"{number}. {violation.description}")
            lines.append(f"   Entry: {violation.entry.id} ({violation.entry.label})")
            lines.append(f"   Expected: {violation.expected}, Actual: {violation.actual}")
            lines.append("")

    if result.resolutions:
        lines.append("AUTO-RESOLUTIONS ATTEMPTED:")
        for number, resolution in enumerate(result.resolutions, start=1):
            lines.append(f"{number}. {resolution.reason}")
            lines.append(f"   Entry: {resolution.entry_id}")
            lines.append(f"   Period change: {resolution.original_period} -> {resolution.new_period}")
            lines.append(f"   Status: {'SUCCESS' if resolution.succeeded else 'FAILED'}")
            lines.append("")

    lines.append("=== SUMMARY ===")
    lines.append(f"Room Conflicts: {summary.room_conflicts}")
    lines.append(f"Teacher Conflicts: {summary.teacher_conflicts}")
    lines.append(f"Subject Multiplicity Violations: {summary.subject_multiplicity_conflicts}")
    lines.append(f"Remaining Hard Conflicts: {summary.remaining_hard_conflicts}")
    lines.append(f"Soft Violations: {summary.soft_violations}")
    lines.append(f"Auto-resolutions Attempted: {summary.resolutions_attempted}")
    if summary.resolutions_succeeded:
        lines.append(f"Auto-resolutions Successful: {summary.resolutions_succeeded}")

    return "\n".join(lines)
