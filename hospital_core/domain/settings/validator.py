"""
Session template validation

Pure checks over a hospital schedule: business hours, lunch break and the
session templates. All violations are collected and returned as
human-readable messages; nothing here raises.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import re

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass
class SessionWindow:
    name: Optional[str] = None
    short_code: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_tokens: Optional[int] = None
    is_active: bool = True


@dataclass
class ScheduleConfig:
    business_start: Optional[str] = None
    business_end: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    sessions: List[SessionWindow] = field(default_factory=list)


def time_to_minutes(value: Optional[str]) -> Optional[int]:
    """Convert "HH:MM" to minutes since midnight, or None if it does not parse."""
    if not value:
        return None
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # Half-open intervals; touching ends do not overlap
    return max(a_start, b_start) < min(a_end, b_end)


def validate_sessions(config: ScheduleConfig) -> List[str]:
    """
    Validate session templates against business hours and the lunch break.

    Returns every violation found, in a deterministic order. An empty list
    means the configuration can be saved. Field and timing checks run on
    every template; only active ones take part in the overlap check.
    """
    business_start = time_to_minutes(config.business_start)
    business_end = time_to_minutes(config.business_end)
    if business_start is None or business_end is None:
        return ["Hospital timings must be set before configuring sessions."]

    errors: List[str] = []

    lunch_start = time_to_minutes(config.lunch_start)
    lunch_end = time_to_minutes(config.lunch_end)
    has_lunch = lunch_start is not None and lunch_end is not None
    if has_lunch and not (
        lunch_start < lunch_end
        and lunch_start >= business_start
        and lunch_end <= business_end
    ):
        errors.append("Invalid lunch break: must be within Business Hours and start before end.")
    valid_lunch = has_lunch and lunch_start < lunch_end

    timed = []  # (start, end, name) of active sessions with a usable interval
    for index, session in enumerate(config.sessions, start=1):
        missing = False
        if not (session.name or "").strip():
            errors.append(f"Session #{index}: Name is required.")
            missing = True
        if not (session.short_code or "").strip():
            errors.append(f"Session #{index}: Short code is required.")
            missing = True
        start = time_to_minutes(session.start_time)
        end = time_to_minutes(session.end_time)
        if start is None or end is None:
            errors.append(f"Session #{index}: Start and end time are required.")
            missing = True

        if missing:
            continue

        name = session.name.strip()
        if start >= end:
            errors.append(f'Session "{name}": Start time must be before end time.')

        if start < business_start or end > business_end:
            errors.append(
                f'Session "{name}": Must be within Business Hours '
                f"({config.business_start} - {config.business_end})."
            )

        if valid_lunch and _overlaps(start, end, lunch_start, lunch_end):
            errors.append(
                f'Session "{name}": Cannot overlap lunch break '
                f"({config.lunch_start} - {config.lunch_end})."
            )

        if session.is_active and start < end:
            timed.append((start, end, name))

    # sorted() is stable, so equal starts keep their input order
    timed = sorted(timed, key=lambda item: item[0])
    for i, (_, earlier_end, earlier_name) in enumerate(timed):
        for later_start, _, later_name in timed[i + 1:]:
            if earlier_end > later_start:
                errors.append(f'Sessions "{earlier_name}" and "{later_name}" overlap.')

    return errors


def normalize_time(value: Optional[str]) -> Optional[str]:
    """Zero-padded "HH:MM" for a parseable time, e.g. "8:05" -> "08:05"."""
    minutes = time_to_minutes(value)
    if minutes is None:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
