"""
Hospital Settings Service

Stores business hours, the lunch break, token numbering and session
templates. Every save is checked by the session validator first.
"""

from typing import Optional, List, Dict, Any
import logging

from hospital_core.core.exceptions import ValidationError, InvalidInputError, NotFoundError, BusinessLogicError
from hospital_core.domain.settings.models import HospitalSettings, SessionTemplate
from hospital_core.domain.settings.repository import SettingsRepository
from hospital_core.domain.settings.validator import (
    ScheduleConfig, SessionWindow, normalize_time, validate_sessions
)
from hospital_core.infrastructure.database import transaction

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "business_start": "09:00",
    "business_end": "20:00",
    "lunch_start": "13:00",
    "lunch_end": "14:00",
    "token_prefix": "T",
    "max_tokens_per_session": 50,
}

DEFAULT_TEMPLATES: List[Dict[str, Any]] = [
    {"name": "Morning", "short_code": "S1", "start_time": "09:00", "end_time": "13:00",
     "max_tokens": 50, "is_active": True},
    {"name": "Afternoon", "short_code": "S2", "start_time": "14:00", "end_time": "17:00",
     "max_tokens": 40, "is_active": True},
    {"name": "Evening", "short_code": "S3", "start_time": "17:00", "end_time": "20:00",
     "max_tokens": 30, "is_active": False},
]


def to_schedule_config(data: Dict[str, Any]) -> ScheduleConfig:
    """Build a validator input from a settings payload"""
    return ScheduleConfig(
        business_start=data.get("business_start"),
        business_end=data.get("business_end"),
        lunch_start=data.get("lunch_start"),
        lunch_end=data.get("lunch_end"),
        sessions=[
            SessionWindow(
                name=t.get("name"),
                short_code=t.get("short_code"),
                start_time=t.get("start_time"),
                end_time=t.get("end_time"),
                max_tokens=t.get("max_tokens"),
                is_active=t.get("is_active", True),
            )
            for t in data.get("session_templates") or []
        ],
    )


class SettingsService:
    def __init__(self, db):
        self.db = db
        self.repo = SettingsRepository(db)

    def get_settings(self) -> HospitalSettings:
        """Return the stored settings, creating the defaults on first use"""
        row = self.repo.get()
        if row:
            return row
        with transaction(self.db, "create default settings"):
            row = self.repo.create(
                dict(DEFAULT_SETTINGS),
                [dict(t, sort_order=i) for i, t in enumerate(DEFAULT_TEMPLATES)]
            )
        logger.info("Default hospital settings created")
        return row

    def validate(self, data: Dict[str, Any]) -> List[str]:
        """Dry run of the session validator"""
        return validate_sessions(to_schedule_config(data))

    def save_settings(self, data: Dict[str, Any]) -> HospitalSettings:
        """
        Validate and store a full settings payload.

        Raises ValidationError carrying every violation; nothing is written
        when any rule fails.
        """
        violations = self.validate(data)
        if violations:
            logger.warning("Rejected hospital settings: %d violation(s)", len(violations))
            raise ValidationError(violations[0], details={"violations": violations})

        max_tokens = data.get("max_tokens_per_session") or DEFAULT_SETTINGS["max_tokens_per_session"]
        settings_data = {
            "business_start": normalize_time(data.get("business_start")),
            "business_end": normalize_time(data.get("business_end")),
            "lunch_start": normalize_time(data.get("lunch_start")),
            "lunch_end": normalize_time(data.get("lunch_end")),
            "token_prefix": data.get("token_prefix") or DEFAULT_SETTINGS["token_prefix"],
            "max_tokens_per_session": max_tokens,
        }
        templates = [
            {
                "name": t["name"].strip(),
                "short_code": t["short_code"].strip(),
                "start_time": normalize_time(t["start_time"]),
                "end_time": normalize_time(t["end_time"]),
                "max_tokens": t.get("max_tokens") or max_tokens,
                "is_active": t.get("is_active", True),
                "sort_order": i,
            }
            for i, t in enumerate(data.get("session_templates") or [])
        ]

        row = self.get_settings()
        with transaction(self.db, "save hospital settings"):
            row = self.repo.update(row, settings_data, templates)
        logger.info("Hospital settings saved with %d session template(s)", len(templates))
        return row

    def get_active_templates(self) -> List[SessionTemplate]:
        self.get_settings()
        return self.repo.get_active_templates()

    def format_token(self, short_code: str, sequence: int) -> str:
        """Token number for the Nth patient of a session: prefix T, session S1, 1 -> "TS1001"."""
        if sequence is None or sequence < 1:
            raise InvalidInputError("Token sequence must start at 1", details={"sequence": sequence})
        row = self.get_settings()
        template = self.repo.get_template_by_code(short_code)
        if not template:
            raise NotFoundError("Session template not found", details={"short_code": short_code})
        if not template.is_active:
            raise BusinessLogicError("Session is not active", details={"short_code": short_code})
        if sequence > template.max_tokens:
            raise BusinessLogicError(
                "Session token limit reached",
                details={"short_code": short_code, "max_tokens": template.max_tokens}
            )
        return f"{row.token_prefix}{template.short_code}{sequence:03d}"

    def preview_token(self, short_code: Optional[str] = None) -> str:
        """First token of a session, used by the settings screen"""
        row = self.get_settings()
        if not short_code:
            active = [t for t in row.session_templates if t.is_active]
            short_code = active[0].short_code if active else ""
        return f"{row.token_prefix}{short_code}001"
