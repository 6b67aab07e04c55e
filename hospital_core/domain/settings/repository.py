from typing import Optional, List
from sqlalchemy.orm import Session, selectinload

from hospital_core.domain.settings.models import HospitalSettings, SessionTemplate


class SettingsRepository:
    """Repository for the hospital settings row and its session templates"""

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> Optional[HospitalSettings]:
        return self.db.query(HospitalSettings).options(
            selectinload(HospitalSettings.session_templates)
        ).order_by(HospitalSettings.created_at).first()

    def create(self, settings_data: dict, templates: List[dict]) -> HospitalSettings:
        row = HospitalSettings(**settings_data)
        row.session_templates = [SessionTemplate(**t) for t in templates]
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, row: HospitalSettings, settings_data: dict, templates: List[dict]) -> HospitalSettings:
        """Overwrite scalar fields and replace the template list"""
        for key, value in settings_data.items():
            if hasattr(row, key):
                setattr(row, key, value)
        row.session_templates = [SessionTemplate(**t) for t in templates]
        self.db.flush()
        return row

    def get_active_templates(self) -> List[SessionTemplate]:
        return self.db.query(SessionTemplate).filter(
            SessionTemplate.is_active == True
        ).order_by(SessionTemplate.start_time, SessionTemplate.sort_order).all()

    def get_template_by_code(self, short_code: str) -> Optional[SessionTemplate]:
        return self.db.query(SessionTemplate).filter(
            SessionTemplate.short_code == short_code
        ).first()
