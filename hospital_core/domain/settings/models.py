"""
Hospital settings models

A single settings row holds business hours, the lunch break and token
numbering; session templates hang off it.
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from hospital_core.infrastructure.database import Base
from hospital_core.domain.directory.models import gen_uuid
from hospital_core.utils.timezone import utcnow


class HospitalSettings(Base):
    __tablename__ = "hospital_settings"

    id = Column(String(36), primary_key=True, default=gen_uuid)

    # "HH:MM" strings
    business_start = Column(String(5))
    business_end = Column(String(5))
    lunch_start = Column(String(5))
    lunch_end = Column(String(5))

    token_prefix = Column(String(10), nullable=False, default="T")
    max_tokens_per_session = Column(Integer, nullable=False, default=50)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    session_templates = relationship(
        "SessionTemplate",
        back_populates="settings",
        cascade="all, delete-orphan",
        order_by="SessionTemplate.sort_order"
    )


class SessionTemplate(Base):
    """Named daily time window used for token issuance"""
    __tablename__ = "session_templates"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    settings_id = Column(String(36), ForeignKey("hospital_settings.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    short_code = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    max_tokens = Column(Integer, nullable=False, default=50)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)

    settings = relationship("HospitalSettings", back_populates="session_templates")
