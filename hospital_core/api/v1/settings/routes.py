"""
Settings API Routes

Hospital timings, session templates and token numbering.
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from hospital_core.infrastructure.database import get_db
from hospital_core.domain.settings.service import SettingsService
from hospital_core.api.v1.settings.schemas import (
    HospitalSettingsUpdate, HospitalSettingsResponse,
    SessionTemplateResponse, ValidationResultResponse, TokenResponse
)

router = APIRouter()


@router.get("/hospital", response_model=HospitalSettingsResponse)
def get_hospital_settings(db = Depends(get_db)):
    """Current hospital settings (defaults on first call)"""
    return SettingsService(db).get_settings()


@router.put("/hospital", response_model=HospitalSettingsResponse)
def update_hospital_settings(settings_data: HospitalSettingsUpdate, db = Depends(get_db)):
    """Save settings; rejected with every violation when session templates are invalid"""
    service = SettingsService(db)
    return service.save_settings(settings_data.model_dump())


@router.post("/hospital/validate", response_model=ValidationResultResponse)
def validate_hospital_settings(settings_data: HospitalSettingsUpdate, db = Depends(get_db)):
    """Run the session validator without saving"""
    violations = SettingsService(db).validate(settings_data.model_dump())
    return {"valid": not violations, "violations": violations}


@router.get("/session-templates", response_model=List[SessionTemplateResponse])
def get_active_session_templates(db = Depends(get_db)):
    return SettingsService(db).get_active_templates()


@router.get("/tokens/preview", response_model=TokenResponse)
def preview_token(
    short_code: Optional[str] = Query(None),
    sequence: int = Query(1, ge=1),
    db = Depends(get_db)
):
    """Token number for a session and sequence, e.g. TS1001"""
    service = SettingsService(db)
    if short_code:
        return {"token": service.format_token(short_code, sequence)}
    return {"token": service.preview_token()}
