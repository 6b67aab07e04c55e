"""
Settings API Schemas
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class SessionTemplateSchema(BaseModel):
    """A session template as submitted; field checks are left to the session validator"""
    name: Optional[str] = None
    short_code: Optional[str] = Field(None, max_length=10)
    start_time: Optional[str] = Field(None, description="HH:MM")
    end_time: Optional[str] = Field(None, description="HH:MM")
    max_tokens: Optional[int] = Field(None, ge=1)
    is_active: bool = True


class HospitalSettingsUpdate(BaseModel):
    business_start: Optional[str] = Field(None, description="HH:MM")
    business_end: Optional[str] = Field(None, description="HH:MM")
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    token_prefix: Optional[str] = Field(None, max_length=10)
    max_tokens_per_session: Optional[int] = Field(None, ge=1)
    session_templates: List[SessionTemplateSchema] = Field(default_factory=list)


class SessionTemplateResponse(BaseModel):
    id: str
    name: str
    short_code: str
    start_time: str
    end_time: str
    max_tokens: int
    is_active: bool

    class Config:
        from_attributes = True


class HospitalSettingsResponse(BaseModel):
    id: str
    business_start: Optional[str] = None
    business_end: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    token_prefix: str
    max_tokens_per_session: int
    session_templates: List[SessionTemplateResponse]

    class Config:
        from_attributes = True


class ValidationResultResponse(BaseModel):
    valid: bool
    violations: List[str]


class TokenResponse(BaseModel):
    token: str
