from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from hospital_core.domain.directory.models import StaffRole, Gender


class PatientCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None


class PatientResponse(BaseModel):
    id: str
    patient_number: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    role: StaffRole
    email: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=100)


class StaffResponse(BaseModel):
    id: str
    name: str
    role: StaffRole
    email: Optional[str] = None
    department: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True
