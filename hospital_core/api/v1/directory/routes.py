"""
Directory API Routes

Minimal patient and staff registry referenced by admissions.
"""

from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional

from hospital_core.infrastructure.database import get_db
from hospital_core.domain.directory.models import StaffRole
from hospital_core.domain.directory.service import DirectoryService
from hospital_core.api.v1.directory.schemas import (
    PatientCreate, PatientResponse, StaffCreate, StaffResponse
)

router = APIRouter()


# ==================== Patient Endpoints ====================

@router.get("/patients", response_model=List[PatientResponse])
def list_patients(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db = Depends(get_db)
):
    return DirectoryService(db).list_patients(skip=skip, limit=limit)


@router.post("/patients", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def register_patient(patient_data: PatientCreate, db = Depends(get_db)):
    service = DirectoryService(db)
    return service.register_patient(**patient_data.model_dump())


@router.get("/patients/{patient_id}", response_model=PatientResponse)
def get_patient(patient_id: str, db = Depends(get_db)):
    return DirectoryService(db).get_patient(patient_id)


# ==================== Staff Endpoints ====================

@router.get("/staff", response_model=List[StaffResponse])
def list_staff(role: Optional[StaffRole] = Query(None), db = Depends(get_db)):
    return DirectoryService(db).list_staff(role=role)


@router.post("/staff", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def add_staff(staff_data: StaffCreate, db = Depends(get_db)):
    service = DirectoryService(db)
    return service.add_staff(**staff_data.model_dump())
