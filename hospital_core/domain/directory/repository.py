from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session

from hospital_core.domain.directory.models import Patient, Staff, StaffRole


class PatientRepository:
    """Repository for patient lookups"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, patient_data: dict) -> Patient:
        patient = Patient(**patient_data)
        self.db.add(patient)
        self.db.flush()
        return patient

    def get_by_id(self, patient_id: str) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.id == patient_id).first()

    def get_all(self, skip: int = 0, limit: int = 50) -> List[Patient]:
        return self.db.query(Patient).order_by(
            Patient.created_at.desc()
        ).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(func.count(Patient.id)).scalar()


class StaffRepository:
    """Repository for staff lookups"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, staff_data: dict) -> Staff:
        staff = Staff(**staff_data)
        self.db.add(staff)
        self.db.flush()
        return staff

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        return self.db.query(Staff).filter(Staff.id == staff_id).first()

    def get_all(self, role: Optional[StaffRole] = None) -> List[Staff]:
        query = self.db.query(Staff)
        if role:
            query = query.filter(Staff.role == role)
        return query.order_by(Staff.name).all()
