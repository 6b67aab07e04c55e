"""
Directory Service Layer

Patients and staff referenced by the IPD workflow.
"""

from typing import Optional, List
from datetime import date
import logging

from hospital_core.core.exceptions import NotFoundError, ValidationError
from hospital_core.domain.directory.models import Patient, Staff, StaffRole, Gender
from hospital_core.domain.directory.repository import PatientRepository, StaffRepository
from hospital_core.infrastructure.database import transaction

logger = logging.getLogger(__name__)


class DirectoryService:
    def __init__(self, db):
        self.db = db
        self.patient_repo = PatientRepository(db)
        self.staff_repo = StaffRepository(db)

    def _generate_patient_number(self) -> str:
        """Generate sequential patient number"""
        count = self.patient_repo.count()
        return f"PAT-{date.today().strftime('%Y%m%d')}-{str(count + 1).zfill(4)}"

    def register_patient(
        self,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        gender: Optional[Gender] = None,
        date_of_birth: Optional[date] = None
    ) -> Patient:
        with transaction(self.db, "register patient"):
            patient = self.patient_repo.create({
                "patient_number": self._generate_patient_number(),
                "first_name": first_name,
                "last_name": last_name,
                "phone": phone,
                "gender": gender,
                "date_of_birth": date_of_birth,
            })
        logger.info("Registered patient %s", patient.patient_number)
        return patient

    def add_staff(
        self,
        name: str,
        role: StaffRole,
        email: Optional[str] = None,
        department: Optional[str] = None
    ) -> Staff:
        with transaction(self.db, "add staff"):
            staff = self.staff_repo.create({
                "name": name,
                "role": role,
                "email": email,
                "department": department,
            })
        return staff

    def list_patients(self, skip: int = 0, limit: int = 50) -> List[Patient]:
        return self.patient_repo.get_all(skip=skip, limit=limit)

    def list_staff(self, role: Optional[StaffRole] = None) -> List[Staff]:
        return self.staff_repo.get_all(role=role)

    def get_patient(self, patient_id: str) -> Patient:
        patient = self.patient_repo.get_by_id(patient_id)
        if not patient:
            raise NotFoundError("Patient not found", details={"patient_id": patient_id})
        return patient

    def get_staff(self, staff_id: str) -> Staff:
        staff = self.staff_repo.get_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff member not found", details={"staff_id": staff_id})
        return staff

    def get_doctor(self, doctor_id: str) -> Staff:
        doctor = self.get_staff(doctor_id)
        if doctor.role != StaffRole.DOCTOR:
            raise ValidationError(
                "Referenced staff member is not a doctor",
                details={"staff_id": doctor_id, "role": doctor.role.value}
            )
        return doctor
