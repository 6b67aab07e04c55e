"""
IPD Repository Layer

Data access for wards, beds, admission requests, admissions and ledger
transactions. Repositories add and flush; the service layer owns commits.
"""

from typing import Optional, List, Dict
from sqlalchemy import func, and_
from sqlalchemy.orm import Session, joinedload

from hospital_core.domain.ipd.models import (
    Ward, BedType, Bed, BedStatus,
    AdmissionRequest, AdmissionRequestStatus,
    Admission, AdmissionStatus,
    LedgerTransaction, TransactionType, BED_DAILY_REFERENCE
)


class WardRepository:
    """Repository for wards and bed types"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, ward_data: dict) -> Ward:
        ward = Ward(**ward_data)
        self.db.add(ward)
        self.db.flush()
        return ward

    def get_by_id(self, ward_id: str) -> Optional[Ward]:
        return self.db.query(Ward).filter(Ward.id == ward_id).first()

    def get_by_name(self, name: str) -> Optional[Ward]:
        return self.db.query(Ward).filter(Ward.name == name).first()

    def get_all(self, active_only: bool = True) -> List[Ward]:
        query = self.db.query(Ward)
        if active_only:
            query = query.filter(Ward.is_active == True)
        return query.order_by(Ward.name).all()

    def create_bed_type(self, bed_type_data: dict) -> BedType:
        bed_type = BedType(**bed_type_data)
        self.db.add(bed_type)
        self.db.flush()
        return bed_type

    def get_bed_type(self, bed_type_id: str) -> Optional[BedType]:
        return self.db.query(BedType).filter(BedType.id == bed_type_id).first()

    def get_bed_type_by_name(self, ward_id: str, name: str) -> Optional[BedType]:
        return self.db.query(BedType).filter(
            and_(BedType.ward_id == ward_id, BedType.name == name)
        ).first()

    def bed_status_counts(self) -> Dict[str, Dict[BedStatus, int]]:
        """Active bed counts grouped by ward and status"""
        rows = self.db.query(
            Bed.ward_id, Bed.status, func.count(Bed.id)
        ).filter(
            Bed.is_active == True
        ).group_by(Bed.ward_id, Bed.status).all()

        counts: Dict[str, Dict[BedStatus, int]] = {}
        for ward_id, bed_status, total in rows:
            counts.setdefault(ward_id, {})[BedStatus(bed_status)] = total
        return counts


class BedRepository:
    """Repository for beds"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, bed_data: dict) -> Bed:
        bed = Bed(**bed_data)
        self.db.add(bed)
        self.db.flush()
        return bed

    def get_by_id(self, bed_id: str) -> Optional[Bed]:
        return self.db.query(Bed).filter(Bed.id == bed_id).first()

    def get_for_update(self, bed_id: str) -> Optional[Bed]:
        """Re-read a bed with a row lock for the rest of the transaction"""
        return self.db.query(Bed).filter(
            Bed.id == bed_id
        ).populate_existing().with_for_update().first()

    def get_by_number(self, ward_id: str, bed_number: str) -> Optional[Bed]:
        return self.db.query(Bed).filter(
            and_(Bed.ward_id == ward_id, Bed.bed_number == bed_number)
        ).first()

    def get_all(
        self,
        ward_id: Optional[str] = None,
        status: Optional[BedStatus] = None,
        bed_type_id: Optional[str] = None
    ) -> List[Bed]:
        query = self.db.query(Bed).options(joinedload(Bed.bed_type)).filter(Bed.is_active == True)
        if ward_id:
            query = query.filter(Bed.ward_id == ward_id)
        if status:
            query = query.filter(Bed.status == status)
        if bed_type_id:
            query = query.filter(Bed.bed_type_id == bed_type_id)
        return query.order_by(Bed.ward_id, Bed.bed_number).all()

    def count_for_ward(self, ward_id: str) -> int:
        return self.db.query(func.count(Bed.id)).filter(
            and_(Bed.ward_id == ward_id, Bed.is_active == True)
        ).scalar()


class AdmissionRequestRepository:
    """Repository for admission requests"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, request_data: dict) -> AdmissionRequest:
        request = AdmissionRequest(**request_data)
        self.db.add(request)
        self.db.flush()
        return request

    def get_by_id(self, request_id: str) -> Optional[AdmissionRequest]:
        return self.db.query(AdmissionRequest).filter(
            AdmissionRequest.id == request_id
        ).first()

    def get_for_update(self, request_id: str) -> Optional[AdmissionRequest]:
        return self.db.query(AdmissionRequest).filter(
            AdmissionRequest.id == request_id
        ).populate_existing().with_for_update().first()

    def get_all(
        self,
        status: Optional[AdmissionRequestStatus] = None,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[AdmissionRequest]:
        query = self.db.query(AdmissionRequest)
        if status:
            query = query.filter(AdmissionRequest.status == status)
        if doctor_id:
            query = query.filter(AdmissionRequest.doctor_id == doctor_id)
        if patient_id:
            query = query.filter(AdmissionRequest.patient_id == patient_id)
        return query.order_by(
            AdmissionRequest.requested_at.desc()
        ).offset(skip).limit(limit).all()


class AdmissionRepository:
    """Repository for admissions"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, admission_data: dict) -> Admission:
        admission = Admission(**admission_data)
        self.db.add(admission)
        self.db.flush()
        return admission

    def get_by_id(self, admission_id: str) -> Optional[Admission]:
        return self.db.query(Admission).options(
            joinedload(Admission.bed).joinedload(Bed.bed_type)
        ).filter(Admission.id == admission_id).first()

    def get_for_update(self, admission_id: str) -> Optional[Admission]:
        return self.db.query(Admission).filter(
            Admission.id == admission_id
        ).populate_existing().with_for_update().first()

    def get_active(self) -> List[Admission]:
        return self.db.query(Admission).filter(
            Admission.status == AdmissionStatus.ACTIVE
        ).order_by(Admission.admitted_at).all()

    def get_all(
        self,
        status: Optional[AdmissionStatus] = None,
        patient_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Admission]:
        query = self.db.query(Admission)
        if status:
            query = query.filter(Admission.status == status)
        if patient_id:
            query = query.filter(Admission.patient_id == patient_id)
        return query.order_by(Admission.admitted_at.desc()).offset(skip).limit(limit).all()


class LedgerRepository:
    """Append-only access to ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, transaction_data: dict) -> LedgerTransaction:
        txn = LedgerTransaction(**transaction_data)
        self.db.add(txn)
        self.db.flush()
        return txn

    def get_for_admission(self, admission_id: str) -> List[LedgerTransaction]:
        return self.db.query(LedgerTransaction).filter(
            LedgerTransaction.admission_id == admission_id
        ).order_by(LedgerTransaction.processed_at, LedgerTransaction.charge_day).all()

    def get_charged_days(self, admission_id: str) -> set:
        """Bed-day indexes already posted for an admission"""
        rows = self.db.query(LedgerTransaction.charge_day).filter(
            and_(
                LedgerTransaction.admission_id == admission_id,
                LedgerTransaction.type == TransactionType.CHARGE,
                LedgerTransaction.reference == BED_DAILY_REFERENCE,
                LedgerTransaction.charge_day.isnot(None)
            )
        ).all()
        return {row[0] for row in rows}
