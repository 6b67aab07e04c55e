"""
IPD API Routes

Endpoints for wards and beds, the admission request workflow, admissions
and the admission ledger.
"""

from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional
import dataclasses

from hospital_core.infrastructure.database import get_db
from hospital_core.domain.ipd.models import BedStatus, AdmissionRequestStatus, AdmissionStatus
from hospital_core.domain.ipd.service import WardService, AdmissionService, LedgerService
from hospital_core.api.v1.ipd.schemas import (
    # Ward & bed schemas
    WardCreate, WardResponse, OccupancyStatsResponse,
    BedTypeCreate, BedTypeResponse, BedCreate, BedResponse,
    BedStatusUpdate, BedUpdateResponse,
    # Admission request schemas
    AdmissionRequestCreate, AdmissionRequestStatusUpdate, DepositCreate,
    BedAllocationCreate, AdmissionRequestResponse, RequestUpdateResponse,
    # Admission schemas
    AdmissionResponse, AllocationResponse, DischargeCreate, DischargeResponse,
    # Ledger schemas
    ChargeCreate, PaymentCreate, LedgerPostingResponse, LedgerResponse,
    BedChargeRunResponse, BillResponse
)

router = APIRouter()


def _as_response(result) -> dict:
    """Shallow dict of a service result; ORM members are serialized by the response model"""
    return {f.name: getattr(result, f.name) for f in dataclasses.fields(result)}


# ==================== Ward & Bed Endpoints ====================

@router.get("/wards", response_model=OccupancyStatsResponse)
def get_ward_occupancy(db = Depends(get_db)):
    """Occupancy statistics per ward and overall"""
    stats = WardService(db).ward_occupancy()
    return {
        "wards": [ward.as_dict() for ward in stats["wards"]],
        "overall": stats["overall"].as_dict(),
    }


@router.post("/wards", response_model=WardResponse, status_code=status.HTTP_201_CREATED)
def create_ward(ward_data: WardCreate, db = Depends(get_db)):
    service = WardService(db)
    return service.create_ward(**ward_data.model_dump())


@router.post("/bed-types", response_model=BedTypeResponse, status_code=status.HTTP_201_CREATED)
def create_bed_type(bed_type_data: BedTypeCreate, db = Depends(get_db)):
    service = WardService(db)
    return service.create_bed_type(**bed_type_data.model_dump())


@router.get("/beds", response_model=List[BedResponse])
def list_beds(
    ward_id: Optional[str] = Query(None),
    bed_status: Optional[BedStatus] = Query(None, alias="status"),
    bed_type_id: Optional[str] = Query(None),
    db = Depends(get_db)
):
    """List beds, optionally filtered by ward, status or bed type"""
    service = WardService(db)
    return service.list_beds(ward_id=ward_id, status=bed_status, bed_type_id=bed_type_id)


@router.post("/beds", response_model=BedResponse, status_code=status.HTTP_201_CREATED)
def create_bed(bed_data: BedCreate, db = Depends(get_db)):
    service = WardService(db)
    return service.create_bed(**bed_data.model_dump())


@router.put("/beds/{bed_id}/status", response_model=BedUpdateResponse)
def update_bed_status(bed_id: str, status_data: BedStatusUpdate, db = Depends(get_db)):
    """Toggle a bed between AVAILABLE, MAINTENANCE and BLOCKED"""
    service = WardService(db)
    return _as_response(service.toggle_maintenance(bed_id, status_data.status))


# ==================== Admission Request Endpoints ====================

@router.get("/admission-requests", response_model=List[AdmissionRequestResponse])
def list_admission_requests(
    request_status: Optional[AdmissionRequestStatus] = Query(None, alias="status"),
    doctor_id: Optional[str] = Query(None),
    patient_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db = Depends(get_db)
):
    service = AdmissionService(db)
    return service.list_requests(
        status=request_status, doctor_id=doctor_id, patient_id=patient_id, skip=skip, limit=limit
    )


@router.post("/admission-requests", response_model=RequestUpdateResponse, status_code=status.HTTP_201_CREATED)
def create_admission_request(request_data: AdmissionRequestCreate, db = Depends(get_db)):
    """Raise a new admission request (starts PENDING)"""
    service = AdmissionService(db)
    return _as_response(service.create_request(**request_data.model_dump()))


@router.get("/admission-requests/{request_id}", response_model=AdmissionRequestResponse)
def get_admission_request(request_id: str, db = Depends(get_db)):
    return AdmissionService(db).get_request(request_id)


@router.post("/admission-requests/{request_id}/status", response_model=RequestUpdateResponse)
def update_admission_request_status(
    request_id: str,
    status_data: AdmissionRequestStatusUpdate,
    db = Depends(get_db)
):
    """Approve, reject or otherwise move a request along the workflow"""
    service = AdmissionService(db)
    result = service.set_status(
        request_id,
        status_data.status,
        processed_by=status_data.processed_by,
        reason=status_data.reason
    )
    return _as_response(result)


@router.post("/admission-requests/{request_id}/deposit", response_model=RequestUpdateResponse)
def record_deposit(request_id: str, deposit_data: DepositCreate, db = Depends(get_db)):
    service = AdmissionService(db)
    result = service.record_deposit(
        request_id,
        deposit_data.amount,
        method=deposit_data.method,
        processed_by=deposit_data.processed_by
    )
    return _as_response(result)


@router.post("/admission-requests/{request_id}/allocate", response_model=AllocationResponse)
def allocate_bed(request_id: str, allocation_data: BedAllocationCreate, db = Depends(get_db)):
    """Convert a deposit-paid request into an admission on the chosen bed"""
    service = AdmissionService(db)
    result = service.allocate_bed(request_id, allocation_data.bed_id, allocation_data.admitted_by)
    return _as_response(result)


# ==================== Admission Endpoints ====================

@router.get("/admissions", response_model=List[AdmissionResponse])
def list_admissions(
    admission_status: Optional[AdmissionStatus] = Query(None, alias="status"),
    patient_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db = Depends(get_db)
):
    service = AdmissionService(db)
    return service.list_admissions(status=admission_status, patient_id=patient_id, skip=skip, limit=limit)


@router.get("/admissions/{admission_id}", response_model=AdmissionResponse)
def get_admission(admission_id: str, db = Depends(get_db)):
    return AdmissionService(db).get_admission(admission_id)


@router.post("/admissions/{admission_id}/discharge", response_model=DischargeResponse)
def discharge_admission(admission_id: str, discharge_data: DischargeCreate, db = Depends(get_db)):
    service = AdmissionService(db)
    return _as_response(service.discharge(admission_id, notes=discharge_data.notes))


# ==================== Ledger Endpoints ====================

@router.get("/admissions/{admission_id}/ledger", response_model=LedgerResponse)
def get_ledger(admission_id: str, db = Depends(get_db)):
    """Ledger transactions with freshly computed totals"""
    service = LedgerService(db)
    transactions = service.get_transactions(admission_id)
    summary = service.get_ledger_summary(admission_id)
    return {
        "admission_id": admission_id,
        "summary": summary.as_dict(),
        "transactions": transactions,
    }


@router.post("/admissions/{admission_id}/ledger/charges", response_model=LedgerPostingResponse,
             status_code=status.HTTP_201_CREATED)
def add_charge(admission_id: str, charge_data: ChargeCreate, db = Depends(get_db)):
    service = LedgerService(db)
    return _as_response(service.add_charge(admission_id, **charge_data.model_dump()))


@router.post("/admissions/{admission_id}/ledger/payments", response_model=LedgerPostingResponse,
             status_code=status.HTTP_201_CREATED)
def record_payment(admission_id: str, payment_data: PaymentCreate, db = Depends(get_db)):
    service = LedgerService(db)
    result = service.record_payment(
        admission_id,
        payment_data.type,
        payment_data.amount,
        method=payment_data.method,
        description=payment_data.description,
        reference=payment_data.reference,
        processed_by=payment_data.processed_by
    )
    return _as_response(result)


@router.post("/admissions/{admission_id}/ledger/bed-charge", response_model=LedgerPostingResponse)
def post_bed_charge(admission_id: str, db = Depends(get_db)):
    """Post any outstanding daily bed charges for one admission"""
    return _as_response(LedgerService(db).post_bed_charge(admission_id))


@router.post("/ledger/bed-charge", response_model=BedChargeRunResponse)
def post_bed_charges_for_active(db = Depends(get_db)):
    """Daily bed charge run over every active admission"""
    postings = LedgerService(db).post_bed_charges_for_active()
    return {
        "postings": [_as_response(p) for p in postings],
        "total_posted": sum(len(p.transactions) for p in postings),
    }


@router.post("/admissions/{admission_id}/finalize", response_model=BillResponse,
             status_code=status.HTTP_201_CREATED)
def finalize_admission(admission_id: str, generated_by: Optional[str] = Query(None), db = Depends(get_db)):
    """Generate the final bill from the ledger summary"""
    return LedgerService(db).finalize_admission(admission_id, generated_by=generated_by)
