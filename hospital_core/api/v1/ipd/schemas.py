"""
IPD API Schemas

Pydantic models for ward, bed, admission and ledger requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from hospital_core.domain.ipd.models import (
    BedStatus, AdmissionRequestStatus, Urgency, AdmissionStatus,
    TransactionType, PaymentMethod, ChargeItemType
)
from hospital_core.domain.billing.models import PaymentStatus


class EntityChangeResponse(BaseModel):
    kind: str
    id: str

    class Config:
        from_attributes = True


# ==================== Ward & Bed Schemas ====================

class WardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., gt=0)
    description: Optional[str] = None
    floor: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)


class WardResponse(BaseModel):
    id: str
    name: str
    capacity: int
    description: Optional[str] = None
    floor: Optional[str] = None
    department: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class WardOccupancyResponse(BaseModel):
    ward_id: Optional[str] = None
    name: str
    total_beds: int
    occupied: int
    available: int
    maintenance: int
    blocked: int
    occupancy_rate: int

    class Config:
        from_attributes = True


class OccupancyStatsResponse(BaseModel):
    wards: List[WardOccupancyResponse]
    overall: WardOccupancyResponse


class BedTypeCreate(BaseModel):
    """Schema for creating a bed type in a ward"""
    ward_id: str
    name: str = Field(..., min_length=1, max_length=100)
    daily_rate: Decimal = Field(..., ge=0)
    max_occupancy: int = Field(1, ge=1)
    amenities: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class BedTypeResponse(BaseModel):
    id: str
    ward_id: str
    name: str
    daily_rate: Decimal
    max_occupancy: int
    amenities: List[str] = []
    description: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class BedCreate(BaseModel):
    ward_id: str
    bed_type_id: str
    bed_number: str = Field(..., min_length=1, max_length=20)
    notes: Optional[str] = None


class BedResponse(BaseModel):
    id: str
    ward_id: str
    bed_type_id: str
    bed_number: str
    status: BedStatus
    notes: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class BedStatusUpdate(BaseModel):
    """Target status for a bed; OCCUPIED is rejected by the service"""
    status: BedStatus


class BedUpdateResponse(BaseModel):
    bed: BedResponse
    changed: List[EntityChangeResponse]

    class Config:
        from_attributes = True


# ==================== Admission Request Schemas ====================

class AdmissionRequestCreate(BaseModel):
    """Schema for raising an admission request"""
    patient_id: str
    doctor_id: str
    urgency: Urgency = Urgency.NORMAL
    ward_type: Optional[str] = Field(None, max_length=100)
    bed_type: Optional[str] = Field(None, max_length=100)
    estimated_stay: Optional[int] = Field(None, gt=0, description="Expected length of stay in days")
    diagnosis: Optional[str] = None
    chief_complaint: Optional[str] = None
    notes: Optional[str] = None


class AdmissionRequestStatusUpdate(BaseModel):
    status: AdmissionRequestStatus
    processed_by: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=1000)


class DepositCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    processed_by: Optional[str] = None


class BedAllocationCreate(BaseModel):
    bed_id: str
    admitted_by: str


class AdmissionRequestResponse(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    urgency: Urgency
    ward_type: Optional[str] = None
    bed_type: Optional[str] = None
    estimated_stay: Optional[int] = None
    diagnosis: Optional[str] = None
    chief_complaint: Optional[str] = None
    notes: Optional[str] = None
    status: AdmissionRequestStatus
    deposit_amount: Optional[Decimal] = None
    deposit_method: Optional[PaymentMethod] = None
    requested_at: datetime
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    admission_id: Optional[str] = None

    class Config:
        from_attributes = True


class RequestUpdateResponse(BaseModel):
    request: AdmissionRequestResponse
    changed: List[EntityChangeResponse]

    class Config:
        from_attributes = True


# ==================== Admission Schemas ====================

class AdmissionResponse(BaseModel):
    id: str
    patient_id: str
    bed_id: str
    doctor_id: str
    admitted_by: str
    admission_request_id: Optional[str] = None
    admitted_at: datetime
    diagnosis: Optional[str] = None
    chief_complaint: Optional[str] = None
    estimated_stay: Optional[int] = None
    status: AdmissionStatus
    discharged_at: Optional[datetime] = None
    discharge_notes: Optional[str] = None

    class Config:
        from_attributes = True


class AllocationResponse(BaseModel):
    admission: AdmissionResponse
    bed: BedResponse
    request: AdmissionRequestResponse
    changed: List[EntityChangeResponse]

    class Config:
        from_attributes = True


class DischargeCreate(BaseModel):
    notes: Optional[str] = None


class LedgerTransactionResponse(BaseModel):
    id: str
    admission_id: str
    type: TransactionType
    amount: Decimal
    description: Optional[str] = None
    reference: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    item_type: Optional[ChargeItemType] = None
    item_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None
    charge_day: Optional[int] = None
    service_date: Optional[date] = None
    processed_at: datetime

    class Config:
        from_attributes = True


class DischargeResponse(BaseModel):
    admission: AdmissionResponse
    bed: BedResponse
    bed_charges: List[LedgerTransactionResponse]
    changed: List[EntityChangeResponse]

    class Config:
        from_attributes = True


# ==================== Ledger Schemas ====================

class ChargeCreate(BaseModel):
    """Schema for an itemised charge"""
    item_type: ChargeItemType
    item_name: str = Field(..., min_length=1, max_length=200)
    quantity: int
    unit_price: Decimal
    tax_rate: Decimal = Field(Decimal("0"), ge=0)
    description: Optional[str] = None
    processed_by: Optional[str] = None


class PaymentCreate(BaseModel):
    type: TransactionType
    amount: Decimal
    method: Optional[PaymentMethod] = None
    description: Optional[str] = None
    reference: Optional[str] = Field(None, max_length=100)
    processed_by: Optional[str] = None


class LedgerPostingResponse(BaseModel):
    admission_id: str
    transactions: List[LedgerTransactionResponse]
    changed: List[EntityChangeResponse]

    class Config:
        from_attributes = True


class LedgerSummaryResponse(BaseModel):
    total_charges: Decimal
    total_deposits: Decimal
    total_payments: Decimal
    total_refunds: Decimal
    total_adjustments: Decimal
    total_paid: Decimal
    balance: Decimal
    net_due: Decimal


class LedgerResponse(BaseModel):
    admission_id: str
    summary: LedgerSummaryResponse
    transactions: List[LedgerTransactionResponse]


class BedChargeRunResponse(BaseModel):
    postings: List[LedgerPostingResponse]
    total_posted: int


class BillItemResponse(BaseModel):
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class BillResponse(BaseModel):
    id: str
    bill_number: str
    patient_id: str
    admission_id: str
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    payment_status: PaymentStatus
    generated_date: datetime
    items: List[BillItemResponse]

    class Config:
        from_attributes = True
