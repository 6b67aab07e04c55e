"""
IPD Domain Models

Implements the database models for:
- Wards, bed types and beds
- Admission requests (pre-admission workflow)
- Admissions (active bed occupancy)
- The per-admission ledger
"""

from sqlalchemy import (
    Column, String, Date, Boolean, DateTime, ForeignKey,
    Integer, Text, Enum, Numeric, JSON, CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from hospital_core.infrastructure.database import Base
from hospital_core.domain.directory.models import gen_uuid
from hospital_core.utils.timezone import utcnow
import enum


class BedStatus(str, enum.Enum):
    """Bed status enumeration"""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"
    BLOCKED = "BLOCKED"


class AdmissionRequestStatus(str, enum.Enum):
    """Admission request workflow status"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    AWAITING_DEPOSIT = "AWAITING_DEPOSIT"
    DEPOSIT_PAID = "DEPOSIT_PAID"
    CONVERTED = "CONVERTED"
    REJECTED = "REJECTED"


class Urgency(str, enum.Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    EMERGENCY = "EMERGENCY"


class AdmissionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DISCHARGED = "DISCHARGED"


class TransactionType(str, enum.Enum):
    """Ledger transaction type"""
    CHARGE = "CHARGE"
    DEPOSIT = "DEPOSIT"
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    ADJUSTMENT = "ADJUSTMENT"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    CARD = "CARD"
    UPI = "UPI"
    ONLINE = "ONLINE"


class ChargeItemType(str, enum.Enum):
    """Category of a manually added charge"""
    BED = "BED"
    MEDICINE = "MEDICINE"
    LAB = "LAB"
    PROCEDURE = "PROCEDURE"
    CONSULTATION = "CONSULTATION"
    SERVICE = "SERVICE"
    OTHER = "OTHER"


BED_DAILY_REFERENCE = "AUTO:BED_DAILY"


class Ward(Base):
    """Physical unit grouping beds"""
    __tablename__ = "wards"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    floor = Column(String(50))
    department = Column(String(100))
    capacity = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    bed_types = relationship("BedType", back_populates="ward")
    beds = relationship("Bed", back_populates="ward")

    __table_args__ = (
        CheckConstraint('capacity > 0', name='check_ward_capacity'),
    )


class BedType(Base):
    """Bed category within a ward: daily rate, amenities, occupancy"""
    __tablename__ = "bed_types"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    ward_id = Column(String(36), ForeignKey("wards.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    daily_rate = Column(Numeric(12, 2), nullable=False)
    max_occupancy = Column(Integer, default=1)
    amenities = Column(JSON, default=list)  # list of amenity names
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    ward = relationship("Ward", back_populates="bed_types")

    __table_args__ = (
        UniqueConstraint('ward_id', 'name', name='uq_bed_type_name_per_ward'),
        CheckConstraint('daily_rate >= 0', name='check_daily_rate'),
    )


class Bed(Base):
    __tablename__ = "beds"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    ward_id = Column(String(36), ForeignKey("wards.id"), nullable=False, index=True)
    bed_type_id = Column(String(36), ForeignKey("bed_types.id"), nullable=False)
    bed_number = Column(String(20), nullable=False)
    status = Column(Enum(BedStatus), nullable=False, default=BedStatus.AVAILABLE)
    notes = Column(Text)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    ward = relationship("Ward", back_populates="beds")
    bed_type = relationship("BedType")
    admissions = relationship("Admission", back_populates="bed")

    __table_args__ = (
        UniqueConstraint('ward_id', 'bed_number', name='uq_bed_number_per_ward'),
        Index('ix_beds_ward_status', 'ward_id', 'status'),
    )


class AdmissionRequest(Base):
    """Pre-admission workflow record; never deleted"""
    __tablename__ = "admission_requests"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("staff.id"), nullable=False, index=True)

    # Requested placement
    ward_type = Column(String(100))
    bed_type = Column(String(100))
    urgency = Column(Enum(Urgency), nullable=False, default=Urgency.NORMAL)
    estimated_stay = Column(Integer)  # days

    # Clinical details
    diagnosis = Column(Text)
    chief_complaint = Column(Text)
    notes = Column(Text)

    status = Column(Enum(AdmissionRequestStatus), nullable=False,
                    default=AdmissionRequestStatus.PENDING, index=True)

    # Deposit captured before conversion
    deposit_amount = Column(Numeric(12, 2))
    deposit_method = Column(Enum(PaymentMethod))

    requested_at = Column(DateTime, default=utcnow)
    processed_at = Column(DateTime)
    processed_by = Column(String(36), ForeignKey("staff.id"))
    rejection_reason = Column(Text)
    admission_id = Column(String(36), ForeignKey("admissions.id", use_alter=True, name="fk_admission_request_admission"))

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    patient = relationship("Patient")
    doctor = relationship("Staff", foreign_keys=[doctor_id])
    admission = relationship("Admission", foreign_keys=[admission_id])

    __table_args__ = (
        CheckConstraint('estimated_stay IS NULL OR estimated_stay > 0', name='check_estimated_stay'),
    )


class Admission(Base):
    """Active (or historical) bed occupancy"""
    __tablename__ = "admissions"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    bed_id = Column(String(36), ForeignKey("beds.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("staff.id"), nullable=False)
    admitted_by = Column(String(36), ForeignKey("staff.id"), nullable=False)
    admission_request_id = Column(String(36), ForeignKey("admission_requests.id"))

    admitted_at = Column(DateTime, nullable=False, default=utcnow)
    diagnosis = Column(Text)
    chief_complaint = Column(Text)
    estimated_stay = Column(Integer)

    status = Column(Enum(AdmissionStatus), nullable=False, default=AdmissionStatus.ACTIVE, index=True)
    discharged_at = Column(DateTime)
    discharge_notes = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    patient = relationship("Patient")
    bed = relationship("Bed", back_populates="admissions")
    doctor = relationship("Staff", foreign_keys=[doctor_id])
    admitting_user = relationship("Staff", foreign_keys=[admitted_by])
    transactions = relationship(
        "LedgerTransaction",
        back_populates="admission",
        order_by="LedgerTransaction.processed_at"
    )


class LedgerTransaction(Base):
    """Append-only ledger entry for an admission"""
    __tablename__ = "ledger_transactions"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    admission_id = Column(String(36), ForeignKey("admissions.id"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False)

    type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text)
    reference = Column(String(100), index=True)
    payment_method = Column(Enum(PaymentMethod))

    # Itemised charge details
    item_type = Column(Enum(ChargeItemType))
    item_name = Column(String(200))
    quantity = Column(Integer)
    unit_price = Column(Numeric(12, 2))
    tax_rate = Column(Numeric(5, 2))

    # Bed-day index (1-based) for automatic daily bed charges
    charge_day = Column(Integer)
    service_date = Column(Date)

    processed_by = Column(String(36), ForeignKey("staff.id"))
    processed_at = Column(DateTime, nullable=False, default=utcnow)

    admission = relationship("Admission", back_populates="transactions")

    __table_args__ = (
        CheckConstraint('amount >= 0', name='check_ledger_amount'),
        UniqueConstraint('admission_id', 'charge_day', name='uq_bed_charge_day_per_admission'),
    )
