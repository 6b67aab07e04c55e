from sqlalchemy import Column, String, ForeignKey, Enum, DateTime, Integer, Numeric, Text
from sqlalchemy.orm import relationship
from hospital_core.infrastructure.database import Base
from hospital_core.domain.directory.models import gen_uuid
from hospital_core.utils.timezone import utcnow
import enum


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    REFUNDED = "REFUNDED"


class Bill(Base):
    """Final bill generated from an admission ledger"""
    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    bill_number = Column(String(50), unique=True, nullable=False)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    admission_id = Column(String(36), ForeignKey("admissions.id"), nullable=False, unique=True)

    total_amount = Column(Numeric(12, 2), nullable=False)
    paid_amount = Column(Numeric(12, 2), default=0)
    pending_amount = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING)
    generated_date = Column(DateTime, default=utcnow)
    generated_by = Column(String(36), ForeignKey("staff.id"))

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    items = relationship("BillItem", back_populates="bill", cascade="all, delete-orphan")


class BillItem(Base):
    __tablename__ = "bill_items"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    bill_id = Column(String(36), ForeignKey("bills.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    bill = relationship("Bill", back_populates="items")
