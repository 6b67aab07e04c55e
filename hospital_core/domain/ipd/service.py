"""
IPD Service Layer

Business logic for the in-patient admission workflow:
- Ward, bed type and bed setup, bed status toggling and occupancy stats
- Admission request lifecycle, deposit capture and bed allocation
- Per-admission ledger: daily bed charges, manual charges, payments
- Discharge and final bill generation

Every mutating operation runs inside a single ``transaction()`` and returns
the entities it touched so callers can refresh their views.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any
import logging
import math

from hospital_core.core.config import settings
from hospital_core.core.exceptions import (
    NotFoundError, ConflictError, BusinessLogicError,
    BedUnavailableError, BedOccupiedError, InactiveAdmissionError, InvalidInputError
)
from hospital_core.domain.billing.models import Bill, PaymentStatus
from hospital_core.domain.billing.repository import BillRepository
from hospital_core.domain.directory.service import DirectoryService
from hospital_core.domain.ipd.ledger import LedgerSummary, summarize_ledger, to_money, ZERO
from hospital_core.domain.ipd.models import (
    Ward, BedType, Bed, BedStatus,
    AdmissionRequest, AdmissionRequestStatus, Urgency,
    Admission, AdmissionStatus,
    LedgerTransaction, TransactionType, PaymentMethod, ChargeItemType,
    BED_DAILY_REFERENCE
)
from hospital_core.domain.ipd.repository import (
    WardRepository, BedRepository, AdmissionRequestRepository,
    AdmissionRepository, LedgerRepository
)
from hospital_core.domain.ipd.workflow import ensure_transition, ensure_allocatable
from hospital_core.infrastructure.database import transaction
from hospital_core.utils.timezone import utcnow

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
TOGGLEABLE_BED_STATUSES = frozenset({BedStatus.AVAILABLE, BedStatus.MAINTENANCE, BedStatus.BLOCKED})


# ==================== Mutation Results ====================

@dataclass(frozen=True)
class EntityChange:
    """Identifies an entity whose view must be refreshed"""
    kind: str
    id: str


@dataclass
class RequestUpdate:
    request: AdmissionRequest
    changed: List[EntityChange] = field(default_factory=list)


@dataclass
class Allocation:
    admission: Admission
    bed: Bed
    request: AdmissionRequest
    changed: List[EntityChange] = field(default_factory=list)


@dataclass
class LedgerPosting:
    admission_id: str
    transactions: List[LedgerTransaction] = field(default_factory=list)
    changed: List[EntityChange] = field(default_factory=list)


@dataclass
class BedUpdate:
    bed: Bed
    changed: List[EntityChange] = field(default_factory=list)


@dataclass
class Discharge:
    admission: Admission
    bed: Bed
    bed_charges: List[LedgerTransaction] = field(default_factory=list)
    changed: List[EntityChange] = field(default_factory=list)


@dataclass
class WardOccupancy:
    ward_id: Optional[str]
    name: str
    total_beds: int = 0
    occupied: int = 0
    available: int = 0
    maintenance: int = 0
    blocked: int = 0

    @property
    def occupancy_rate(self) -> int:
        """Occupied share of all beds, rounded half up to a whole percent"""
        if not self.total_beds:
            return 0
        rate = Decimal(self.occupied * 100) / Decimal(self.total_beds)
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def as_dict(self) -> dict:
        data = asdict(self)
        data["occupancy_rate"] = self.occupancy_rate
        return data


def _change(kind: str, entity) -> EntityChange:
    return EntityChange(kind=kind, id=entity.id)


def _require_positive(name: str, value) -> None:
    if value is None or value <= 0:
        raise InvalidInputError(
            f"{name} must be greater than zero",
            details={"field": name, "value": str(value)}
        )


# ==================== Wards & Beds ====================

class WardService:
    """Service layer for ward, bed type and bed management"""

    def __init__(self, db):
        self.db = db
        self.ward_repo = WardRepository(db)
        self.bed_repo = BedRepository(db)

    def create_ward(
        self,
        name: str,
        capacity: int,
        description: Optional[str] = None,
        floor: Optional[str] = None,
        department: Optional[str] = None
    ) -> Ward:
        _require_positive("capacity", capacity)
        if self.ward_repo.get_by_name(name):
            raise ConflictError("Ward with this name already exists", details={"name": name})

        with transaction(self.db, "create ward"):
            ward = self.ward_repo.create({
                "name": name,
                "capacity": capacity,
                "description": description,
                "floor": floor,
                "department": department,
            })
        logger.info("Created ward %s (capacity %s)", ward.name, ward.capacity)
        return ward

    def get_ward(self, ward_id: str) -> Ward:
        ward = self.ward_repo.get_by_id(ward_id)
        if not ward:
            raise NotFoundError("Ward not found", details={"ward_id": ward_id})
        return ward

    def create_bed_type(
        self,
        ward_id: str,
        name: str,
        daily_rate,
        max_occupancy: int = 1,
        amenities: Optional[List[str]] = None,
        description: Optional[str] = None
    ) -> BedType:
        """Create a bed category in a ward; names are unique per ward"""
        self.get_ward(ward_id)
        daily_rate = to_money(daily_rate)
        if daily_rate < 0:
            raise InvalidInputError("daily_rate cannot be negative", details={"daily_rate": str(daily_rate)})
        _require_positive("max_occupancy", max_occupancy)
        if self.ward_repo.get_bed_type_by_name(ward_id, name):
            raise ConflictError(
                "Bed type with this name already exists in the ward",
                details={"ward_id": ward_id, "name": name}
            )

        with transaction(self.db, "create bed type"):
            bed_type = self.ward_repo.create_bed_type({
                "ward_id": ward_id,
                "name": name,
                "daily_rate": daily_rate,
                "max_occupancy": max_occupancy,
                "amenities": list(amenities or []),
                "description": description,
            })
        return bed_type

    def create_bed(
        self,
        ward_id: str,
        bed_type_id: str,
        bed_number: str,
        notes: Optional[str] = None
    ) -> Bed:
        """Add a bed to a ward. New beds start AVAILABLE."""
        ward = self.get_ward(ward_id)
        bed_type = self.ward_repo.get_bed_type(bed_type_id)
        if not bed_type or bed_type.ward_id != ward_id:
            raise NotFoundError(
                "Bed type not found in this ward",
                details={"ward_id": ward_id, "bed_type_id": bed_type_id}
            )
        if self.bed_repo.get_by_number(ward_id, bed_number):
            raise ConflictError(
                "Bed number already exists in the ward",
                details={"ward_id": ward_id, "bed_number": bed_number}
            )
        if self.bed_repo.count_for_ward(ward_id) >= ward.capacity:
            raise BusinessLogicError(
                "Ward is at full capacity",
                details={"ward_id": ward_id, "capacity": ward.capacity}
            )

        with transaction(self.db, "create bed"):
            bed = self.bed_repo.create({
                "ward_id": ward_id,
                "bed_type_id": bed_type_id,
                "bed_number": bed_number,
                "status": BedStatus.AVAILABLE,
                "notes": notes,
            })
        return bed

    def list_beds(
        self,
        ward_id: Optional[str] = None,
        status: Optional[BedStatus] = None,
        bed_type_id: Optional[str] = None
    ) -> List[Bed]:
        return self.bed_repo.get_all(ward_id=ward_id, status=status, bed_type_id=bed_type_id)

    def toggle_maintenance(self, bed_id: str, target) -> BedUpdate:
        """
        Move a bed between AVAILABLE, MAINTENANCE and BLOCKED.

        OCCUPIED is never a valid target, and an occupied bed cannot be
        toggled; both leave the bed unchanged.
        """
        try:
            target = BedStatus(target)
        except ValueError:
            raise InvalidInputError("Unknown bed status", details={"target": str(target)})
        if target not in TOGGLEABLE_BED_STATUSES:
            raise InvalidInputError(
                f"Bed status cannot be set to {target.value} directly",
                details={"target": target.value}
            )

        with transaction(self.db, "toggle bed status"):
            bed = self.bed_repo.get_for_update(bed_id)
            if not bed:
                raise NotFoundError("Bed not found", details={"bed_id": bed_id})
            if bed.status == BedStatus.OCCUPIED:
                logger.warning("Refused status change on occupied bed %s", bed.bed_number)
                raise BedOccupiedError(
                    "Bed is occupied; discharge the patient first",
                    details={"bed_id": bed_id}
                )
            previous = bed.status
            bed.status = target

        logger.info("Bed %s: %s -> %s", bed.bed_number, previous.value, target.value)
        return BedUpdate(bed=bed, changed=[_change("bed", bed), EntityChange("ward", bed.ward_id)])

    def ward_occupancy(self) -> Dict[str, Any]:
        """Occupancy counts per ward and for the whole hospital"""
        counts = self.ward_repo.bed_status_counts()
        wards = []
        overall = WardOccupancy(ward_id=None, name="All wards")

        for ward in self.ward_repo.get_all():
            by_status = counts.get(ward.id, {})
            stats = WardOccupancy(
                ward_id=ward.id,
                name=ward.name,
                total_beds=sum(by_status.values()),
                occupied=by_status.get(BedStatus.OCCUPIED, 0),
                available=by_status.get(BedStatus.AVAILABLE, 0),
                maintenance=by_status.get(BedStatus.MAINTENANCE, 0),
                blocked=by_status.get(BedStatus.BLOCKED, 0),
            )
            wards.append(stats)
            overall.total_beds += stats.total_beds
            overall.occupied += stats.occupied
            overall.available += stats.available
            overall.maintenance += stats.maintenance
            overall.blocked += stats.blocked

        return {"wards": wards, "overall": overall}


# ==================== Admission Workflow ====================

class AdmissionService:
    """Service layer for admission requests, bed allocation and discharge"""

    def __init__(self, db):
        self.db = db
        self.directory = DirectoryService(db)
        self.request_repo = AdmissionRequestRepository(db)
        self.admission_repo = AdmissionRepository(db)
        self.bed_repo = BedRepository(db)
        self.ledger_repo = LedgerRepository(db)

    def create_request(
        self,
        patient_id: str,
        doctor_id: str,
        urgency: Urgency = Urgency.NORMAL,
        ward_type: Optional[str] = None,
        bed_type: Optional[str] = None,
        estimated_stay: Optional[int] = None,
        diagnosis: Optional[str] = None,
        chief_complaint: Optional[str] = None,
        notes: Optional[str] = None
    ) -> RequestUpdate:
        self.directory.get_patient(patient_id)
        self.directory.get_doctor(doctor_id)
        if estimated_stay is not None:
            _require_positive("estimated_stay", estimated_stay)

        with transaction(self.db, "create admission request"):
            request = self.request_repo.create({
                "patient_id": patient_id,
                "doctor_id": doctor_id,
                "urgency": urgency,
                "ward_type": ward_type,
                "bed_type": bed_type,
                "estimated_stay": estimated_stay,
                "diagnosis": diagnosis,
                "chief_complaint": chief_complaint,
                "notes": notes,
                "status": AdmissionRequestStatus.PENDING,
            })

        logger.info("Admission request %s created for patient %s", request.id, patient_id)
        return RequestUpdate(request=request, changed=[_change("admission_request", request)])

    def get_request(self, request_id: str) -> AdmissionRequest:
        request = self.request_repo.get_by_id(request_id)
        if not request:
            raise NotFoundError("Admission request not found", details={"request_id": request_id})
        return request

    def list_requests(
        self,
        status: Optional[AdmissionRequestStatus] = None,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[AdmissionRequest]:
        return self.request_repo.get_all(
            status=status, doctor_id=doctor_id, patient_id=patient_id, skip=skip, limit=limit
        )

    def set_status(
        self,
        request_id: str,
        new_status: AdmissionRequestStatus,
        processed_by: Optional[str] = None,
        reason: Optional[str] = None
    ) -> RequestUpdate:
        """
        Apply a plain status change to an admission request.

        Only the edges in ``workflow.STATUS_TRANSITIONS`` are accepted;
        CONVERTED is reachable through ``allocate_bed`` alone.
        """
        new_status = AdmissionRequestStatus(new_status)
        with transaction(self.db, "update admission request status"):
            request = self.request_repo.get_for_update(request_id)
            if not request:
                raise NotFoundError("Admission request not found", details={"request_id": request_id})
            previous = request.status
            ensure_transition(previous, new_status)

            request.status = new_status
            request.processed_at = utcnow()
            if processed_by:
                request.processed_by = processed_by
            if new_status == AdmissionRequestStatus.REJECTED:
                request.rejection_reason = reason

        logger.info(
            "Admission request %s: %s -> %s", request.id, previous.value, new_status.value
        )
        return RequestUpdate(request=request, changed=[_change("admission_request", request)])

    def record_deposit(
        self,
        request_id: str,
        amount,
        method: PaymentMethod = PaymentMethod.CASH,
        processed_by: Optional[str] = None
    ) -> RequestUpdate:
        """Capture the advance deposit; moves AWAITING_DEPOSIT to DEPOSIT_PAID"""
        amount = to_money(amount)
        _require_positive("amount", amount)

        with transaction(self.db, "record deposit"):
            request = self.request_repo.get_for_update(request_id)
            if not request:
                raise NotFoundError("Admission request not found", details={"request_id": request_id})
            ensure_transition(request.status, AdmissionRequestStatus.DEPOSIT_PAID)

            request.deposit_amount = amount
            request.deposit_method = PaymentMethod(method)
            request.status = AdmissionRequestStatus.DEPOSIT_PAID
            request.processed_at = utcnow()
            if processed_by:
                request.processed_by = processed_by

        logger.info("Deposit of %s%s recorded on admission request %s",
                    settings.CURRENCY_SYMBOL, amount, request.id)
        return RequestUpdate(request=request, changed=[_change("admission_request", request)])

    def allocate_bed(self, request_id: str, bed_id: str, admitted_by: str) -> Allocation:
        """
        Convert a DEPOSIT_PAID request into an active admission on a bed.

        Runs as one transaction with the request and bed rows locked: the
        admission is created, the bed becomes OCCUPIED, the request becomes
        CONVERTED and any recorded deposit is carried into the new ledger.
        Nothing is written if any step fails.
        """
        with transaction(self.db, "allocate bed"):
            request = self.request_repo.get_for_update(request_id)
            if not request:
                raise NotFoundError("Admission request not found", details={"request_id": request_id})
            ensure_allocatable(request.status)

            bed = self.bed_repo.get_for_update(bed_id)
            if not bed:
                raise NotFoundError("Bed not found", details={"bed_id": bed_id})
            if bed.status != BedStatus.AVAILABLE or not bed.is_active:
                logger.warning("Bed %s is %s, allocation refused", bed.bed_number, bed.status.value)
                raise BedUnavailableError(
                    f"Bed {bed.bed_number} is {bed.status.value}",
                    details={"bed_id": bed_id, "status": bed.status.value}
                )
            self.directory.get_staff(admitted_by)

            now = utcnow()
            admission = self.admission_repo.create({
                "patient_id": request.patient_id,
                "bed_id": bed.id,
                "doctor_id": request.doctor_id,
                "admitted_by": admitted_by,
                "admission_request_id": request.id,
                "admitted_at": now,
                "diagnosis": request.diagnosis,
                "chief_complaint": request.chief_complaint,
                "estimated_stay": request.estimated_stay,
                "status": AdmissionStatus.ACTIVE,
            })

            bed.status = BedStatus.OCCUPIED
            request.status = AdmissionRequestStatus.CONVERTED
            request.admission_id = admission.id
            request.processed_at = now
            request.processed_by = admitted_by

            changed = [
                _change("admission", admission),
                _change("bed", bed),
                _change("admission_request", request),
                EntityChange("ward", bed.ward_id),
            ]
            if request.deposit_amount and request.deposit_amount > 0:
                self.ledger_repo.add({
                    "admission_id": admission.id,
                    "patient_id": admission.patient_id,
                    "type": TransactionType.DEPOSIT,
                    "amount": to_money(request.deposit_amount),
                    "payment_method": request.deposit_method,
                    "description": "Advance deposit at admission",
                    "reference": f"REQ:{request.id}",
                    "processed_by": admitted_by,
                    "processed_at": now,
                })
                changed.append(EntityChange("ledger", admission.id))

        logger.info(
            "Admission %s created: request %s converted, bed %s occupied",
            admission.id, request.id, bed.bed_number
        )
        return Allocation(admission=admission, bed=bed, request=request, changed=changed)

    def get_admission(self, admission_id: str) -> Admission:
        admission = self.admission_repo.get_by_id(admission_id)
        if not admission:
            raise NotFoundError("Admission not found", details={"admission_id": admission_id})
        return admission

    def list_admissions(
        self,
        status: Optional[AdmissionStatus] = None,
        patient_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Admission]:
        return self.admission_repo.get_all(status=status, patient_id=patient_id, skip=skip, limit=limit)

    def discharge(
        self,
        admission_id: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Discharge:
        """
        Discharge an active admission and free its bed.

        Outstanding bed days up to the discharge time are posted first.
        """
        now = now or utcnow()
        ledger = LedgerService(self.db)

        with transaction(self.db, "discharge admission"):
            admission = self.admission_repo.get_for_update(admission_id)
            if not admission:
                raise NotFoundError("Admission not found", details={"admission_id": admission_id})
            if admission.status != AdmissionStatus.ACTIVE:
                raise InactiveAdmissionError(
                    "Admission is already discharged",
                    details={"admission_id": admission_id, "status": admission.status.value}
                )

            bed_charges = ledger.post_missing_bed_days(admission, now)

            bed = self.bed_repo.get_for_update(admission.bed_id)
            admission.status = AdmissionStatus.DISCHARGED
            admission.discharged_at = now
            admission.discharge_notes = notes
            bed.status = BedStatus.AVAILABLE

        logger.info("Admission %s discharged, bed %s released", admission.id, bed.bed_number)
        changed = [_change("admission", admission), _change("bed", bed), EntityChange("ward", bed.ward_id)]
        if bed_charges:
            changed.append(EntityChange("ledger", admission.id))
        return Discharge(admission=admission, bed=bed, bed_charges=bed_charges, changed=changed)


# ==================== Ledger & Billing ====================

class LedgerService:
    """Service layer for admission ledger postings and final billing"""

    def __init__(self, db):
        self.db = db
        self.admission_repo = AdmissionRepository(db)
        self.ledger_repo = LedgerRepository(db)
        self.bill_repo = BillRepository(db)

    def _get_admission(self, admission_id: str, lock: bool = False) -> Admission:
        if lock:
            admission = self.admission_repo.get_for_update(admission_id)
        else:
            admission = self.admission_repo.get_by_id(admission_id)
        if not admission:
            raise NotFoundError("Admission not found", details={"admission_id": admission_id})
        return admission

    def post_missing_bed_days(self, admission: Admission, now: datetime) -> List[LedgerTransaction]:
        """
        Post one daily bed charge for every elapsed bed day not yet charged.

        Day N covers ``admitted_at + (N-1) days`` up to the next day; a
        started day counts as a full day and the first day is always
        chargeable. Must be called inside an open transaction.
        """
        rate = to_money(admission.bed.bed_type.daily_rate)
        if rate <= 0:
            return []

        elapsed = (now - admission.admitted_at) / ONE_DAY
        days = max(1, math.ceil(elapsed))
        charged = self.ledger_repo.get_charged_days(admission.id)
        admitted_on = admission.admitted_at.date()

        posted = []
        for day in range(1, days + 1):
            if day in charged:
                continue
            service_date = admitted_on + timedelta(days=day - 1)
            posted.append(self.ledger_repo.add({
                "admission_id": admission.id,
                "patient_id": admission.patient_id,
                "type": TransactionType.CHARGE,
                "amount": rate,
                "description": f"BED_DAILY {service_date.isoformat()} @ {settings.CURRENCY_SYMBOL}{rate}",
                "reference": BED_DAILY_REFERENCE,
                "item_type": ChargeItemType.BED,
                "item_name": admission.bed.bed_type.name,
                "quantity": 1,
                "unit_price": rate,
                "charge_day": day,
                "service_date": service_date,
                "processed_at": now,
            }))
        return posted

    def post_bed_charge(self, admission_id: str, now: Optional[datetime] = None) -> LedgerPosting:
        """
        Post the daily bed charge for an active admission.

        Idempotent per bed day: calling it again on the same day posts
        nothing, and days missed by earlier runs are caught up.
        """
        now = now or utcnow()
        with transaction(self.db, "post bed charge"):
            admission = self._get_admission(admission_id, lock=True)
            if admission.status != AdmissionStatus.ACTIVE:
                logger.warning("Bed charge refused for %s admission %s", admission.status.value, admission_id)
                raise InactiveAdmissionError(
                    "Bed charges can only be posted for active admissions",
                    details={"admission_id": admission_id, "status": admission.status.value}
                )
            posted = self.post_missing_bed_days(admission, now)

        if posted:
            logger.info("Posted %d bed day charge(s) on admission %s", len(posted), admission_id)
        changed = [EntityChange("ledger", admission_id)] if posted else []
        return LedgerPosting(admission_id=admission_id, transactions=posted, changed=changed)

    def post_bed_charges_for_active(self, now: Optional[datetime] = None) -> List[LedgerPosting]:
        """Run the daily bed charge for every active admission"""
        now = now or utcnow()
        postings = []
        for admission in self.admission_repo.get_active():
            postings.append(self.post_bed_charge(admission.id, now=now))
        total = sum(len(p.transactions) for p in postings)
        logger.info("Bed charge run: %d admission(s), %d charge(s) posted", len(postings), total)
        return postings

    def add_charge(
        self,
        admission_id: str,
        item_type: ChargeItemType,
        item_name: str,
        quantity: int,
        unit_price,
        tax_rate=0,
        description: Optional[str] = None,
        processed_by: Optional[str] = None
    ) -> LedgerPosting:
        """Append an itemised CHARGE of quantity x unit price"""
        _require_positive("quantity", quantity)
        unit_price = to_money(unit_price)
        _require_positive("unit_price", unit_price)
        item_type = ChargeItemType(item_type)

        with transaction(self.db, "add charge"):
            admission = self._get_admission(admission_id)
            txn = self.ledger_repo.add({
                "admission_id": admission.id,
                "patient_id": admission.patient_id,
                "type": TransactionType.CHARGE,
                "amount": to_money(unit_price * quantity),
                "description": description or f"{item_type.value}: {item_name} x{quantity}",
                "item_type": item_type,
                "item_name": item_name,
                "quantity": quantity,
                "unit_price": unit_price,
                "tax_rate": Decimal(str(tax_rate or 0)),
                "processed_by": processed_by,
            })

        logger.info("Charge %s%s added to admission %s", settings.CURRENCY_SYMBOL, txn.amount, admission_id)
        return LedgerPosting(
            admission_id=admission_id, transactions=[txn], changed=[EntityChange("ledger", admission_id)]
        )

    def record_payment(
        self,
        admission_id: str,
        transaction_type: TransactionType,
        amount,
        method: Optional[PaymentMethod] = None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        processed_by: Optional[str] = None
    ) -> LedgerPosting:
        """Record a deposit, payment, refund or adjustment"""
        transaction_type = TransactionType(transaction_type)
        if transaction_type == TransactionType.CHARGE:
            raise InvalidInputError(
                "Use add_charge to post charges", details={"type": transaction_type.value}
            )
        amount = to_money(amount)
        _require_positive("amount", amount)

        with transaction(self.db, "record payment"):
            admission = self._get_admission(admission_id)
            txn = self.ledger_repo.add({
                "admission_id": admission.id,
                "patient_id": admission.patient_id,
                "type": transaction_type,
                "amount": amount,
                "payment_method": PaymentMethod(method) if method else None,
                "description": description or transaction_type.value.title(),
                "reference": reference,
                "processed_by": processed_by,
            })

        logger.info("%s of %s%s recorded on admission %s",
                    transaction_type.value, settings.CURRENCY_SYMBOL, amount, admission_id)
        return LedgerPosting(
            admission_id=admission_id, transactions=[txn], changed=[EntityChange("ledger", admission_id)]
        )

    def get_transactions(self, admission_id: str) -> List[LedgerTransaction]:
        self._get_admission(admission_id)
        return self.ledger_repo.get_for_admission(admission_id)

    def get_ledger_summary(self, admission_id: str) -> LedgerSummary:
        return summarize_ledger(self.get_transactions(admission_id))

    def finalize_admission(self, admission_id: str, generated_by: Optional[str] = None) -> Bill:
        """Generate the final bill from the ledger summary"""
        admission = self._get_admission(admission_id)
        if self.bill_repo.get_by_admission(admission_id):
            raise ConflictError("Final bill already generated", details={"admission_id": admission_id})

        summary = self.get_ledger_summary(admission_id)
        billable = summary.total_charges - summary.total_adjustments
        if summary.net_due == ZERO:
            payment_status = PaymentStatus.PAID
        elif summary.total_paid > 0:
            payment_status = PaymentStatus.PARTIAL
        else:
            payment_status = PaymentStatus.PENDING

        with transaction(self.db, "finalize admission"):
            bill_number = f"FINAL-{utcnow().strftime('%Y%m%d')}-{str(self.bill_repo.count() + 1).zfill(4)}"
            bill = self.bill_repo.create(
                {
                    "bill_number": bill_number,
                    "patient_id": admission.patient_id,
                    "admission_id": admission.id,
                    "total_amount": billable,
                    "paid_amount": summary.total_paid,
                    "pending_amount": summary.net_due,
                    "payment_status": payment_status,
                    "generated_by": generated_by,
                },
                [
                    {
                        "description": "IPD Admission Charges (ledger summary)",
                        "quantity": 1,
                        "unit_price": billable,
                        "total_price": billable,
                    }
                ],
            )

        logger.info("Final bill %s generated for admission %s (%s)",
                    bill.bill_number, admission_id, payment_status.value)
        return bill
