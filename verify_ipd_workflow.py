import uuid
from decimal import Decimal
import os
import sys
import traceback

# Add project root to python path
sys.path.append(os.getcwd())

from hospital_core.infrastructure.database import SessionLocal, init_db
from hospital_core.domain.directory.models import StaffRole, Gender
from hospital_core.domain.directory.service import DirectoryService
from hospital_core.domain.ipd.models import AdmissionRequestStatus, PaymentMethod, ChargeItemType, TransactionType
from hospital_core.domain.ipd.service import WardService, AdmissionService, LedgerService
from hospital_core.domain.settings.service import SettingsService


def run_workflow() -> int:
    print("Initializing database...")
    init_db()

    db = SessionLocal()

    try:
        print("\n--- 1. Setup Data ---")
        directory = DirectoryService(db)
        doctor = directory.add_staff(name="Dr. Asha Menon", role=StaffRole.DOCTOR, department="General Medicine")
        clerk = directory.add_staff(name="Admissions Desk", role=StaffRole.RECEPTIONIST)
        patient = directory.register_patient(first_name="Suresh", last_name="Pillai", gender=Gender.MALE)
        print(f"Created Doctor: {doctor.name}")
        print(f"Created Patient: {patient.patient_number}")

        wards = WardService(db)
        ward = wards.create_ward(name=f"General Ward {uuid.uuid4().hex[:4]}", capacity=10)
        bed_type = wards.create_bed_type(ward_id=ward.id, name="General", daily_rate=Decimal("1200"))
        bed = wards.create_bed(ward_id=ward.id, bed_type_id=bed_type.id, bed_number="G-01")
        print(f"Created Ward {ward.name} with bed {bed.bed_number} @ {bed_type.daily_rate}/day")

        print("\n--- 2. Session Templates ---")
        settings_service = SettingsService(db)
        hospital = settings_service.get_settings()
        for template in hospital.session_templates:
            print(f"{template.name} ({template.short_code}) {template.start_time}-{template.end_time}"
                  f" active={template.is_active}")
        print(f"First token: {settings_service.preview_token()}")

        print("\n--- 3. Admission Request ---")
        admissions = AdmissionService(db)
        request = admissions.create_request(
            patient_id=patient.id,
            doctor_id=doctor.id,
            diagnosis="Dengue fever",
            estimated_stay=3
        ).request
        print(f"Request {request.id}: {request.status.value}")

        print("\n--- 4. Approve & Deposit ---")
        admissions.set_status(request.id, AdmissionRequestStatus.AWAITING_DEPOSIT)
        request = admissions.record_deposit(request.id, Decimal("2000"), PaymentMethod.UPI).request
        print(f"Request {request.id}: {request.status.value}, deposit {request.deposit_amount}")

        print("\n--- 5. Allocate Bed ---")
        allocation = admissions.allocate_bed(request.id, bed.id, clerk.id)
        print(f"Admission {allocation.admission.id}: {allocation.admission.status.value}")
        print(f"Bed {allocation.bed.bed_number}: {allocation.bed.status.value}")
        print("Changed: " + ", ".join(f"{c.kind}:{c.id}" for c in allocation.changed))

        print("\n--- 6. Ledger ---")
        ledger = LedgerService(db)
        admission_id = allocation.admission.id
        posting = ledger.post_bed_charge(admission_id)
        print(f"Bed charges posted: {len(posting.transactions)}")
        repeat = ledger.post_bed_charge(admission_id)
        print(f"Bed charges on repeat run: {len(repeat.transactions)}")
        ledger.add_charge(admission_id, ChargeItemType.LAB, "NS1 antigen", 1, Decimal("650"))
        ledger.record_payment(admission_id, TransactionType.PAYMENT, Decimal("500"), PaymentMethod.CASH)
        summary = ledger.get_ledger_summary(admission_id)
        print(f"Charges {summary.total_charges} | Paid {summary.total_paid} | Net due {summary.net_due}")

        print("\n--- 7. Discharge & Final Bill ---")
        discharge = admissions.discharge(admission_id, notes="Platelets recovered")
        print(f"Admission {discharge.admission.status.value}, bed {discharge.bed.status.value}")
        bill = ledger.finalize_admission(admission_id, generated_by=clerk.id)
        print(f"Bill {bill.bill_number}: total {bill.total_amount}, pending {bill.pending_amount}"
              f" ({bill.payment_status.value})")

        print("\nWORKFLOW COMPLETED SUCCESSFULLY")
        return 0

    except Exception as e:
        print(f"\nWORKFLOW FAILED: {str(e)}")
        traceback.print_exc()
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(run_workflow())
