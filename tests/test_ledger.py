import pytest
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

from hospital_core.core.exceptions import (
    InvalidInputError, InactiveAdmissionError, NotFoundError, ConflictError
)
from hospital_core.domain.billing.models import PaymentStatus
from hospital_core.domain.ipd.ledger import summarize_ledger
from hospital_core.domain.ipd.models import (
    TransactionType, ChargeItemType, PaymentMethod, BED_DAILY_REFERENCE
)


def entry(kind, amount):
    return SimpleNamespace(type=kind, amount=Decimal(amount))


@pytest.mark.unit
@pytest.mark.ledger
class TestLedgerSummary:
    """Test the ledger fold"""

    def test_empty_ledger(self):
        summary = summarize_ledger([])
        assert summary.total_charges == Decimal("0.00")
        assert summary.balance == Decimal("0.00")
        assert summary.net_due == Decimal("0.00")

    def test_charges_minus_payments(self):
        summary = summarize_ledger([
            entry(TransactionType.CHARGE, "1500.00"),
            entry(TransactionType.CHARGE, "0.10"),
            entry(TransactionType.CHARGE, "0.20"),
            entry(TransactionType.PAYMENT, "700.15"),
        ])
        assert summary.balance == Decimal("800.15")
        assert summary.net_due == Decimal("800.15")

    def test_all_transaction_types(self):
        summary = summarize_ledger([
            entry(TransactionType.CHARGE, "3000"),
            entry(TransactionType.DEPOSIT, "1000"),
            entry(TransactionType.PAYMENT, "500"),
            entry(TransactionType.REFUND, "200"),
            entry(TransactionType.ADJUSTMENT, "300"),
        ])
        assert summary.total_paid == Decimal("1300.00")
        assert summary.balance == Decimal("1400.00")
        assert summary.net_due == Decimal("1400.00")

    def test_overpayment_has_no_net_due(self):
        summary = summarize_ledger([
            entry(TransactionType.CHARGE, "1000"),
            entry(TransactionType.DEPOSIT, "5000"),
        ])
        assert summary.balance == Decimal("-4000.00")
        assert summary.net_due == Decimal("0.00")

    def test_accepts_string_types(self):
        summary = summarize_ledger([SimpleNamespace(type="CHARGE", amount="12.5")])
        assert summary.total_charges == Decimal("12.50")


@pytest.mark.ledger
@pytest.mark.integration
class TestBedCharges:
    """Test automatic daily bed charges"""

    def test_first_day_is_charged(self, ledger_service, active_admission):
        posting = ledger_service.post_bed_charge(active_admission.id)

        assert len(posting.transactions) == 1
        txn = posting.transactions[0]
        assert txn.type == TransactionType.CHARGE
        assert txn.amount == Decimal("1500.00")
        assert txn.reference == BED_DAILY_REFERENCE
        assert txn.charge_day == 1
        assert txn.service_date == active_admission.admitted_at.date()
        assert txn.description.startswith("BED_DAILY ")
        assert [(c.kind, c.id) for c in posting.changed] == [("ledger", active_admission.id)]

    def test_same_day_is_not_charged_twice(self, ledger_service, active_admission):
        ledger_service.post_bed_charge(active_admission.id)
        posting = ledger_service.post_bed_charge(active_admission.id)

        assert posting.transactions == []
        assert posting.changed == []
        assert ledger_service.get_ledger_summary(active_admission.id).total_charges == Decimal("1500.00")

    def test_missed_days_are_caught_up(self, ledger_service, active_admission):
        """Test that a later run posts every uncharged day once"""
        ledger_service.post_bed_charge(active_admission.id)
        later = active_admission.admitted_at + timedelta(days=2, hours=1)

        posting = ledger_service.post_bed_charge(active_admission.id, now=later)
        assert [t.charge_day for t in posting.transactions] == [2, 3]

        again = ledger_service.post_bed_charge(active_admission.id, now=later)
        assert again.transactions == []
        assert ledger_service.get_ledger_summary(active_admission.id).total_charges == Decimal("4500.00")

    def test_exact_day_boundary(self, ledger_service, active_admission):
        now = active_admission.admitted_at + timedelta(days=2)
        posting = ledger_service.post_bed_charge(active_admission.id, now=now)
        assert [t.charge_day for t in posting.transactions] == [1, 2]

    def test_zero_rate_posts_nothing(self, ledger_service, db_session, active_admission, bed_type):
        bed_type.daily_rate = Decimal("0")
        db_session.commit()

        posting = ledger_service.post_bed_charge(active_admission.id)
        assert posting.transactions == []

    def test_discharged_admission_is_refused(self, ledger_service, admission_service, active_admission):
        admission_service.discharge(active_admission.id)
        with pytest.raises(InactiveAdmissionError):
            ledger_service.post_bed_charge(active_admission.id)

    def test_unknown_admission(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.post_bed_charge("missing")

    def test_run_for_all_active(self, ledger_service, active_admission):
        postings = ledger_service.post_bed_charges_for_active()
        assert [p.admission_id for p in postings] == [active_admission.id]
        assert len(postings[0].transactions) == 1


@pytest.mark.ledger
@pytest.mark.integration
class TestManualPostings:
    """Test itemised charges and payments"""

    def test_add_charge(self, ledger_service, active_admission):
        posting = ledger_service.add_charge(
            active_admission.id,
            item_type=ChargeItemType.MEDICINE,
            item_name="Ceftriaxone 1g",
            quantity=3,
            unit_price=Decimal("120.50"),
            tax_rate=Decimal("12"),
        )
        txn = posting.transactions[0]
        assert txn.type == TransactionType.CHARGE
        assert txn.amount == Decimal("361.50")
        assert txn.quantity == 3
        assert txn.tax_rate == Decimal("12")

    @pytest.mark.parametrize("quantity,unit_price", [
        (0, Decimal("10")),
        (-1, Decimal("10")),
        (1, Decimal("0")),
        (1, Decimal("-5")),
    ])
    def test_add_charge_rejects_non_positive_values(self, ledger_service, active_admission, quantity, unit_price):
        with pytest.raises(InvalidInputError):
            ledger_service.add_charge(
                active_admission.id, ChargeItemType.LAB, "CBC", quantity, unit_price
            )

    def test_add_charge_unknown_admission(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.add_charge("missing", ChargeItemType.LAB, "CBC", 1, Decimal("300"))

    def test_record_payment(self, ledger_service, active_admission):
        posting = ledger_service.record_payment(
            active_admission.id, TransactionType.PAYMENT, Decimal("1000"), method=PaymentMethod.CASH
        )
        assert posting.transactions[0].type == TransactionType.PAYMENT
        assert posting.transactions[0].amount == Decimal("1000.00")

    def test_record_payment_rejects_charge_type(self, ledger_service, active_admission):
        with pytest.raises(InvalidInputError):
            ledger_service.record_payment(active_admission.id, TransactionType.CHARGE, Decimal("100"))

    def test_record_payment_rejects_zero(self, ledger_service, active_admission):
        with pytest.raises(InvalidInputError):
            ledger_service.record_payment(active_admission.id, TransactionType.REFUND, Decimal("0"))

    def test_summary_after_postings(self, ledger_service, active_admission):
        """Test totals across the deposit carried over at admission and later postings"""
        ledger_service.post_bed_charge(active_admission.id)
        ledger_service.add_charge(active_admission.id, ChargeItemType.LAB, "CBC", 1, Decimal("400"))
        ledger_service.record_payment(active_admission.id, TransactionType.PAYMENT, Decimal("1000"))

        summary = ledger_service.get_ledger_summary(active_admission.id)
        assert summary.total_charges == Decimal("1900.00")
        assert summary.total_deposits == Decimal("5000.00")
        assert summary.total_payments == Decimal("1000.00")
        assert summary.balance == Decimal("-4100.00")
        assert summary.net_due == Decimal("0.00")


@pytest.mark.ledger
@pytest.mark.integration
class TestFinalBill:
    """Test final bill generation"""

    def test_finalize_paid_admission(self, ledger_service, active_admission):
        ledger_service.post_bed_charge(active_admission.id)
        bill = ledger_service.finalize_admission(active_admission.id)

        assert bill.bill_number.startswith("FINAL-")
        assert bill.payment_status == PaymentStatus.PAID
        assert bill.total_amount == Decimal("1500.00")
        assert bill.pending_amount == Decimal("0.00")
        assert len(bill.items) == 1
        assert bill.items[0].description == "IPD Admission Charges (ledger summary)"

    def test_finalize_partially_paid(self, ledger_service, active_admission):
        ledger_service.add_charge(active_admission.id, ChargeItemType.PROCEDURE, "Bronchoscopy", 1, Decimal("8000"))
        bill = ledger_service.finalize_admission(active_admission.id)

        assert bill.payment_status == PaymentStatus.PARTIAL
        assert bill.pending_amount == Decimal("3000.00")

    def test_finalize_twice(self, ledger_service, active_admission):
        ledger_service.finalize_admission(active_admission.id)
        with pytest.raises(ConflictError):
            ledger_service.finalize_admission(active_admission.id)
