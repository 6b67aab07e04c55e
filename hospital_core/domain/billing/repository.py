from typing import Optional, List
from sqlalchemy.orm import Session, selectinload

from hospital_core.domain.billing.models import Bill, BillItem


class BillRepository:
    """Repository for final bills"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, bill_data: dict, items: List[dict]) -> Bill:
        bill = Bill(**bill_data)
        bill.items = [BillItem(**item) for item in items]
        self.db.add(bill)
        self.db.flush()
        return bill

    def get_by_admission(self, admission_id: str) -> Optional[Bill]:
        return self.db.query(Bill).options(selectinload(Bill.items)).filter(
            Bill.admission_id == admission_id
        ).first()

    def count(self) -> int:
        return self.db.query(Bill).count()
