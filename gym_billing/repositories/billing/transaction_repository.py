"""Payment transaction repository."""

from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gym_billing.models.billing.transaction import Transaction
from gym_billing.repositories.base.base_repository import BaseRepository
from gym_billing.utils.money import to_money


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for payments received against invoices."""

    def __init__(self, session: Session):
        super().__init__(Transaction, session)

    def total_paid(self, invoice_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.invoice_id == invoice_id
        )
        return to_money(self.db.scalar(stmt))

    def list_for_invoice(self, invoice_id: int) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.invoice_id == invoice_id)
            .order_by(Transaction.paid_at, Transaction.id)
        )
        return list(self.db.scalars(stmt))

    def count_for_invoice(self, invoice_id: int) -> int:
        stmt = select(func.count(Transaction.id)).where(Transaction.invoice_id == invoice_id)
        return self.db.scalar(stmt) or 0

    def total_received(self, gym_id: int, start: datetime, end: datetime) -> Decimal:
        """Sum of payments with ``start <= paid_at < end``."""
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.gym_id == gym_id,
            Transaction.paid_at >= start,
            Transaction.paid_at < end,
        )
        return to_money(self.db.scalar(stmt))
