"""Invoice and invoice-number repositories."""

from datetime import date
from typing import List, Optional

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.orm import Session

from gym_billing.models.base import InvoiceStatus
from gym_billing.models.billing.invoice import Invoice, InvoiceSequence
from gym_billing.repositories.base.base_repository import BaseRepository


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for invoices."""

    def __init__(self, session: Session):
        super().__init__(Invoice, session)

    def find_by_subscription(self, gym_id: int, subscription_id: int) -> Optional[Invoice]:
        stmt = select(Invoice).where(
            Invoice.gym_id == gym_id,
            Invoice.subscription_id == subscription_id,
        )
        return self.db.scalars(stmt).first()

    def search_query(
        self,
        gym_id: int,
        today: date,
        member_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> Select:
        """
        Invoices filtered by member and by status as seen on ``today``.

        An Unpaid invoice past its due date is reported as Overdue even
        before the sweep has stored that status.
        """
        stmt = select(Invoice).where(Invoice.gym_id == gym_id)
        if member_id is not None:
            stmt = stmt.where(Invoice.member_id == member_id)
        if status is InvoiceStatus.OVERDUE:
            stmt = stmt.where(
                or_(
                    Invoice.status == InvoiceStatus.OVERDUE,
                    and_(Invoice.status == InvoiceStatus.UNPAID, Invoice.due_date < today),
                )
            )
        elif status is InvoiceStatus.UNPAID:
            stmt = stmt.where(Invoice.status == InvoiceStatus.UNPAID, Invoice.due_date >= today)
        elif status is not None:
            stmt = stmt.where(Invoice.status == status)
        return stmt.order_by(Invoice.issue_date.desc(), Invoice.id.desc())

    def find_past_due_unpaid(self, gym_id: int, today: date) -> List[Invoice]:
        """Stored-Unpaid invoices whose due date has passed."""
        stmt = (
            select(Invoice)
            .where(
                Invoice.gym_id == gym_id,
                Invoice.status == InvoiceStatus.UNPAID,
                Invoice.due_date < today,
            )
            .order_by(Invoice.id)
            .with_for_update()
        )
        return list(self.db.scalars(stmt))


class InvoiceSequenceRepository(BaseRepository[InvoiceSequence]):
    """Per-gym invoice counter."""

    def __init__(self, session: Session):
        super().__init__(InvoiceSequence, session)

    def next_number(self, gym_id: int) -> int:
        """
        Reserve the next invoice number for ``gym_id``.

        The counter row stays locked until the calling transaction ends, so
        concurrent invoice creation for one gym is serialized.
        """
        stmt = select(InvoiceSequence).where(InvoiceSequence.gym_id == gym_id).with_for_update()
        sequence = self.db.scalars(stmt).first()
        if sequence is None:
            sequence = InvoiceSequence(gym_id=gym_id, last_number=0)
            self.db.add(sequence)
        sequence.last_number += 1
        self.db.flush()
        return sequence.last_number
