"""Account repository."""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gym_billing.models.accounting.account import Account
from gym_billing.models.base import AccountType
from gym_billing.repositories.base.base_repository import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for bank and cash accounts."""

    def __init__(self, session: Session):
        super().__init__(Account, session)

    def list_for_gym(self, gym_id: int, active_only: bool = False) -> List[Account]:
        stmt = select(Account).where(Account.gym_id == gym_id)
        if active_only:
            stmt = stmt.where(Account.is_active.is_(True))
        stmt = stmt.order_by(Account.account_type, Account.account_name, Account.id)
        return list(self.db.scalars(stmt))

    def find_default(self, gym_id: int, account_type: AccountType) -> Optional[Account]:
        stmt = select(Account).where(
            Account.gym_id == gym_id,
            Account.account_type == account_type,
            Account.is_default.is_(True),
        )
        return self.db.scalars(stmt).first()

    def clear_default(
        self,
        gym_id: int,
        account_type: AccountType,
        except_id: Optional[int] = None,
    ) -> None:
        """Drop the default flag from every account of ``account_type`` but one."""
        stmt = (
            update(Account)
            .where(
                Account.gym_id == gym_id,
                Account.account_type == account_type,
                Account.is_default.is_(True),
            )
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        if except_id is not None:
            stmt = stmt.where(Account.id != except_id)
        self.db.execute(stmt)
