import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from streamgate.db.session import storage_guard
from streamgate.models.account import Account

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: str) -> Account | None:
        with storage_guard():
            return self.db.query(Account).filter(Account.id == account_id).one_or_none()

    def get_or_create(self, account_id: str, email: str | None = None) -> Account:
        """
        Accounts are created on first authenticated request. is_admin is never
        touched here; email is refreshed when the provider reports a new one.
        """
        account = self.get(account_id)
        if account:
            if email is not None and account.email != email:
                account.email = email
                with storage_guard():
                    self.db.add(account)
                    self.db.commit()
                    self.db.refresh(account)
            return account
        account = Account(id=account_id, email=email, is_admin=False)
        self.db.add(account)
        try:
            with storage_guard():
                self.db.commit()
        except IntegrityError:
            # parallel first request created it
            self.db.rollback()
            existing = self.get(account_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(account)
        logger.info("account_created", extra={"account_id": account_id})
        return account
