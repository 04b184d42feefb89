from sqlalchemy.orm import Session
from typing import List
import logging

from inventory_ledger.database import storage_errors
from inventory_ledger.models.login_event import LoginEvent

logger = logging.getLogger(__name__)


class SessionService:
    """Writes and reads the login audit log."""

    def __init__(self, db: Session):
        self.db = db

    def record_login(self, email: str) -> LoginEvent:
        with storage_errors(self.db, "recording login"):
            event = LoginEvent(email=email)
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)

        logger.info(f"Login recorded for {email}")
        return event

    def list_logins(self) -> List[LoginEvent]:
        """All login events, newest first."""
        with storage_errors(self.db, "listing logins"):
            return (
                self.db.query(LoginEvent)
                .order_by(LoginEvent.logged_in_at.desc(), LoginEvent.id.desc())
                .all()
            )
