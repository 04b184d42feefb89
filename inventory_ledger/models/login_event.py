from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from inventory_ledger.database import Base


class LoginEvent(Base):
    """Audit row written each time a user logs in. Never updated or deleted."""
    __tablename__ = "login_events"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    logged_in_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<LoginEvent(id={self.id}, email='{self.email}')>"
