from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from inventory_ledger.database import Base


class OutflowRecord(Base):
    """
    Append-only record of stock withdrawn from a product.

    product_name is a snapshot taken when the outflow was recorded, so
    renaming the product later does not rewrite history.
    """
    __tablename__ = "outflow_records"

    id = Column(Integer, primary_key=True, index=True)
    product_code = Column(String(100), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    owner_email = Column(String(255), nullable=False, index=True)
    recorded_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<OutflowRecord(id={self.id}, product_code='{self.product_code}', quantity={self.quantity})>"
