from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from inventory_ledger.database import Base


class Product(Base):
    """
    Product imported by a user.

    Attributes:
        id: Surrogate identifier
        product_code: Business key, unique across all owners
        name: Product name
        category: Optional category label
        stock: Units on hand
        owner_email: Email of the user who first imported the product
        imported_at: Timestamp of the first import
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_code = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    owner_email = Column(String(255), nullable=True, index=True)
    imported_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Product(code='{self.product_code}', name='{self.name}', stock={self.stock})>"
