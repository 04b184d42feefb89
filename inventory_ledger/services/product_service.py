from sqlalchemy.orm import Session
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from inventory_ledger.database import storage_errors
from inventory_ledger.exceptions import StorageUnavailableError
from inventory_ledger.models.product import Product
from inventory_ledger.schemas.product import ProductImportItem

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for product import and listing.

    Import is an upsert keyed by product_code. A re-import replaces name and
    stock and keeps category, owner_email and imported_at from the first one.
    """

    def __init__(self, db: Session):
        self.db = db

    def import_products(self, items: List[ProductImportItem], owner_email: str) -> int:
        """
        Upsert each item, committing one item at a time.

        The batch is not atomic: when an item fails, the items before it stay
        committed. Re-running the same batch is safe.

        Args:
            items: Products to import
            owner_email: Email recorded on newly created products

        Returns:
            Number of items imported

        Raises:
            StorageUnavailableError: If an upsert fails
        """
        imported = 0
        for item in items:
            try:
                self.db.execute(self._upsert(item, owner_email))
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception(
                    f"Import failed at product '{item.product_code}' after {imported} committed"
                )
                raise StorageUnavailableError("Storage failure while importing products") from e
            imported += 1

        logger.info(f"Imported {imported} products for {owner_email}")
        return imported

    def _upsert(self, item: ProductImportItem, owner_email: str):
        """Build an INSERT ... ON CONFLICT (product_code) DO UPDATE statement."""
        if self.db.get_bind().dialect.name == "postgresql":
            insert = postgresql.insert
        else:
            insert = sqlite.insert

        stmt = insert(Product.__table__).values(
            product_code=item.product_code,
            name=item.name,
            category=item.category,
            stock=item.stock,
            owner_email=owner_email,
        )
        return stmt.on_conflict_do_update(
            index_elements=[Product.__table__.c.product_code],
            set_={"name": stmt.excluded["name"], "stock": stmt.excluded["stock"]},
        )

    def list_for_owner(self, owner_email: str) -> List[Product]:
        """Products owned by owner_email, ordered by product code."""
        with storage_errors(self.db, "listing products"):
            return (
                self.db.query(Product)
                .filter(Product.owner_email == owner_email)
                .order_by(Product.product_code.asc())
                .all()
            )

    def list_all(self) -> List[Product]:
        """Every product, most recently imported first."""
        with storage_errors(self.db, "listing all products"):
            return (
                self.db.query(Product)
                .order_by(Product.imported_at.desc(), Product.id.desc())
                .all()
            )
