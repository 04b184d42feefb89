from sqlalchemy.orm import Session
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List, Tuple
import logging

from inventory_ledger.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    StorageUnavailableError,
)
from inventory_ledger.database import storage_errors
from inventory_ledger.models.outflow import OutflowRecord
from inventory_ledger.models.product import Product

logger = logging.getLogger(__name__)


class OutflowService:
    """
    Service class for recording stock outflows.

    STOCK CONSISTENCY STRATEGY:
    ===========================
    Reading the product, checking its stock and then decrementing it in
    separate statements lets two concurrent requests both pass the check and
    drive stock negative. The decrement is therefore a conditional update:

        UPDATE products SET stock = stock - :quantity
        WHERE product_code = :code AND stock >= :quantity

    If another request consumed the stock between our read and our write, the
    UPDATE affects 0 rows and the outflow is rejected. The decrement and the
    history row are committed in the same transaction, so callers never see
    one without the other.
    """

    def __init__(self, db: Session, owner_scoped: bool = False):
        self.db = db
        self.owner_scoped = owner_scoped

    def record_outflow(
        self,
        product_code: str,
        quantity: int,
        owner_email: str,
    ) -> Tuple[OutflowRecord, int]:
        """
        Withdraw stock from a product and append it to the outflow history.

        Algorithm:
        1. Look up the product by code (and owner when owner_scoped)
        2. Reject if the stock on hand is lower than quantity
        3. Conditionally decrement stock, rejecting if 0 rows changed
        4. Insert the history row with the product name snapshot
        5. Read back the record and remaining stock, then commit both writes together

        Args:
            product_code: Code of the product to withdraw from
            quantity: Units withdrawn (positive)
            owner_email: Email of the user recording the outflow

        Returns:
            Tuple of (created outflow record, stock left on the product)

        Raises:
            ProductNotFoundError: If no matching product exists
            InsufficientStockError: If quantity exceeds the stock on hand
            StorageUnavailableError: If the database read or write fails
        """
        try:
            product = self._get_product(product_code, owner_email)

            if not product:
                raise ProductNotFoundError(f"Product '{product_code}' not found")

            if product.stock < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock. Available: {product.stock}, Requested: {quantity}"
                )

            result = self.db.execute(
                update(Product)
                .where(Product.product_code == product_code)
                .where(Product.stock >= quantity)
                .values(stock=Product.stock - quantity)
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                raise InsufficientStockError(
                    f"Insufficient stock or concurrent modification for product '{product_code}'"
                )

            outflow = OutflowRecord(
                product_code=product_code,
                product_name=product.name,
                quantity=quantity,
                owner_email=owner_email,
            )
            self.db.add(outflow)
            self.db.flush()
            self.db.refresh(outflow)
            remaining = (
                self.db.query(Product.stock)
                .filter(Product.product_code == product_code)
                .scalar()
            )

            # Nothing may touch the database once the commit succeeds
            self.db.expunge(outflow)
            self.db.commit()

        except (ProductNotFoundError, InsufficientStockError) as e:
            self.db.rollback()
            logger.warning(f"Outflow rejected for '{product_code}': {e}")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Error recording outflow for '{product_code}'")
            raise StorageUnavailableError("Storage failure while recording outflow") from e

        logger.info(
            f"Outflow #{outflow.id} recorded: {quantity} x '{product_code}' by {owner_email}, "
            f"{remaining} left"
        )
        return outflow, remaining

    def _get_product(self, product_code: str, owner_email: str) -> Optional[Product]:
        query = self.db.query(Product).filter(Product.product_code == product_code)
        if self.owner_scoped:
            query = query.filter(Product.owner_email == owner_email)
        return query.first()

    def list_for_owner(self, owner_email: str) -> List[OutflowRecord]:
        """Outflows recorded by owner_email, newest first."""
        with storage_errors(self.db, "listing outflow history"):
            return (
                self.db.query(OutflowRecord)
                .filter(OutflowRecord.owner_email == owner_email)
                .order_by(OutflowRecord.recorded_at.desc(), OutflowRecord.id.desc())
                .all()
            )

    def list_all(self) -> List[OutflowRecord]:
        """Every outflow, newest first."""
        with storage_errors(self.db, "listing all outflows"):
            return (
                self.db.query(OutflowRecord)
                .order_by(OutflowRecord.recorded_at.desc(), OutflowRecord.id.desc())
                .all()
            )
