# orderflow/services/catalog_service.py
import logging

from sqlmodel import Session

from orderflow.core.errors import InsufficientStockError, NotFoundError
from orderflow.models.product import CatalogItem
from orderflow.repositories.catalog_repo import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read-only catalog access plus the stock decrement used by order creation.

    Responsibilities:
      - list items customers can order (stock > 0)
      - price lookup
      - stock decrement with a floor check (never below zero)
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def list_available(self, session: Session) -> list[CatalogItem]:
        """
        Items with positive stock, ordered by category then name
        (English fields, whatever the display locale).
        """
        return self.repo.list_available(session)

    def decrement_stock(
        self,
        session: Session,
        item_id: int,
        quantity: int,
    ) -> CatalogItem:
        """
        Take `quantity` units of `item_id` out of stock.

        Does not commit. Returns the item as re-read after the update,
        so its price is the one seen under the row lock.

        Raises:
            NotFoundError: unknown item.
            InsufficientStockError: stock < quantity; stock is left untouched.
        """
        if self.repo.decrement_stock(session, item_id, quantity):
            return self.repo.get_by_id(session, item_id, refresh=True)

        item = self.repo.get_by_id(session, item_id, refresh=True)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found", item_id=item_id)

        logger.warning(
            "Insufficient stock for item %s: have %s, requested %s",
            item_id,
            item.stock,
            quantity,
        )
        raise InsufficientStockError(item_id, requested=quantity, available=item.stock)
