# orderflow/repositories/catalog_repo.py
from sqlalchemy import update
from sqlmodel import Session, select

from orderflow.models.product import CatalogItem


class CatalogRepository:
    """
    Data access layer for CatalogItem.

    - Pure DB operations (queries + the stock counter update).
    - No commits: stock changes are part of the caller's transaction.
    """

    def get_by_id(
        self,
        session: Session,
        item_id: int,
        refresh: bool = False,
    ) -> CatalogItem | None:
        """
        Return an item by primary key.

        refresh=True bypasses the session identity map so the row is
        re-read after an UPDATE issued in the same transaction.
        """
        return session.get(CatalogItem, item_id, populate_existing=refresh)

    def list_all(self, session: Session) -> list[CatalogItem]:
        return session.exec(select(CatalogItem)).all()

    def list_available(self, session: Session) -> list[CatalogItem]:
        stmt = (
            select(CatalogItem)
            .where(CatalogItem.stock > 0)
            .order_by(CatalogItem.category_en, CatalogItem.name_en, CatalogItem.id)
        )
        return session.exec(stmt).all()

    def decrement_stock(self, session: Session, item_id: int, quantity: int) -> bool:
        """
        Atomically take `quantity` units off the stock counter.

        Single conditional UPDATE, so the floor check and the write happen
        under the same row lock. Returns False when no row matched
        (unknown id or not enough stock).
        """
        stmt = (
            update(CatalogItem)
            .where(CatalogItem.id == item_id)
            .where(CatalogItem.stock >= quantity)
            .values(stock=CatalogItem.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    def create(self, session: Session, item: CatalogItem) -> CatalogItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item
