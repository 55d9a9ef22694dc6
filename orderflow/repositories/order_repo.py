# orderflow/repositories/order_repo.py
from datetime import datetime

from sqlalchemy import update
from sqlmodel import Session, select

from orderflow.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; order creation and status changes are
        transactions owned by OrderService.
      - Listings are newest first (created_at DESC, id DESC as tie-break).
    """

    # ---- Orders ----

    def get_by_id(
        self,
        session: Session,
        order_id: int,
        refresh: bool = False,
    ) -> Order | None:
        return session.get(Order, order_id, populate_existing=refresh)

    def list_all(self, session: Session) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        return session.exec(stmt).all()

    def list_for_customer(self, session: Session, customer_id: int) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return session.exec(stmt).all()

    def list_with_status(self, session: Session, statuses: list[str]) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.status.in_(statuses))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return session.exec(stmt).all()

    def list_for_driver(
        self,
        session: Session,
        driver_id: int,
        status: str,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.driver_id == driver_id)
            .where(Order.status == status)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return session.exec(stmt).all()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def compare_and_set_status(
        self,
        session: Session,
        order_id: int,
        expected_status: str,
        new_status: str,
        updated_at: datetime,
        driver_id: int | None = None,
    ) -> bool:
        """
        Move the order to `new_status` only if it is still in `expected_status`.

        Returns False if another transaction changed the status first.
        `driver_id` is written only when given.
        """
        values: dict = {"status": new_status, "updated_at": updated_at}
        if driver_id is not None:
            values["driver_id"] = driver_id

        stmt = (
            update(Order)
            .where(Order.id == order_id)
            .where(Order.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    # ---- Order items ----

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[int],
    ) -> dict[int, list[OrderItem]]:
        """
        Items grouped by order id, each group in insertion order.
        """
        grouped: dict[int, list[OrderItem]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return grouped
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.order_id, OrderItem.id)
        )
        for item in session.exec(stmt).all():
            grouped[item.order_id].append(item)
        return grouped

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items
