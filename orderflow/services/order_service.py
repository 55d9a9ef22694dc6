# orderflow/services/order_service.py
import logging
from decimal import Decimal

from sqlmodel import Session

from orderflow.core.config import get_settings
from orderflow.core.errors import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from orderflow.core.lifecycle import (
    DRIVER_QUEUE_STATUSES,
    INITIAL_STATUS,
    TRANSITIONS,
    OrderStatus,
    Role,
    TransitionTable,
    can_transition,
    roles_with_transitions,
)
from orderflow.models.order import Order, OrderItem, utcnow
from orderflow.repositories.order_repo import OrderRepository
from orderflow.repositories.user_repo import UserRepository
from orderflow.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderRead,
)
from orderflow.schemas.user import Actor
from orderflow.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

settings = get_settings()

CENT = Decimal("0.01")


class OrderService:
    """
    Order lifecycle: creation, role-gated status transitions, role-filtered reads.

    Every operation receives the calling Actor explicitly.

    Responsibilities:
      - Create an order and take its items out of stock in one transaction
      - Price items from the catalog (client prices/totals are ignored)
      - Enforce the transition table with a compare-and-set on status
      - Filter reads by role (customer: own orders, store: all,
        driver: work queue / own deliveries)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: CatalogService,
        user_repo: UserRepository,
        transitions: TransitionTable = TRANSITIONS,
    ):
        self.order_repo = order_repo
        self.catalog = catalog
        self.user_repo = user_repo
        self.transitions = transitions

    # -------- Creation --------

    def create_order(
        self,
        session: Session,
        actor: Actor,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Place a new order for the calling customer.

        Steps:
          1. Only role='customer' may order.
          2. Validate items and delivery address.
          3. For each item, in ascending id order (stable lock order):
             decrement stock with a floor check and read its current price.
          4. Insert the Order (status='placed') and its item snapshots.
          5. Commit. Any failure rolls back every decrement and the insert.
        """
        if actor.role != Role.CUSTOMER:
            raise AuthorizationError("Only customers can create orders")

        quantities = self._merge_items(payload.items)

        address = (payload.delivery_address or "").strip()
        if not address:
            raise ValidationError("delivery_address is required")

        payment_method = payload.payment_method or settings.DEFAULT_PAYMENT_METHOD

        try:
            prices: dict[int, Decimal] = {}
            names: dict[int, tuple[str, str]] = {}
            for item_id in sorted(quantities):
                item = self.catalog.decrement_stock(session, item_id, quantities[item_id])
                prices[item_id] = Decimal(item.price)
                names[item_id] = (item.name_en, item.name_ar)

            total = sum(
                (prices[item_id] * qty for item_id, qty in quantities.items()),
                Decimal("0"),
            ).quantize(CENT)

            if payload.total is not None and payload.total != total:
                logger.warning(
                    "Client total %s differs from computed total %s (customer %s)",
                    payload.total,
                    total,
                    actor.id,
                )

            now = utcnow()
            order = self.order_repo.create_order(
                session,
                Order(
                    customer_id=actor.id,
                    status=INITIAL_STATUS.value,
                    total=total,
                    payment_method=payment_method,
                    delivery_address=address,
                    created_at=now,
                    updated_at=now,
                ),
            )
            items = self.order_repo.create_items(
                session,
                [
                    OrderItem(
                        order_id=order.id,
                        product_id=item_id,
                        name_en=names[item_id][0],
                        name_ar=names[item_id][1],
                        quantity=qty,
                        unit_price=prices[item_id],
                    )
                    for item_id, qty in quantities.items()
                ],
            )
            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Order %s placed by customer %s (%d items, total %s)",
            order.id,
            actor.id,
            len(items),
            total,
        )
        return self._build_order_dto(
            order,
            items,
            {actor.id: actor.username},
        )

    @staticmethod
    def _merge_items(items: list[OrderItemCreate]) -> dict[int, int]:
        """
        item_id -> quantity, first-seen order kept, duplicates summed.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        merged: dict[int, int] = {}
        for line in items:
            if line.quantity < 1:
                raise ValidationError(
                    f"Quantity for item {line.id} must be a positive integer",
                    item_id=line.id,
                )
            merged[line.id] = merged.get(line.id, 0) + line.quantity
            if merged[line.id] > settings.MAX_ITEM_QUANTITY:
                raise ValidationError(
                    f"Quantity for item {line.id} exceeds {settings.MAX_ITEM_QUANTITY}",
                    item_id=line.id,
                )
        return merged

    # -------- Transitions --------

    def transition_status(
        self,
        session: Session,
        actor: Actor,
        order_id: int,
        target_status: OrderStatus | str,
    ) -> OrderRead:
        """
        Move an order along one edge of the transition table.

        The status write is conditional on the status that was checked,
        so two racing requests cannot both succeed: the loser re-reads the
        order and is judged against its new status.

        Raises:
            ValidationError: target is not a known status.
            NotFoundError: unknown order.
            AuthorizationError: role has no transitions at all.
            InvalidTransitionError: (current, target) not allowed for the role.
        """
        try:
            target = OrderStatus(target_status)
        except ValueError:
            raise ValidationError(f"Unknown status: {target_status}")

        order = self.order_repo.get_by_id(session, order_id, refresh=True)
        if order is None:
            raise NotFoundError("Order not found")

        if actor.role not in roles_with_transitions(self.transitions):
            raise AuthorizationError("Not authorized to update order status")

        # Status only moves forward through an acyclic table, so every
        # lost race shortens the remaining path and this loop terminates.
        while True:
            current = OrderStatus(order.status)
            if not can_transition(actor.role, current, target, self.transitions):
                logger.warning(
                    "Rejected transition on order %s: %s -> %s by %s %s",
                    order_id,
                    current.value,
                    target.value,
                    actor.role.value,
                    actor.id,
                )
                raise InvalidTransitionError(current.value, target.value)

            driver_id = None
            if actor.role == Role.DRIVER and (
                target == OrderStatus.OUT_FOR_DELIVERY or order.driver_id is None
            ):
                driver_id = actor.id

            try:
                applied = self.order_repo.compare_and_set_status(
                    session,
                    order_id,
                    expected_status=current.value,
                    new_status=target.value,
                    updated_at=utcnow(),
                    driver_id=driver_id,
                )
                if applied:
                    session.commit()
                else:
                    session.rollback()
            except Exception:
                session.rollback()
                raise

            if applied:
                break

            order = self.order_repo.get_by_id(session, order_id, refresh=True)
            if order is None:
                raise NotFoundError("Order not found")

        logger.info(
            "Order %s: %s -> %s by %s %s",
            order_id,
            current.value,
            target.value,
            actor.role.value,
            actor.id,
        )
        order = self.order_repo.get_by_id(session, order_id, refresh=True)
        return self._build_order_dtos(session, [order])[0]

    # -------- Reads --------

    def list_orders(self, session: Session, actor: Actor) -> list[OrderRead]:
        """
        Role-filtered order list, newest first.

          customer -> own orders
          store    -> all orders
          driver   -> work queue (ready, out_for_delivery)
        """
        if actor.role == Role.CUSTOMER:
            orders = self.order_repo.list_for_customer(session, actor.id)
        elif actor.role == Role.STORE:
            orders = self.order_repo.list_all(session)
        else:
            orders = self.order_repo.list_with_status(
                session, [s.value for s in DRIVER_QUEUE_STATUSES]
            )
        return self._build_order_dtos(session, orders)

    def list_deliveries(self, session: Session, actor: Actor) -> list[OrderRead]:
        """
        Orders the calling driver has delivered, newest first.
        """
        if actor.role != Role.DRIVER:
            raise AuthorizationError("Only drivers have a delivery history")
        orders = self.order_repo.list_for_driver(
            session, actor.id, OrderStatus.DELIVERED.value
        )
        return self._build_order_dtos(session, orders)

    def get_order(self, session: Session, actor: Actor, order_id: int) -> OrderRead:
        """
        Single order with items.

        - 404 if the order does not exist, or belongs to another customer
          (same answer either way).
        """
        order = self.order_repo.get_by_id(session, order_id)
        if order is None or (
            actor.role == Role.CUSTOMER and order.customer_id != actor.id
        ):
            raise NotFoundError("Order not found")
        return self._build_order_dtos(session, [order])[0]

    # -------- Helper DTO builders --------

    def _build_order_dtos(self, session: Session, orders: list[Order]) -> list[OrderRead]:
        order_ids = [order.id for order in orders]
        items_by_order = self.order_repo.list_items_for_orders(session, order_ids)
        names = self.user_repo.usernames_for(
            session, {order.customer_id for order in orders}
        )
        return [
            self._build_order_dto(order, items_by_order[order.id], names)
            for order in orders
        ]

    @staticmethod
    def _build_order_dto(
        order: Order,
        items: list[OrderItem],
        names: dict[int, str],
    ) -> OrderRead:
        return OrderRead(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=names.get(order.customer_id),
            driver_id=order.driver_id,
            status=order.status,
            total=order.total,
            payment_method=order.payment_method,
            delivery_address=order.delivery_address,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    name_en=it.name_en,
                    name_ar=it.name_ar,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                    line_total=(it.unit_price * it.quantity).quantize(CENT),
                )
                for it in items
            ],
        )
