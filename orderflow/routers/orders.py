# orderflow/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from orderflow.core.auth import get_current_actor
from orderflow.database import get_session
from orderflow.repositories.catalog_repo import CatalogRepository
from orderflow.repositories.order_repo import OrderRepository
from orderflow.repositories.user_repo import UserRepository
from orderflow.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from orderflow.schemas.user import Actor
from orderflow.services.catalog_service import CatalogService
from orderflow.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
user_repo = UserRepository()
catalog = CatalogService(CatalogRepository())
service = OrderService(order_repo, catalog, user_repo)


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Place an order.

    Auth:
      - Only role='customer'.

    Prices and total are computed from the catalog; a client `total`
    is only compared and logged.
    """
    return service.create_order(session, actor, payload)


@router.get("", response_model=list[OrderRead])
def list_orders(
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Orders visible to the caller, newest first.

      customer -> own orders
      store    -> every order
      driver   -> ready / out_for_delivery
    """
    return service.list_orders(session, actor)


@router.get("/deliveries", response_model=list[OrderRead])
def list_my_deliveries(
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Orders delivered by the calling driver (driver only).
    """
    return service.list_deliveries(session, actor)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Single order with items. Customers get 404 for orders that are not theirs.
    """
    return service.get_order(session, actor, order_id)


@router.put("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Move an order to its next status.

      store  : placed -> confirmed | cancelled
               confirmed -> preparing
               preparing -> ready
      driver : ready -> out_for_delivery
               out_for_delivery -> delivered

    400 invalid transition, 403 role without transitions, 404 unknown order.
    """
    return service.transition_status(session, actor, order_id, payload.status)
