"""Transition table: contents, startup validation and exhaustive rejection."""

import pytest
from sqlalchemy import update
from sqlmodel import Session

from orderflow.core.errors import AuthorizationError, InvalidTransitionError
from orderflow.core.lifecycle import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    OrderStatus,
    Role,
    allowed_targets,
    can_transition,
    roles_with_transitions,
    validate_transition_table,
)
from orderflow.models.order import Order
from orderflow.schemas.order import OrderCreate, OrderItemCreate

S = OrderStatus


def test_table_matches_role_contract():
    assert allowed_targets(Role.STORE, S.PLACED) == {S.CONFIRMED, S.CANCELLED}
    assert allowed_targets(Role.STORE, S.CONFIRMED) == {S.PREPARING}
    assert allowed_targets(Role.STORE, S.PREPARING) == {S.READY}
    assert allowed_targets(Role.DRIVER, S.READY) == {S.OUT_FOR_DELIVERY}
    assert allowed_targets(Role.DRIVER, S.OUT_FOR_DELIVERY) == {S.DELIVERED}
    assert len(TRANSITIONS) == 5


def test_customers_have_no_write_transitions():
    assert roles_with_transitions() == {Role.STORE, Role.DRIVER}
    for status in OrderStatus:
        assert allowed_targets(Role.CUSTOMER, status) == frozenset()


def test_cancellation_only_from_placed():
    sources = {
        source
        for (source, _), targets in TRANSITIONS.items()
        if S.CANCELLED in targets
    }
    assert sources == {S.PLACED}


@pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES))
def test_terminal_statuses_have_no_way_out(terminal):
    for role in Role:
        for target in OrderStatus:
            assert not can_transition(role, terminal, target)


def test_default_table_is_valid():
    validate_transition_table()


def test_validation_rejects_terminal_with_outgoing_edge():
    broken = dict(TRANSITIONS)
    broken[(S.DELIVERED, Role.STORE)] = frozenset({S.PLACED})
    with pytest.raises(RuntimeError, match="terminal status delivered"):
        validate_transition_table(broken)


def test_validation_rejects_stranded_status():
    broken = dict(TRANSITIONS)
    del broken[(S.PREPARING, Role.STORE)]
    with pytest.raises(RuntimeError, match="preparing has no outgoing"):
        validate_transition_table(broken)


def test_validation_rejects_unreachable_status():
    broken = dict(TRANSITIONS)
    broken[(S.PLACED, Role.STORE)] = frozenset({S.CONFIRMED})
    with pytest.raises(RuntimeError, match="cancelled is unreachable"):
        validate_transition_table(broken)


def test_validation_rejects_unknown_values():
    broken = dict(TRANSITIONS)
    broken[(S.READY, "courier")] = frozenset({"lost"})
    with pytest.raises(RuntimeError) as exc_info:
        validate_transition_table(broken)
    assert "unknown role 'courier'" in str(exc_info.value)
    assert "unknown target status 'lost'" in str(exc_info.value)


def test_validation_rejects_cycles():
    broken = dict(TRANSITIONS)
    broken[(S.PREPARING, Role.STORE)] = frozenset({S.READY, S.CONFIRMED})
    with pytest.raises(RuntimeError, match="cycle"):
        validate_transition_table(broken)


# ---------------------------------------------------------------------------
# Exhaustive check through the service
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("role_name", ["alice", "store", "driver"])
def test_every_pair_outside_the_table_is_rejected(
    role_name, service, session, engine, actors, items
):
    """For each (role, current, target) not in the table the call never succeeds."""
    actor = actors[role_name]
    order = service.create_order(
        session,
        actors["alice"],
        OrderCreate(
            items=[OrderItemCreate(id=items["Cola"], quantity=1)],
            delivery_address="1 Test Street",
        ),
    )

    for current in OrderStatus:
        for target in OrderStatus:
            if can_transition(actor.role, current, target):
                continue
            with Session(engine) as s:
                s.exec(
                    update(Order)
                    .where(Order.id == order.id)
                    .values(status=current.value)
                )
                s.commit()

            with pytest.raises((AuthorizationError, InvalidTransitionError)):
                service.transition_status(session, actor, order.id, target)

            with Session(engine) as s:
                assert s.get(Order, order.id).status == current.value
