# orderflow/core/lifecycle.py
"""
Order lifecycle state machine.

The transition table maps (current status, actor role) to the set of
statuses that role may move the order to. Anything not listed is rejected.

    placed -> confirmed -> preparing -> ready -> out_for_delivery -> delivered
       \\-> cancelled

`validate_transition_table` is run on application startup so that an edit
to the table that leaves a status stranded fails fast instead of at
request time.
"""

from enum import Enum
from typing import Mapping


class Role(str, Enum):
    CUSTOMER = "customer"
    STORE = "store"
    DRIVER = "driver"


class OrderStatus(str, Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


INITIAL_STATUS = OrderStatus.PLACED

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# Statuses a driver sees in their work queue
DRIVER_QUEUE_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
)

TransitionTable = Mapping[tuple[OrderStatus, Role], frozenset[OrderStatus]]

TRANSITIONS: TransitionTable = {
    (OrderStatus.PLACED, Role.STORE): frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.CANCELLED}
    ),
    (OrderStatus.CONFIRMED, Role.STORE): frozenset({OrderStatus.PREPARING}),
    (OrderStatus.PREPARING, Role.STORE): frozenset({OrderStatus.READY}),
    (OrderStatus.READY, Role.DRIVER): frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    (OrderStatus.OUT_FOR_DELIVERY, Role.DRIVER): frozenset({OrderStatus.DELIVERED}),
}


def roles_with_transitions(table: TransitionTable = TRANSITIONS) -> frozenset[Role]:
    """Roles that have at least one entry in the table."""
    return frozenset(role for _, role in table)


def allowed_targets(
    role: Role,
    current: OrderStatus,
    table: TransitionTable = TRANSITIONS,
) -> frozenset[OrderStatus]:
    return table.get((current, role), frozenset())


def can_transition(
    role: Role,
    current: OrderStatus,
    target: OrderStatus,
    table: TransitionTable = TRANSITIONS,
) -> bool:
    return target in allowed_targets(role, current, table)


def validate_transition_table(table: TransitionTable = TRANSITIONS) -> None:
    """
    Check the table against the full status and role enumerations.

    Raises:
        RuntimeError: listing every problem found.
    """
    problems: list[str] = []
    outgoing: dict[OrderStatus, set[OrderStatus]] = {s: set() for s in OrderStatus}

    for (source, role), targets in table.items():
        if not isinstance(source, OrderStatus):
            problems.append(f"unknown source status {source!r}")
            continue
        if not isinstance(role, Role):
            problems.append(f"unknown role {role!r} for {source.value}")
        for target in targets:
            if not isinstance(target, OrderStatus):
                problems.append(f"unknown target status {target!r} from {source.value}")
                continue
            if target == source:
                problems.append(f"self-transition on {source.value}")
            outgoing[source].add(target)

    for status in OrderStatus:
        if status in TERMINAL_STATUSES and outgoing[status]:
            problems.append(f"terminal status {status.value} has outgoing transitions")
        if status not in TERMINAL_STATUSES and not outgoing[status]:
            problems.append(f"non-terminal status {status.value} has no outgoing transitions")

    reachable = {INITIAL_STATUS}
    frontier = [INITIAL_STATUS]
    while frontier:
        for nxt in outgoing[frontier.pop()]:
            if nxt not in reachable:
                reachable.add(nxt)
                frontier.append(nxt)
    for status in OrderStatus:
        if status not in reachable:
            problems.append(f"status {status.value} is unreachable from {INITIAL_STATUS.value}")

    # Orders only move forward: the graph must be acyclic (Kahn's algorithm)
    indegree = {s: 0 for s in OrderStatus}
    for targets in outgoing.values():
        for target in targets:
            indegree[target] += 1
    ready = [s for s, n in indegree.items() if n == 0]
    visited = 0
    while ready:
        current = ready.pop()
        visited += 1
        for target in outgoing[current]:
            indegree[target] -= 1
            if indegree[target] == 0:
                ready.append(target)
    if visited != len(indegree):
        problems.append("transition table contains a cycle")

    if problems:
        raise RuntimeError("Invalid order transition table: " + "; ".join(problems))
