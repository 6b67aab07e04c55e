"""
Admission request workflow

The request lifecycle is a small state machine:

    PENDING -> AWAITING_DEPOSIT -> DEPOSIT_PAID -> CONVERTED (bed allocation)
    PENDING -> REJECTED
    APPROVED -> AWAITING_DEPOSIT (rows approved before the deposit step existed)

CONVERTED can only be reached through bed allocation, never by a plain
status change.
"""

from typing import Dict, FrozenSet
import logging

from hospital_core.core.exceptions import InvalidTransitionError
from hospital_core.domain.ipd.models import AdmissionRequestStatus

logger = logging.getLogger(__name__)

Status = AdmissionRequestStatus

# Edges accepted by a plain status change
STATUS_TRANSITIONS: Dict[Status, FrozenSet[Status]] = {
    Status.PENDING: frozenset({Status.AWAITING_DEPOSIT, Status.REJECTED}),
    Status.APPROVED: frozenset({Status.AWAITING_DEPOSIT}),
    Status.AWAITING_DEPOSIT: frozenset({Status.DEPOSIT_PAID}),
    Status.DEPOSIT_PAID: frozenset(),
    Status.CONVERTED: frozenset(),
    Status.REJECTED: frozenset(),
}

# Status a request must hold before a bed can be allocated
ALLOCATABLE_STATUS = Status.DEPOSIT_PAID

TERMINAL_STATUSES = frozenset({Status.CONVERTED, Status.REJECTED})


def can_transition(current: Status, target: Status) -> bool:
    return target in STATUS_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: Status, target: Status) -> None:
    """Raise InvalidTransitionError unless current -> target is a legal status change."""
    if not can_transition(current, target):
        logger.warning("Refused admission request transition %s -> %s", current.value, target.value)
        raise InvalidTransitionError(
            f"Cannot move admission request from {current.value} to {target.value}",
            details={"from": current.value, "to": target.value},
        )


def ensure_allocatable(current: Status) -> None:
    if current != ALLOCATABLE_STATUS:
        logger.warning("Refused bed allocation for request in %s", current.value)
        raise InvalidTransitionError(
            f"Bed can only be allocated for requests in {ALLOCATABLE_STATUS.value}, "
            f"request is {current.value}",
            details={"from": current.value, "to": Status.CONVERTED.value},
        )
