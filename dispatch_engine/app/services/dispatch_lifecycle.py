"""
Dispatch lifecycle guard.

Two independent checks gate every parcel add/remove on a dispatch:
- assert_modifiable: the dispatch status still allows content changes
- assert_actor_owns_dispatch: the actor belongs to the sender agency

They are separate so callers can run them at different points of a workflow.
"""

from typing import Optional, Union

from dispatch_engine.app.core.exceptions import InsufficientPermissionsError, InvalidOperationError
from dispatch_engine.app.core.logging import get_logger
from dispatch_engine.app.models.enums import (
    ADMIN_BYPASS_ROLES,
    IMMUTABLE_DISPATCH_STATUSES,
    MODIFIABLE_DISPATCH_STATUSES,
    STATUS_BYPASS_ROLES,
    DispatchStatus,
    UserRole,
)

logger = get_logger("lifecycle")


def as_role(role: Union[UserRole, str, None]) -> Optional[UserRole]:
    """Coerce a role value to UserRole; unknown or missing roles become None."""
    if role is None or isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def as_status(status: Union[DispatchStatus, str]) -> DispatchStatus:
    """Coerce a status value to DispatchStatus, rejecting unknown values."""
    if isinstance(status, DispatchStatus):
        return status
    try:
        return DispatchStatus(status)
    except ValueError:
        raise InvalidOperationError(f"Unknown dispatch status {status}", details={"status": status})


def is_modifiable_status(status: Union[DispatchStatus, str]) -> bool:
    """True while parcels may still be added to or removed from the dispatch."""
    return as_status(status) in MODIFIABLE_DISPATCH_STATUSES


def assert_modifiable(
    status: Union[DispatchStatus, str],
    actor_role: Union[UserRole, str, None] = None
) -> None:
    """
    Validate that a dispatch's contents may be modified.

    Args:
        status: Current dispatch status
        actor_role: Role of the acting user; ROOT bypasses the check

    Raises:
        InsufficientPermissionsError: If the status is DISPATCHED, RECEIVING,
            RECEIVED or DISCREPANCY and the actor is not ROOT
    """
    if as_role(actor_role) in STATUS_BYPASS_ROLES:
        return

    status = as_status(status)
    if status in IMMUTABLE_DISPATCH_STATUSES:
        logger.warning("Modification denied: dispatch is immutable", extra={"status": status.value})
        raise InsufficientPermissionsError(
            f"Cannot modify dispatch with status {status.value}. "
            f"Parcels can only be added/removed when dispatch is in DRAFT or LOADING status.",
            details={"status": status.value}
        )


def assert_actor_owns_dispatch(
    actor_agency_id: Optional[int],
    dispatch_sender_agency_id: int,
    actor_role: Union[UserRole, str, None]
) -> None:
    """
    Validate that the actor belongs to the dispatch's sender agency.

    Args:
        actor_agency_id: Agency the actor belongs to (None if unaffiliated)
        dispatch_sender_agency_id: Sender agency of the dispatch
        actor_role: Role of the acting user; ROOT and ADMINISTRATOR bypass

    Raises:
        InsufficientPermissionsError: If the actor has no agency or a different one
    """
    if as_role(actor_role) in ADMIN_BYPASS_ROLES:
        return

    if actor_agency_id is None:
        raise InsufficientPermissionsError(
            "User must be associated with an agency to modify dispatches"
        )

    if actor_agency_id != dispatch_sender_agency_id:
        logger.warning(
            "Modification denied: actor is not the sender agency",
            extra={"actor_agency_id": actor_agency_id, "sender_agency_id": dispatch_sender_agency_id}
        )
        raise InsufficientPermissionsError(
            f"Only the sender agency can modify this dispatch. "
            f"Your agency: {actor_agency_id}, Sender agency: {dispatch_sender_agency_id}",
            details={"actor_agency_id": actor_agency_id, "sender_agency_id": dispatch_sender_agency_id}
        )


def derive_dispatch_status(
    current_status: Union[DispatchStatus, str],
    total_parcels: int,
    received_parcels: int = 0
) -> DispatchStatus:
    """
    Status a dispatch should have given its parcel counts.

    Status workflow:
        DRAFT: no parcels
        LOADING: parcels added, not yet dispatched
        DISPATCHED: sent, nothing received yet
        RECEIVING: some parcels received
        RECEIVED: all parcels received
        DISCREPANCY: kept as is (set by reception reconciliation)
    """
    current_status = as_status(current_status)

    if total_parcels == 0:
        return DispatchStatus.DRAFT

    if current_status in MODIFIABLE_DISPATCH_STATUSES:
        return DispatchStatus.LOADING

    if current_status in (DispatchStatus.DISPATCHED, DispatchStatus.RECEIVING):
        if received_parcels == 0:
            return DispatchStatus.DISPATCHED
        if received_parcels >= total_parcels:
            return DispatchStatus.RECEIVED
        return DispatchStatus.RECEIVING

    return current_status
