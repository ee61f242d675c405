"""
Transfer authorization between agencies.

Rules:
1. No agency sends to or receives from itself
2. A FORWARDER receiver accepts from anyone
3. A regular agency only sends upward (to an ancestor) and only receives
   from below (from a descendant)

Sender-side and receiver-side checks are separate because dispatch creation
and dispatch reception are validated at different points by different actors.
"""

from dispatch_engine.app.core.exceptions import (
    InsufficientPermissionsError,
    InvalidOperationError,
    ResourceNotFoundError,
)
from dispatch_engine.app.core.logging import get_logger
from dispatch_engine.app.services.agency_directory import AgencyDirectory
from dispatch_engine.app.services.hierarchy import ancestors_of, descendants_of

logger = get_logger("transfer")


async def validate_can_send_to(
    ctx: AgencyDirectory,
    sender_agency_id: int,
    receiver_agency_id: int
) -> None:
    """
    Validate that a sender agency may dispatch to a receiver agency.

    Args:
        ctx: Agency directory for the current execution context
        sender_agency_id: Agency creating the dispatch
        receiver_agency_id: Intended destination

    Raises:
        InvalidOperationError: If sender and receiver are the same agency
        ResourceNotFoundError: If the receiver agency does not exist
        InsufficientPermissionsError: If the receiver is neither a FORWARDER
            nor an ancestor of the sender
    """
    if sender_agency_id == receiver_agency_id:
        raise InvalidOperationError(
            "An agency cannot send a dispatch to itself",
            details={"agency_id": sender_agency_id}
        )

    receiver = await ctx.get_agency(receiver_agency_id)
    if receiver is None:
        raise ResourceNotFoundError("Receiver agency", receiver_agency_id)

    if receiver.is_forwarder:
        logger.debug(
            "Send allowed to forwarder",
            extra={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )
        return

    if receiver_agency_id not in await ancestors_of(ctx, sender_agency_id):
        logger.warning(
            "Send denied: receiver outside sender hierarchy",
            extra={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )
        raise InsufficientPermissionsError(
            f'Agency "{receiver.name}" ({receiver_agency_id}) is not in the hierarchy of sender agency. '
            f"Sender can only dispatch to parent agencies or FORWARDER agencies.",
            details={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )


async def validate_can_receive_from(
    ctx: AgencyDirectory,
    receiver_agency_id: int,
    sender_agency_id: int
) -> None:
    """
    Validate that a receiver agency may accept parcels from a sender agency.

    Args:
        ctx: Agency directory for the current execution context
        receiver_agency_id: Agency receiving the parcels
        sender_agency_id: Agency currently holding the parcels

    Raises:
        InvalidOperationError: If receiver and sender are the same agency
        ResourceNotFoundError: If the receiver agency does not exist
        InsufficientPermissionsError: If the receiver is neither a FORWARDER
            nor an ancestor of the sender
    """
    if receiver_agency_id == sender_agency_id:
        raise InvalidOperationError(
            "Cannot receive parcels from your own agency",
            details={"agency_id": receiver_agency_id}
        )

    receiver = await ctx.get_agency(receiver_agency_id)
    if receiver is None:
        raise ResourceNotFoundError("Receiver agency", receiver_agency_id)

    if receiver.is_forwarder:
        logger.debug(
            "Reception allowed at forwarder",
            extra={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )
        return

    if sender_agency_id not in await descendants_of(ctx, receiver_agency_id):
        sender = await ctx.get_agency(sender_agency_id)
        sender_label = sender.name if sender is not None else sender_agency_id

        logger.warning(
            "Reception denied: sender is not a descendant",
            extra={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )
        raise InsufficientPermissionsError(
            f'Agency "{receiver.name}" can only receive from its child agencies. '
            f'Agency "{sender_label}" is not a descendant.',
            details={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
        )


async def is_forwarder(ctx: AgencyDirectory, agency_id: int) -> bool:
    """Check if an agency is a FORWARDER (False when it does not exist)."""
    agency = await ctx.get_agency(agency_id)
    return agency is not None and agency.is_forwarder
