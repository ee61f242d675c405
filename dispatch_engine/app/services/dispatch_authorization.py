"""
Composed authorization checks for dispatch operations.

Each function runs the full check sequence a dispatch mutation needs,
against a single directory. Call them with the directory from
transactional_context() and perform the write in the same block so the
decision and the mutation see the same data.
"""

from dispatch_engine.app.core.exceptions import (
    InsufficientPermissionsError,
    InvalidOperationError,
    ResourceConflictError,
    ResourceNotFoundError,
)
from dispatch_engine.app.core.logging import get_logger
from dispatch_engine.app.models.enums import ARRIVED_DISPATCH_STATUSES
from dispatch_engine.app.models.parcel import Parcel
from dispatch_engine.app.schemas.actor import ActorContext
from dispatch_engine.app.schemas.dispatch import ReceptionDecision
from dispatch_engine.app.services.agency_directory import AgencyDirectory
from dispatch_engine.app.services.dispatch_lifecycle import (
    assert_actor_owns_dispatch,
    assert_modifiable,
)
from dispatch_engine.app.services.ownership import can_sender_ship_parcel
from dispatch_engine.app.services.transfer_authorization import (
    is_forwarder,
    validate_can_receive_from,
    validate_can_send_to,
)

logger = get_logger("dispatch")


async def authorize_dispatch_creation(
    ctx: AgencyDirectory,
    actor: ActorContext,
    sender_agency_id: int,
    receiver_agency_id: int
) -> None:
    """
    Validate that an actor may open a dispatch from sender to receiver.

    Raises:
        InsufficientPermissionsError: Actor not in the sender agency, or
            receiver outside the sender's hierarchy
        InvalidOperationError: Sender and receiver are the same agency
        ResourceNotFoundError: Receiver agency does not exist
    """
    assert_actor_owns_dispatch(actor.agency_id, sender_agency_id, actor.role)
    await validate_can_send_to(ctx, sender_agency_id, receiver_agency_id)

    logger.debug(
        "Dispatch creation authorized",
        extra={"sender_agency_id": sender_agency_id, "receiver_agency_id": receiver_agency_id}
    )


async def authorize_parcel_addition(
    ctx: AgencyDirectory,
    actor: ActorContext,
    dispatch_id: int,
    tracking_number: str
) -> Parcel:
    """
    Validate that a parcel may be added to a dispatch.

    Order of checks:
    1. Dispatch exists
    2. Dispatch is modifiable (ROOT bypasses)
    3. Actor belongs to the sender agency (ROOT and ADMINISTRATOR bypass)
    4. Parcel exists
    5. Parcel belongs to the sender agency or one of its descendants
    6. Parcel is not travelling in another dispatch that has not arrived

    Returns:
        The parcel, loaded through the same context

    Raises:
        ResourceNotFoundError: Dispatch or parcel not found
        InsufficientPermissionsError: Dispatch immutable, actor not the sender,
            or parcel not owned
        ResourceConflictError: Parcel already in another open dispatch
    """
    dispatch = await ctx.get_dispatch(dispatch_id)
    if dispatch is None:
        raise ResourceNotFoundError("Dispatch", dispatch_id)

    assert_modifiable(dispatch.status, actor.role)
    assert_actor_owns_dispatch(actor.agency_id, dispatch.sender_agency_id, actor.role)

    parcel = await ctx.get_parcel_by_tracking_number(tracking_number)
    if parcel is None:
        raise ResourceNotFoundError("Parcel", tracking_number)

    if not await can_sender_ship_parcel(ctx, parcel.agency_id, dispatch.sender_agency_id):
        logger.warning(
            "Parcel addition denied: parcel outside sender hierarchy",
            extra={
                "dispatch_id": dispatch_id,
                "parcel_agency_id": parcel.agency_id,
                "sender_agency_id": dispatch.sender_agency_id,
            }
        )
        raise InsufficientPermissionsError(
            f"Parcel {tracking_number} does not belong to agency {dispatch.sender_agency_id} "
            f"or its child agencies. Parcel agency: {parcel.agency_id}. "
            f"An agency can only dispatch parcels from itself or its child agencies.",
            details={
                "tracking_number": tracking_number,
                "parcel_agency_id": parcel.agency_id,
                "sender_agency_id": dispatch.sender_agency_id,
            }
        )

    if parcel.dispatch_id is not None and parcel.dispatch_id != dispatch_id:
        current_dispatch = await ctx.get_dispatch(parcel.dispatch_id)
        if current_dispatch is None or current_dispatch.status not in ARRIVED_DISPATCH_STATUSES:
            raise ResourceConflictError(
                f"Parcel {tracking_number} is already in dispatch {parcel.dispatch_id}",
                details={"tracking_number": tracking_number, "dispatch_id": parcel.dispatch_id}
            )

    return parcel


async def authorize_parcel_removal(
    ctx: AgencyDirectory,
    actor: ActorContext,
    tracking_number: str
) -> Parcel:
    """
    Validate that a parcel may be taken out of its current dispatch.

    Returns:
        The parcel, loaded through the same context

    Raises:
        ResourceNotFoundError: Parcel (or its dispatch) not found
        InvalidOperationError: Parcel is not in any dispatch
        InsufficientPermissionsError: Dispatch immutable or actor not the sender
    """
    parcel = await ctx.get_parcel_by_tracking_number(tracking_number)
    if parcel is None:
        raise ResourceNotFoundError("Parcel", tracking_number)

    if parcel.dispatch_id is None:
        raise InvalidOperationError(
            f"Parcel {tracking_number} is not in any dispatch",
            details={"tracking_number": tracking_number}
        )

    dispatch = await ctx.get_dispatch(parcel.dispatch_id)
    if dispatch is None:
        raise ResourceNotFoundError("Dispatch", parcel.dispatch_id)

    assert_modifiable(dispatch.status, actor.role)
    assert_actor_owns_dispatch(actor.agency_id, dispatch.sender_agency_id, actor.role)

    return parcel


async def authorize_reception(
    ctx: AgencyDirectory,
    receiver_agency_id: int,
    sender_agency_id: int
) -> ReceptionDecision:
    """
    Validate that a receiver may accept a dispatch and describe the reception.

    Raises:
        InvalidOperationError: Receiver and sender are the same agency
        ResourceNotFoundError: Receiver agency does not exist
        InsufficientPermissionsError: Sender is not below a non-forwarder receiver
    """
    await validate_can_receive_from(ctx, receiver_agency_id, sender_agency_id)

    return ReceptionDecision(
        receiver_agency_id=receiver_agency_id,
        sender_agency_id=sender_agency_id,
        receiver_is_forwarder=await is_forwarder(ctx, receiver_agency_id),
    )
