"""
Parcel ownership validation.

An agency may dispatch parcels that belong to itself or to any agency
beneath it, never parcels of peers, ancestors or unrelated trees.
"""

from typing import Optional

from dispatch_engine.app.models.dispatch import Dispatch
from dispatch_engine.app.models.enums import ARRIVED_DISPATCH_STATUSES
from dispatch_engine.app.models.parcel import Parcel
from dispatch_engine.app.services.agency_directory import AgencyDirectory
from dispatch_engine.app.services.hierarchy import descendants_of


async def can_sender_ship_parcel(
    ctx: AgencyDirectory,
    parcel_agency_id: Optional[int],
    sender_agency_id: int
) -> bool:
    """
    Check if a sender agency may include a parcel in its dispatch.

    Args:
        ctx: Agency directory for the current execution context
        parcel_agency_id: Owning agency of the parcel (None if unassigned)
        sender_agency_id: Agency creating the dispatch

    Returns:
        True if the parcel belongs to the sender or one of its descendants
    """
    if parcel_agency_id is None:
        return False

    if parcel_agency_id == sender_agency_id:
        return True

    return parcel_agency_id in await descendants_of(ctx, sender_agency_id)


def holder_agency_id(parcel: Parcel, dispatch: Optional[Dispatch]) -> Optional[int]:
    """
    Agency that physically holds a parcel right now.

    - Not in a dispatch: the owning agency
    - In a dispatch that arrived (RECEIVED/DISCREPANCY): the receiver,
      falling back to the owner if the dispatch has no receiver
    - In any other dispatch: the sender
    """
    if parcel.dispatch_id is None or dispatch is None:
        return parcel.agency_id

    if dispatch.status in ARRIVED_DISPATCH_STATUSES:
        if dispatch.receiver_agency_id is not None:
            return dispatch.receiver_agency_id
        return parcel.agency_id

    return dispatch.sender_agency_id
