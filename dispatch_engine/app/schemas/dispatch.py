"""
Dispatch authorization result schemas.
"""

from pydantic import BaseModel, Field


class ReceptionDecision(BaseModel):
    """Schema for an authorized dispatch reception."""
    receiver_agency_id: int
    sender_agency_id: int
    receiver_is_forwarder: bool = Field(
        ...,
        description="Forwarder receptions move parcels to a warehouse; others keep them in the dispatch flow"
    )
