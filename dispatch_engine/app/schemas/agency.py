"""
Agency read models.

The directory hands these out instead of live ORM rows so validators
never touch session state after the lookup.
"""

from pydantic import BaseModel
from typing import Optional

from dispatch_engine.app.models.enums import AgencyType


class AgencyRecord(BaseModel):
    """Schema for a single agency lookup."""
    id: int
    agency_type: AgencyType
    name: str
    parent_agency_id: Optional[int] = None
    
    @property
    def is_forwarder(self) -> bool:
        return self.agency_type == AgencyType.FORWARDER
    
    class Config:
        from_attributes = True
