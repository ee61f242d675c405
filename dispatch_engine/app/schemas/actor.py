"""
Actor schema.

Identifies who is asking for a dispatch operation: the authenticated user's
role and agency affiliation.
"""

from pydantic import BaseModel, Field
from typing import Optional, Union

from dispatch_engine.app.models.enums import UserRole


class ActorContext(BaseModel):
    """Schema for the actor performing a dispatch operation."""
    user_id: Optional[str] = Field(None, description="Authenticated user identifier")
    role: Union[UserRole, str] = Field(..., description="User role; unknown roles get no bypass")
    agency_id: Optional[int] = Field(None, description="Agency the user belongs to")
