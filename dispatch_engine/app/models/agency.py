"""
Agency database model.

Agencies form an ownership forest through parent_agency_id; forwarders sit
at the roots.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from dispatch_engine.app.db.session import Base
from dispatch_engine.app.models.enums import AgencyType


class Agency(Base):
    """
    Agency model for the shipping network.
    
    An agency owns parcels and may own child agencies. The engine only
    reads agencies; creating and re-parenting them happens upstream.
    """
    __tablename__ = "agencies"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Hierarchy - null for forwarders at the top of the network
    parent_agency_id = Column(Integer, ForeignKey('agencies.id'), nullable=True, index=True)
    
    name = Column(String(200), nullable=False)
    agency_type = Column(Enum(AgencyType), default=AgencyType.AGENCY, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Agency(id={self.id}, name='{self.name}', type='{self.agency_type.value}', parent_id={self.parent_agency_id})>"
