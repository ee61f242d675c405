"""
Parcel database model.

A parcel is owned by exactly one agency and travels inside at most one
dispatch at a time.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from dispatch_engine.app.db.session import Base


class Parcel(Base):
    """
    Parcel model for the shipping network.
    
    Ownership (agency_id) is the only attribute the authorization engine
    inspects; dispatch_id is read to locate the parcel's current dispatch.
    """
    __tablename__ = "parcels"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    tracking_number = Column(String(100), unique=True, nullable=False, index=True)
    
    # Ownership - nullable for parcels not yet assigned to an agency
    agency_id = Column(Integer, ForeignKey('agencies.id'), nullable=True, index=True)
    
    # Current dispatch, if any
    dispatch_id = Column(Integer, ForeignKey('dispatches.id'), nullable=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking='{self.tracking_number}', agency_id={self.agency_id}, dispatch_id={self.dispatch_id})>"
