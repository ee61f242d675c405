"""
Dispatch database model.

A dispatch moves a set of parcels from a sender agency to a receiver agency.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from dispatch_engine.app.db.session import Base
from dispatch_engine.app.models.enums import DispatchStatus


class Dispatch(Base):
    """
    Dispatch model for inter-agency transfers.
    
    Contents are mutable only while status is DRAFT or LOADING.
    """
    __tablename__ = "dispatches"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    status = Column(Enum(DispatchStatus), default=DispatchStatus.DRAFT, nullable=False, index=True)
    
    # Transfer endpoints
    sender_agency_id = Column(Integer, ForeignKey('agencies.id'), nullable=False, index=True)
    receiver_agency_id = Column(Integer, ForeignKey('agencies.id'), nullable=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Dispatch(id={self.id}, sender={self.sender_agency_id}, receiver={self.receiver_agency_id}, status='{self.status.value}')>"
