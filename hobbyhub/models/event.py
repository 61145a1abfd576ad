"""
Event model with a point location.

Coordinates are stored as two indexed float columns so that the nearby query
can prefilter on a bounding box with any SQL backend before the exact
great-circle check.
"""
import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Index, func
from sqlalchemy.orm import relationship

from hobbyhub.core.db import Base


class EventType(str, enum.Enum):
    SOLO = "Solo"
    CLASSIFIED = "Classified"
    PUBLIC = "Public"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_lat_lon", "latitude", "longitude"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    hobby_id = Column(Integer, ForeignKey("hobbies.id"), nullable=False, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_type = Column(String(16), nullable=False, default=EventType.PUBLIC.value)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    formatted_address = Column(String(255), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False)
    capacity = Column(Integer, nullable=False, default=10)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    hobby = relationship("Hobby", back_populates="events")
    organizer = relationship("User", back_populates="organized_events")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Event id={self.id} title={self.title}>"
