from sqlalchemy.orm import relationship
from sqlalchemy import Boolean, Column, String, Integer, DateTime, Float, Text, false, func

from hobbyhub.core.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(50), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default="user", server_default="user")
    bio = Column(Text, nullable=True)

    # Last reported position; null until the device pushes a fix
    latitude = Column(Float, nullable=True, index=True)
    longitude = Column(Float, nullable=True, index=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)
    location_sharing_enabled = Column(Boolean, nullable=False, default=False, server_default=false())
    geofence_radius = Column(Integer, nullable=False, default=5000, server_default="5000")  # metres

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    organized_events = relationship("Event", back_populates="organizer")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} username={self.username}>"
