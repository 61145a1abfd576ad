"""
Hobby model: the interest an event is organised around.
"""
import enum
import re

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import relationship

from hobbyhub.core.db import Base


class HobbyCategory(str, enum.Enum):
    SPORTS_AND_FITNESS = "Sports and Fitness"
    CREATIVE_AND_VISUAL_ARTS = "Creative and Visual Arts"
    MUSIC_AND_PERFORMING_ARTS = "Music and Performing Arts"
    GAMING_AND_ENTERTAINMENT = "Gaming & Entertainment"
    OUTDOOR_AND_ADVENTURE = "Outdoor & Adventure"
    COOKING = "Cooking"
    TECHNOLOGY = "Technology"
    COMMUNITY_ACTIVITIES = "Community Activities"
    PET_AND_ANIMAL_ENTHUSIASTS = "Pet & Animal Enthusiasts"
    COLLECTIONS = "Collections"
    OTHER = "Other"


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())


class Hobby(Base):
    __tablename__ = "hobbies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    slug = Column(String(64), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, default=HobbyCategory.OTHER.value, index=True)
    popularity = Column(Integer, nullable=False, default=0)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    events = relationship("Event", back_populates="hobby")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Hobby id={self.id} name={self.name}>"
