"""
Hobby Service - creating and listing hobbies.
"""
import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from hobbyhub.core.exceptions import ConflictError, NotFoundError
from hobbyhub.models.hobby import Hobby, slugify
from hobbyhub.schemas.hobby import HobbyCreate

logger = logging.getLogger(__name__)


class HobbyService:
    def __init__(self, db: Session):
        self.db = db

    def create_hobby(self, data: HobbyCreate, creator_id: Optional[int] = None) -> Hobby:
        """
        Raises:
            ConflictError: if a hobby with the same name (or slug) exists
        """
        slug = slugify(data.name)
        existing = self.db.execute(
            select(Hobby).where(or_(Hobby.name == data.name, Hobby.slug == slug))
        ).scalar_one_or_none()
        if existing is not None:
            raise ConflictError("Hobby already exists", details={"name": data.name})

        hobby = Hobby(
            name=data.name,
            slug=slug,
            description=data.description,
            category=data.category.value,
            creator_id=creator_id,
        )
        self.db.add(hobby)
        self.db.commit()
        self.db.refresh(hobby)
        logger.info(f"Hobby '{hobby.name}' created (id={hobby.id})")
        return hobby

    def get_hobby(self, hobby_id: int) -> Hobby:
        hobby = self.db.get(Hobby, hobby_id)
        if hobby is None:
            raise NotFoundError("Hobby not found", details={"hobby_id": hobby_id})
        return hobby

    def list_hobbies(self, category: Optional[str] = None, limit: int = 50) -> List[Hobby]:
        stmt = select(Hobby).order_by(Hobby.popularity.desc(), Hobby.name)
        if category:
            stmt = stmt.where(Hobby.category == category)
        return list(self.db.execute(stmt.limit(limit)).scalars())
