# fittrack/repositories/profile_repo.py
from __future__ import annotations
import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from fittrack.models import Profile
from fittrack.repositories.base import BaseRepository, Page

log = logging.getLogger(__name__)

class ProfileRepository(BaseRepository[Profile]):
    model = Profile

    # READS
    def get(self, profile_id: str) -> Optional[Profile]:
        # Always re-read; another request may have saved since this session loaded it
        return self.db.get(Profile, profile_id, populate_existing=True)

    def list(self, *, limit: int = 50, offset: int = 0) -> Page[Profile]:
        stmt = select(Profile).order_by(Profile.created_at.asc(), Profile.id.asc())
        items = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        total = self.db.execute(select(func.count()).select_from(Profile)).scalar_one()
        return Page(items=list(items), total=total, limit=limit, offset=offset)

    # WRITES
    def create(self, *, name: str, data: dict[str, Any]) -> Profile:
        profile = Profile(id=uuid.uuid4().hex, name=name, data=data)
        return self.add_and_commit(profile)

    def save(self, profile_id: str, data: dict[str, Any]) -> Profile:
        """Overwrite the profile's data wholesale. There is no partial update."""
        profile = self.get(profile_id)
        if profile is None:
            raise LookupError(f"profile {profile_id} not found")
        # A fresh dict so the JSON column registers the change
        profile.data = dict(data)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            log.exception("failed to persist profile %s", profile_id)
            raise
        self.db.refresh(profile)
        return profile
