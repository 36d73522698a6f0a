"""Developer profile repository."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Query, joinedload, selectinload

from core.logging import get_logger
from core.models import Profile

from .base import BaseRepository

logger = get_logger("repository.profile")

# Dialects with INSERT ... ON CONFLICT support
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile operations."""

    model = Profile

    def _query(self) -> Query:
        """Profile query with owner and history lists eagerly loaded."""
        return self.session.query(Profile).options(
            joinedload(Profile.user),
            selectinload(Profile.experiences),
            selectinload(Profile.education),
        )

    def get_by_user_id(self, user_id: int) -> Profile | None:
        """Get profile by owning user ID."""
        return self._query().filter(Profile.user_id == user_id).first()

    def list_all(self) -> list[Profile]:
        return self._query().order_by(Profile.id).all()

    def has_profile(self, user_id: int) -> bool:
        return self.exists_where(user_id=user_id)

    def _insert_if_absent(self, user_id: int) -> bool:
        """
        Insert an empty profile row unless one exists for the user.

        Relies on UNIQUE(user_id), so concurrent callers cannot create
        two rows. Returns True if this call inserted the row.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is None:
            # No ON CONFLICT support; the unique constraint still rejects duplicates
            if self.has_profile(user_id):
                return False
            self.session.add(Profile(user_id=user_id, skills=[], social={}))
            self.session.flush()
            return True

        now = datetime.now(timezone.utc)
        stmt = (
            insert(Profile)
            .values(user_id=user_id, skills=[], social={}, created_at=now, updated_at=now)
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def upsert(
        self,
        user_id: int,
        fields: dict[str, Any],
        social: dict[str, str] | None = None,
    ) -> tuple[Profile, bool]:
        """
        Create the user's profile if missing, then apply a partial update.

        Only keys present in `fields` are written. `social` is merged into
        the stored links key by key, so links left out of the request keep
        their stored value.

        Returns:
            (profile, created)
        """
        created = self._insert_if_absent(user_id)

        profile = (
            self._query()
            .filter(Profile.user_id == user_id)
            .populate_existing()
            .with_for_update(of=Profile)
            .one()
        )

        for key, value in fields.items():
            setattr(profile, key, value)
        if social:
            # Reassign so the JSON column is flagged dirty
            profile.social = {**(profile.social or {}), **social}
        profile.updated_at = datetime.now(timezone.utc)

        self.session.flush()
        logger.debug("profile_upsert_applied", user_id=user_id, created=created, fields=sorted(fields))
        return profile, created

    def delete_by_user_id(self, user_id: int) -> bool:
        """Delete the user's profile. Returns False if there was none."""
        profile = self.session.query(Profile).filter(Profile.user_id == user_id).first()
        if profile is None:
            return False
        self.session.delete(profile)
        self.session.flush()
        return True
