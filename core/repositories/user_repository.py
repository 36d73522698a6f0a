"""User repository."""

from core.logging import get_logger
from core.models import User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def delete_account(self, user_id: int) -> bool:
        """
        Delete a user. The profile row goes with it through the
        ON DELETE CASCADE foreign key and the ORM cascade.
        """
        deleted = self.delete(user_id)
        if deleted:
            logger.info("user_deleted", user_id=user_id)
        return deleted
