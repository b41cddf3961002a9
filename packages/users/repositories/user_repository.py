from common.repositories.base import BaseRepository
from packages.users.models.database.user import UserEntity
from packages.users.models.domain.user import User


class UserRepository(BaseRepository[UserEntity, User]):
    """Users are only looked up by ID, to validate organization owners."""

    def __init__(self):
        super().__init__(UserEntity, User)
