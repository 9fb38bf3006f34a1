import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from db import get_catalog_session
from enums.user_role import UserRole
from exceptions import UserNotFoundException, PermissionDeniedException
from models.user import ProfileDTO, UserDTO
from repositories.user import UserRepository

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_catalog_session):
        self.session_factory = session_factory

    async def get_profile(self, user_id: str) -> ProfileDTO:
        async with self.session_factory() as session:
            profile = await UserRepository.get_profile(user_id, session)
        if profile is None:
            raise UserNotFoundException(user_id)
        return profile

    async def get_role(self, user_id: str) -> UserRole:
        async with self.session_factory() as session:
            role = await UserRepository.get_role(user_id, session)
        if role is None:
            raise UserNotFoundException(user_id)
        return role

    async def resolve(self, user_id: str, email: str | None = None) -> UserDTO:
        """The signed-in user with the role stored on their profile."""
        return UserDTO(id=user_id, email=email, role=await self.get_role(user_id))

    async def require_pos_access(self, user: UserDTO | None) -> UserDTO:
        """
        Confirm the user may open the point-of-sale screen.

        The role is read again from the profile table; the role carried on
        the UserDTO is not trusted.
        """
        if user is None:
            raise PermissionDeniedException(None, "use the point of sale")
        role = await self.get_role(user.id)
        if not role.can_use_pos():
            logger.warning(f"User {user.id} with role {role.value} denied POS access")
            raise PermissionDeniedException(user.id, "use the point of sale")
        return user.model_copy(update={"role": role})
