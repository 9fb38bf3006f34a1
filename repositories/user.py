from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute
from enums.user_role import UserRole
from models.user import Profile, ProfileDTO


class UserRepository:

    @staticmethod
    async def get_profile(user_id: str, session: AsyncSession) -> ProfileDTO | None:
        stmt = select(Profile).where(Profile.id == user_id)
        profile = await session_execute(stmt, session)
        profile = profile.scalar()
        if profile is not None:
            return ProfileDTO.model_validate(profile, from_attributes=True)
        return None

    @staticmethod
    async def get_role(user_id: str, session: AsyncSession) -> UserRole | None:
        stmt = select(Profile.role).where(Profile.id == user_id)
        role = await session_execute(stmt, session)
        return role.scalar()
