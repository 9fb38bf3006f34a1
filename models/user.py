from pydantic import BaseModel
from sqlalchemy import Column, String
from sqlalchemy import Enum as SQLEnum

from enums.user_role import UserRole
from models.base import Base


class Profile(Base):
    __tablename__ = 'profiles'

    # Same id as the identity provider's user id
    id = Column(String, primary_key=True)
    role = Column(SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
                  nullable=False, default=UserRole.USER)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)


class UserDTO(BaseModel):
    """The signed-in user as reported by the identity provider."""
    id: str
    email: str | None = None
    role: UserRole = UserRole.USER


class ProfileDTO(BaseModel):
    id: str | None = None
    role: UserRole | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
