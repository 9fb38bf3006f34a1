from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    STAFF = "staff"
    ADMIN = "admin"

    def can_use_pos(self) -> bool:
        return self in (UserRole.STAFF, UserRole.ADMIN)
