from typing import Optional

from rentify.enums.user_role import UserRole
from .base_schema import CamelModel


class UserMinimumResponse(CamelModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: str
    role: UserRole = UserRole.USER
