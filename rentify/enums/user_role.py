from enum import Enum


class UserRole(str, Enum):
    """Enum for the roles a user can hold"""

    USER = "user"
    HOST = "host"
    ADMIN = "admin"

    def __str__(self):
        return self.value
