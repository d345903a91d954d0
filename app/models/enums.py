from enum import Enum


class UserRole(str, Enum):
    """User roles"""

    STUDENT = "student"
    ADMIN = "admin"
