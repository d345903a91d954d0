from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
import pymongo
from pymongo import IndexModel

from .base import BaseDocument
from .enums import UserRole


class User(BaseDocument):
    name: str = Field(..., max_length=50)
    email: EmailStr
    password_hash: str
    role: UserRole = UserRole.STUDENT

    # Profile fields
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    profile_image: Optional[str] = None
    is_active: bool = True

    # Course references
    enrolled_courses: List[str] = []

    last_login: Optional[datetime] = None

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", pymongo.ASCENDING)], unique=True),
            [("role", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)],
        ]

    @field_validator("name", "phone", "address", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value
