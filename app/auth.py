from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from pymongo.errors import DuplicateKeyError

from .config import settings
from .errors import AuthRequired, Forbidden, ValidationError
from .models.base import CamelModel
from .models.enums import UserRole
from .models.user import User

# Configure logging
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6


class TokenData(BaseModel):
    email: Optional[str] = None
    token_type: Optional[str] = None


class Token(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


class UserRegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Asha Verma",
                "email": "asha@example.com",
                "password": "secret123",
                "phone": "+911234567890",
            }
        },
    )


class UserLoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    profile_image: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    profile_image: Optional[str] = None
    is_active: bool
    enrolled_courses: list[str] = []
    created_at: datetime
    last_login: Optional[datetime] = None


class AuthService:
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password"""
        return pwd_context.hash(password)

    @staticmethod
    def validate_password(password: str) -> bool:
        """Passwords need at least six characters"""
        return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH

    @staticmethod
    def create_access_token(
        data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(
                minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
            )

        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def create_refresh_token(data: dict) -> str:
        """Create JWT refresh token"""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + timedelta(
            days=settings.REFRESH_TOKEN_EXPIRE_DAYS
        )
        to_encode.update({"exp": expire, "type": "refresh"})
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def issue_tokens(user: User) -> Token:
        return Token(
            access_token=AuthService.create_access_token(data={"sub": user.email}),
            refresh_token=AuthService.create_refresh_token(data={"sub": user.email}),
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    @staticmethod
    def verify_token(token: str, expected_type: str = "access") -> TokenData:
        """Verify JWT token and return token data"""
        try:
            payload = jwt.decode(
                token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
            )
        except jwt.PyJWTError:
            raise AuthRequired("Could not validate credentials")

        email: Optional[str] = payload.get("sub")
        token_type: Optional[str] = payload.get("type")

        if email is None or token_type != expected_type:
            raise AuthRequired("Could not validate credentials")

        return TokenData(email=email, token_type=token_type)

    @staticmethod
    async def authenticate_user(email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = await User.find_one({"email": email.strip().lower()})

        if not user:
            return None

        if not AuthService.verify_password(password, user.password_hash):
            return None

        return user

    @staticmethod
    async def get_current_user(token: str) -> User:
        """Get current user from JWT access token"""
        token_data = AuthService.verify_token(token)
        user = await User.find_one({"email": token_data.email})

        if user is None:
            raise AuthRequired("User not found")

        if not user.is_active:
            raise AuthRequired("Account is deactivated")

        return user

    @staticmethod
    async def register_user(user_data: UserRegisterRequest) -> User:
        """Register a new student account"""
        email = user_data.email.strip().lower()

        existing_user = await User.find_one({"email": email})
        if existing_user:
            raise ValidationError("User with this email already exists")

        if not AuthService.validate_password(user_data.password):
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if not user_data.name.strip():
            raise ValidationError("Name is required")

        new_user = User(
            name=user_data.name,
            email=email,
            password_hash=AuthService.get_password_hash(user_data.password),
            phone=user_data.phone,
            address=user_data.address,
            date_of_birth=user_data.date_of_birth,
            role=UserRole.STUDENT,
            is_active=True,
        )

        try:
            await new_user.insert()
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise ValidationError("User with this email already exists")

        logger.info(f"Registered new student {new_user.id}")
        return new_user

    @staticmethod
    async def login_user(login_data: UserLoginRequest) -> tuple[User, Token]:
        """Login user and return tokens"""
        user = await AuthService.authenticate_user(login_data.email, login_data.password)

        if not user:
            logger.warning(f"Failed login attempt for {login_data.email}")
            raise AuthRequired("Incorrect email or password")

        if not user.is_active:
            raise Forbidden("Account is deactivated. Please contact admin.")

        user.last_login = datetime.now(timezone.utc)
        user.update_timestamp()
        await user.save()

        return user, AuthService.issue_tokens(user)

    @staticmethod
    async def refresh_tokens(refresh_token: str) -> tuple[User, Token]:
        """Exchange a refresh token for a new token pair"""
        token_data = AuthService.verify_token(refresh_token, expected_type="refresh")
        user = await User.find_one({"email": token_data.email})

        if user is None or not user.is_active:
            raise AuthRequired("Could not validate credentials")

        return user, AuthService.issue_tokens(user)

    @staticmethod
    async def update_profile(user: User, changes: Dict[str, Any]) -> User:
        """
        Apply profile edits. Author snapshots already embedded in blogs and
        comments keep the old name.
        """
        for field in ("name", "phone", "address", "date_of_birth", "profile_image"):
            value = changes.get(field)
            if value is None:
                continue
            if field == "name" and not value.strip():
                raise ValidationError("Name cannot be empty")
            setattr(user, field, value)

        user.update_timestamp()
        await user.save()
        return user

    @staticmethod
    def convert_user_to_response(user: User) -> UserResponse:
        """Convert User model to UserResponse"""
        return UserResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            phone=user.phone,
            address=user.address,
            date_of_birth=user.date_of_birth,
            profile_image=user.profile_image,
            is_active=user.is_active,
            enrolled_courses=user.enrolled_courses,
            created_at=user.created_at,
            last_login=user.last_login,
        )
