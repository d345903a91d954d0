from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth import AuthService
from .db import Database
from .errors import AuthRequired, Forbidden
from .models.enums import UserRole
from .models.user import User
from .permissions import CallerIdentity
from .services.admin_service import AdminService
from .services.blog_service import BlogService

# Security setup; missing credentials are not an error here, the guards decide
optional_security = HTTPBearer(auto_error=False)


async def get_database(request: Request) -> Database:
    """
    FastAPI dependency: the application's store handle.
    First call triggers init_beanie once; subsequent calls are cheap.
    """
    database: Database = request.app.state.database
    await database.connect()
    return database


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    database: Database = Depends(get_database),
) -> Optional[User]:
    """Return current user if credentials are provided, otherwise None."""
    if not credentials:
        return None
    return await AuthService.get_current_user(credentials.credentials)


# Dependency to get current user
async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Get current user from JWT token"""
    if user is None:
        raise AuthRequired()
    return user


async def get_caller_identity(
    user: Optional[User] = Depends(get_current_user_optional),
) -> Optional[CallerIdentity]:
    """Identity handed to the blog guards; None for anonymous requests"""
    return CallerIdentity.from_user(user) if user else None


# Admin-only dependency
async def admin_required(current_user: User = Depends(get_current_user)) -> User:
    """Check if current user has admin role"""
    if current_user.role != UserRole.ADMIN:
        raise Forbidden("Admin access required")
    return current_user


async def get_blog_service(database: Database = Depends(get_database)) -> BlogService:
    return BlogService(database)


async def get_admin_service(database: Database = Depends(get_database)) -> AdminService:
    return AdminService(database)
