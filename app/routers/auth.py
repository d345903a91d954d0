from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, status
from pymongo.errors import PyMongoError

from ..auth import (
    AuthService,
    ProfileUpdateRequest,
    RefreshTokenRequest,
    UserLoginRequest,
    UserRegisterRequest,
)
from ..dependencies import get_current_user, get_database
from ..errors import StoreError
from ..input_sanitizer import sanitizer
from ..models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Authentication"],
    dependencies=[Depends(get_database)],
)


@router.post(
    "/register",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Register a new student account with email, password, and basic information",
)
async def register(user_data: UserRegisterRequest):
    """
    Register a new user account.

    - **name**: Full name of the user (max 50 characters)
    - **email**: Valid email address (will be used for login)
    - **password**: At least 6 characters
    - **phone**, **address**, **dateOfBirth**: optional

    Returns user information and success message.
    """
    sanitized_data = sanitizer.sanitize_dict(user_data.model_dump())

    try:
        new_user = await AuthService.register_user(UserRegisterRequest(**sanitized_data))
    except PyMongoError as e:
        logger.exception("Registration failed")
        raise StoreError("Registration failed") from e

    return {
        "success": True,
        "message": "User registered successfully",
        "user": AuthService.convert_user_to_response(new_user),
    }


@router.post(
    "/login",
    response_model=Dict[str, Any],
    summary="Login user",
    description="Authenticate user and return access and refresh tokens",
)
async def login(login_data: UserLoginRequest):
    """
    Authenticate user and return tokens.

    The dashboard URL depends on the role (student or admin).
    """
    try:
        user, token = await AuthService.login_user(login_data)
    except PyMongoError as e:
        logger.exception("Login failed")
        raise StoreError("Login failed") from e

    return {
        "success": True,
        "message": "Login successful",
        "user": AuthService.convert_user_to_response(user),
        "tokens": token,
        "dashboardUrl": f"/{user.role.value}/dashboard",
    }


@router.post(
    "/refresh",
    response_model=Dict[str, Any],
    summary="Refresh access token",
    description="Exchange a refresh token for a new token pair",
)
async def refresh_access_token(request_data: RefreshTokenRequest):
    user, token = await AuthService.refresh_tokens(request_data.refresh_token)
    return {"success": True, "tokens": token}


@router.get(
    "/me",
    response_model=Dict[str, Any],
    summary="Get current user profile",
    description="Get the profile information of the currently authenticated user",
)
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's profile information.

    Requires valid access token in Authorization header.
    """
    return {"success": True, "user": AuthService.convert_user_to_response(current_user)}


@router.put(
    "/me",
    response_model=Dict[str, Any],
    summary="Update user profile",
    description="Update current user's profile information",
)
async def update_profile(
    update_data: ProfileUpdateRequest, current_user: User = Depends(get_current_user)
):
    """
    Update user profile information.

    Allowed fields: name, phone, address, dateOfBirth, profileImage.
    Blogs and comments written earlier keep the name they were written under.
    """
    changes = sanitizer.sanitize_dict(update_data.model_dump(exclude_unset=True))
    user = await AuthService.update_profile(current_user, changes)

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": AuthService.convert_user_to_response(user),
    }
