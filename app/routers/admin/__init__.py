"""
Admin router module
"""

from fastapi import APIRouter, Depends
from .stats import router as stats_router
from .students import router as students_router
from ...dependencies import admin_required

# Create main admin router; every endpoint below requires the admin role
router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Admin"],
    dependencies=[Depends(admin_required)],
)

# Include all sub-routers
router.include_router(stats_router)
router.include_router(students_router)
