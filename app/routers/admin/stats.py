"""
Dashboard statistics endpoints for admin
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...dependencies import get_admin_service
from ...services.admin_service import AdminService

router = APIRouter(tags=["Admin - Stats"])


@router.get(
    "/stats",
    response_model=Dict[str, Any],
    summary="Dashboard statistics",
    description="User and blog counters for the admin dashboard",
)
async def get_stats(service: AdminService = Depends(get_admin_service)):
    """Get user and blog statistics (Admin only)"""
    stats = await service.get_dashboard_stats()
    return {"success": True, "stats": stats}
