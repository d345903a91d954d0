"""
Student management endpoints for admin
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...dependencies import get_admin_service
from ...services.admin_service import AdminService

router = APIRouter(prefix="/students", tags=["Admin - Students"])


@router.get(
    "",
    response_model=Dict[str, Any],
    summary="List all students",
    description="Admin endpoint to list all students, newest first",
)
async def list_students(service: AdminService = Depends(get_admin_service)):
    """List all students (Admin only)"""
    students = await service.list_students()
    return {"success": True, "students": students}
