"""
Admin service for dashboard statistics and student listings
"""

from typing import Dict, Any, List, Optional
from datetime import datetime, timedelta, timezone
import logging

from ..db import Database
from ..models.blog import Blog
from ..models.enums import UserRole
from ..models.user import User

logger = logging.getLogger(__name__)

ACTIVE_WINDOW_DAYS = 30


def _date_only(value: Optional[datetime], fallback: str) -> str:
    return value.date().isoformat() if value else fallback


class AdminService:
    """Service class for admin dashboard operations"""

    def __init__(self, database: Database):
        self.database = database
        self.blogs = database.collection(Blog.Settings.name)

    async def get_user_stats(self) -> Dict[str, int]:
        # Naive cutoff; BSON encodes naive datetimes as UTC
        active_since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(
            days=ACTIVE_WINDOW_DAYS
        )

        total_students = await User.find({"role": UserRole.STUDENT.value}).count()
        total_admins = await User.find({"role": UserRole.ADMIN.value}).count()
        active_users = await User.find(
            {"role": UserRole.STUDENT.value, "updated_at": {"$gte": active_since}}
        ).count()

        return {
            "totalStudents": total_students,
            "totalAdmins": total_admins,
            "activeUsers": active_users,
            "totalUsers": total_students + total_admins,
        }

    async def get_blog_stats(self) -> Dict[str, int]:
        total = published = total_views = total_likes = total_comments = 0

        cursor = self.blogs.find(
            {}, {"published": 1, "views": 1, "likes": 1, "comments": 1}
        )
        for document in await cursor.to_list(length=None):
            total += 1
            if document.get("published"):
                published += 1
            total_views += document.get("views") or 0
            total_likes += len(document.get("likes") or [])
            total_comments += len(document.get("comments") or [])

        return {
            "total": total,
            "published": published,
            "draft": total - published,
            "totalViews": total_views,
            "totalLikes": total_likes,
            "totalComments": total_comments,
        }

    async def get_dashboard_stats(self) -> Dict[str, Any]:
        """
        Aggregate user and blog statistics

        Courses and revenue are reported as zero: this service has no course
        or payment store.
        """
        return {
            "users": await self.get_user_stats(),
            "blogs": await self.get_blog_stats(),
            "courses": {"total": 0, "active": 0, "draft": 0},
            "revenue": {"total": 0, "monthly": 0, "growth": 0},
        }

    async def list_students(self) -> List[Dict[str, Any]]:
        """Students, newest registration first"""
        students = (
            await User.find({"role": UserRole.STUDENT.value})
            .sort([("created_at", -1)])
            .to_list()
        )
        logger.info(f"Found {len(students)} students in database")

        return [
            {
                "id": str(user.id),
                "name": user.name,
                "email": user.email,
                "phone": user.phone or "Not provided",
                "joinDate": _date_only(user.created_at, "Unknown"),
                "enrolledCourses": len(user.enrolled_courses),
                "status": "active" if user.is_active else "inactive",
                "lastLogin": _date_only(user.last_login, "Never"),
            }
            for user in students
        ]
