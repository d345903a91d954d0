"""
Blog router module
"""

from fastapi import APIRouter
from .posts import router as posts_router
from .engagement import router as engagement_router

BLOGS_PREFIX = "/api/v1/blogs"

# Create main blog router
router = APIRouter()

# Include all sub-routers; the listing and create paths are the bare prefix
router.include_router(posts_router, prefix=BLOGS_PREFIX)
router.include_router(engagement_router, prefix=BLOGS_PREFIX)
