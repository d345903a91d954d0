from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ...config import settings
from ...dependencies import get_blog_service, get_caller_identity
from ...permissions import CallerIdentity
from ...services.blog_service import BlogService
from ...utils import clamp_pagination
from .schemas import (
    BlogCreateRequest,
    BlogResponse,
    BlogSummaryResponse,
    BlogUpdateRequest,
)

router = APIRouter(tags=["Blogs"])


def _page_params(page: Optional[str], limit: Optional[str]):
    return clamp_pagination(
        page,
        limit,
        default_limit=settings.BLOG_DEFAULT_PAGE_SIZE,
        max_limit=settings.BLOG_MAX_PAGE_SIZE,
    )


@router.get("", response_model=Dict[str, Any])
async def list_blogs(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Items per page"),
    tag: Optional[str] = Query(None, description="Only blogs carrying this tag"),
    search: Optional[str] = Query(None, description="Search title, excerpt and tags"),
    service: BlogService = Depends(get_blog_service),
):
    """Get published blogs with tag/text filtering and pagination"""
    page_num, page_size = _page_params(page, limit)
    blogs, pagination = await service.list_blogs(
        page=page_num, limit=page_size, tag=tag, search=search
    )

    return {
        "success": True,
        "blogs": [BlogSummaryResponse.from_document(blog) for blog in blogs],
        "pagination": pagination,
    }


@router.get("/tags", response_model=Dict[str, Any])
async def list_tags(service: BlogService = Depends(get_blog_service)):
    """Get all unique tags used by published blogs"""
    tags = await service.list_tags()
    return {"success": True, "tags": tags}


@router.get("/mine", response_model=Dict[str, Any])
async def list_my_blogs(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Items per page"),
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Get the caller's own blogs, drafts included"""
    page_num, page_size = _page_params(page, limit)
    blogs, pagination = await service.list_author_blogs(
        identity, page=page_num, limit=page_size
    )

    return {
        "success": True,
        "blogs": [BlogSummaryResponse.from_document(blog) for blog in blogs],
        "pagination": pagination,
    }


@router.post("", response_model=Dict[str, Any])
async def create_blog(
    blog_data: BlogCreateRequest,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """
    Create a new blog.

    - **title**: up to 200 characters
    - **content**: HTML body; unsafe markup is stripped
    - **excerpt**: up to 500 characters
    - **tags**, **featuredImage**, **published**: optional
    """
    blog = await service.create_blog(blog_data.model_dump(), identity)

    return {
        "success": True,
        "message": "Blog created successfully",
        "blog": BlogResponse.from_document(blog),
    }


@router.get("/{blog_id}", response_model=Dict[str, Any])
async def get_blog(
    blog_id: str,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Get a blog by id; drafts are only visible to their author"""
    blog = await service.get_blog(blog_id, identity)
    return {"success": True, "blog": BlogResponse.from_document(blog)}


@router.put("/{blog_id}", response_model=Dict[str, Any])
async def update_blog(
    blog_id: str,
    blog_data: BlogUpdateRequest,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Update a blog (author only); omitted fields keep their values"""
    blog = await service.update_blog(
        blog_id, identity, blog_data.model_dump(exclude_unset=True)
    )

    return {
        "success": True,
        "message": "Blog updated successfully",
        "blog": BlogResponse.from_document(blog),
    }


@router.delete("/{blog_id}", response_model=Dict[str, Any])
async def delete_blog(
    blog_id: str,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Delete a blog (author only)"""
    await service.delete_blog(blog_id, identity)
    return {"success": True, "message": "Blog deleted successfully"}
