from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ...dependencies import get_blog_service, get_caller_identity
from ...permissions import CallerIdentity
from ...services.blog_service import BlogService
from .schemas import CommentCreateRequest, CommentResponse

router = APIRouter(tags=["Blogs - Engagement"])


@router.post("/{blog_id}/like", response_model=Dict[str, Any])
async def toggle_like(
    blog_id: str,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Like or unlike a blog"""
    liked, likes_count = await service.toggle_like(blog_id, identity)
    return {"success": True, "liked": liked, "likesCount": likes_count}


@router.post("/{blog_id}/comments", response_model=Dict[str, Any])
async def add_comment(
    blog_id: str,
    comment_data: CommentCreateRequest,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Add a comment to a blog"""
    comment = await service.add_comment(blog_id, identity, comment_data.content)

    return {
        "success": True,
        "message": "Comment added successfully",
        "comment": CommentResponse.from_comment(comment),
    }


@router.get("/{blog_id}/comments", response_model=Dict[str, Any])
async def list_comments(
    blog_id: str,
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    service: BlogService = Depends(get_blog_service),
):
    """Get all comments for a blog, newest first"""
    comments = await service.list_comments(blog_id, identity)

    return {
        "success": True,
        "comments": [CommentResponse.from_comment(c) for c in comments],
    }
