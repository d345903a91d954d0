"""
Pydantic schemas for blog endpoints
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from ...models.base import CamelModel
from ...models.blog import AuthorSnapshot, Blog, Comment


# Request Schemas
class BlogCreateRequest(CamelModel):
    # Presence and length are checked in BlogService
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None
    featured_image: Optional[str] = None
    published: Optional[bool] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "How to plan your NEET revision",
                "content": "<p>Start with the syllabus...</p>",
                "excerpt": "A six-week revision plan",
                "tags": ["neet", "strategy"],
                "featuredImage": "/uploads/neet-plan.jpg",
                "published": True,
            }
        },
    )


class BlogUpdateRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None
    featured_image: Optional[str] = None
    published: Optional[bool] = None


class CommentCreateRequest(CamelModel):
    content: Optional[str] = None


# Response Schemas
class CommentResponse(CamelModel):
    id: str
    author: AuthorSnapshot
    content: str
    created_at: datetime
    likes: List[str] = []

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            author=comment.author,
            content=comment.content,
            created_at=comment.created_at,
            likes=comment.likes,
        )


class BlogSummaryResponse(CamelModel):
    """Listing view: no body, no comment bodies"""

    id: str
    title: str
    excerpt: str
    author: AuthorSnapshot
    tags: List[str]
    featured_image: Optional[str] = None
    published: bool
    published_at: Optional[datetime] = None
    views: int
    likes: List[str]
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, blog: Blog) -> "BlogSummaryResponse":
        return cls(**_common_fields(blog))


class BlogResponse(BlogSummaryResponse):
    content: str
    comments: List[CommentResponse]

    @classmethod
    def from_document(cls, blog: Blog) -> "BlogResponse":
        return cls(
            **_common_fields(blog),
            content=blog.content,
            comments=[CommentResponse.from_comment(c) for c in blog.comments],
        )


def _common_fields(blog: Blog) -> dict:
    return {
        "id": str(blog.id),
        "title": blog.title,
        "excerpt": blog.excerpt,
        "author": blog.author,
        "tags": blog.tags,
        "featured_image": blog.featured_image,
        "published": blog.published,
        "published_at": blog.published_at,
        "views": blog.views,
        "likes": blog.likes,
        "likes_count": len(blog.likes),
        "comments_count": len(blog.comments),
        "created_at": blog.created_at,
        "updated_at": blog.updated_at,
    }
