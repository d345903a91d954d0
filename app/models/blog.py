from bson import ObjectId
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone
import pymongo

from .base import BaseDocument

TITLE_MAX_LENGTH = 200
EXCERPT_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 1000


class AuthorSnapshot(BaseModel):
    """Author identity frozen at write time; later profile edits do not reach it"""

    id: str
    name: str
    email: str


class Comment(BaseModel):
    id: str = Field(default_factory=lambda: str(ObjectId()))
    author: AuthorSnapshot
    content: str = Field(..., max_length=COMMENT_MAX_LENGTH)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reserved: no endpoint mutates comment likes yet
    likes: List[str] = []


class Blog(BaseDocument):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    content: str
    excerpt: str = Field(..., max_length=EXCERPT_MAX_LENGTH)

    author: AuthorSnapshot

    # Organization
    tags: List[str] = []

    # Media
    featured_image: Optional[str] = ""

    # Publishing
    published: bool = False
    published_at: Optional[datetime] = None

    # Engagement
    views: int = 0
    likes: List[str] = []  # user ids, treated as a set
    comments: List[Comment] = []

    class Settings:
        name = "blogs"
        indexes = [
            [("published", pymongo.ASCENDING), ("published_at", pymongo.DESCENDING)],
            [("author.id", pymongo.ASCENDING)],
            [("tags", pymongo.ASCENDING)],
        ]

    def is_visible_to(self, user_id: Optional[str]) -> bool:
        """Drafts are visible only to their author"""
        return self.published or (user_id is not None and user_id == self.author.id)

    def publish(self):
        self.published = True
        self.published_at = datetime.now(timezone.utc)
