"""
Blog service for blog content management operations
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo.errors import PyMongoError

from ..db import Database
from ..errors import AppError, NotFound, StoreError, ValidationError
from ..input_sanitizer import sanitizer
from ..models.blog import (
    Blog,
    Comment,
    COMMENT_MAX_LENGTH,
    EXCERPT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from ..permissions import CallerIdentity, authorize, require_identity
from ..utils import build_pagination, create_search_filter, normalize_tags, to_object_id

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["title", "excerpt", "tags"]


def store_operation(action: str):
    """Surface driver failures as StoreError, logging the detail"""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except AppError:
                raise
            except PyMongoError as e:
                logger.exception(f"Store failure while trying to {action}")
                raise StoreError(f"Failed to {action}") from e

        return wrapper

    return decorator


def _clean_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _check_length(field: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValidationError(f"{field} cannot be more than {limit} characters")


class BlogService:
    """Service class for blog operations, bound to one store handle"""

    def __init__(self, database: Database):
        self.database = database
        self.blogs = database.collection(Blog.Settings.name)

    async def _get_visible(
        self, blog_id: str, identity: Optional[CallerIdentity]
    ) -> Tuple[ObjectId, Blog]:
        """
        Load a blog the caller may see.

        Drafts viewed by anyone but their author are reported exactly like a
        missing blog.
        """
        oid = to_object_id(blog_id)
        if oid is None:
            raise NotFound("Blog not found")

        blog = await Blog.get(oid)
        caller_id = identity.id if identity else None
        if blog is None or not blog.is_visible_to(caller_id):
            raise NotFound("Blog not found")
        return oid, blog

    async def _reload(self, oid: ObjectId) -> Blog:
        blog = await Blog.get(oid)
        if blog is None:
            raise NotFound("Blog not found")
        return blog

    @store_operation("create blog")
    async def create_blog(
        self, blog_data: Dict[str, Any], identity: Optional[CallerIdentity]
    ) -> Blog:
        """
        Create a new blog

        Args:
            blog_data: title, content, excerpt and optional tags,
                featured_image, published
            identity: Caller creating the blog; becomes the author

        Returns:
            The inserted blog
        """
        caller = authorize("create", identity)

        title = _clean_text(blog_data.get("title"))
        excerpt = _clean_text(blog_data.get("excerpt"))
        content = sanitizer.sanitize_html(blog_data.get("content") or "")

        if not title or not content or not excerpt:
            raise ValidationError("Title, content, and excerpt are required")
        _check_length("Title", title, TITLE_MAX_LENGTH)
        _check_length("Excerpt", excerpt, EXCERPT_MAX_LENGTH)

        blog = Blog(
            title=title,
            content=content,
            excerpt=excerpt,
            author=caller.snapshot(),
            tags=normalize_tags(blog_data.get("tags")),
            featured_image=sanitizer.sanitize_url(blog_data.get("featured_image")) or "",
        )
        if blog_data.get("published"):
            blog.publish()

        await blog.insert()
        logger.info(f"Blog {blog.id} created by {caller.id} (published={blog.published})")
        return blog

    @store_operation("fetch blog")
    async def get_blog(
        self, blog_id: str, identity: Optional[CallerIdentity] = None
    ) -> Blog:
        """Fetch a visible blog and count the view"""
        authorize("get", identity)
        oid, _ = await self._get_visible(blog_id, identity)

        result = await self.blogs.update_one({"_id": oid}, {"$inc": {"views": 1}})
        if result.matched_count == 0:
            raise NotFound("Blog not found")

        return await self._reload(oid)

    @store_operation("fetch blogs")
    async def list_blogs(
        self,
        page: int = 1,
        limit: int = 10,
        tag: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Blog], Dict[str, int]]:
        """
        List published blogs, newest publication first

        Args:
            page: Page number, 1-based
            limit: Items per page
            tag: Exact tag the blog must carry
            search: Case-insensitive substring of title, excerpt, or a tag

        Returns:
            Tuple of (blogs, pagination descriptor)
        """
        authorize("list", None)

        query_filters: Dict[str, Any] = {"published": True}
        if tag and tag.strip():
            query_filters["tags"] = tag.strip()

        search_filter = create_search_filter(search, SEARCH_FIELDS)
        if search_filter:
            query_filters.update(search_filter)

        return await self._paginate(
            query_filters, [("published_at", -1), ("_id", -1)], page, limit
        )

    @store_operation("fetch your blogs")
    async def list_author_blogs(
        self,
        identity: Optional[CallerIdentity],
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Blog], Dict[str, int]]:
        """Every blog of the caller, drafts included, newest first"""
        caller = authorize("list_mine", identity)
        return await self._paginate(
            {"author.id": caller.id}, [("created_at", -1), ("_id", -1)], page, limit
        )

    async def _paginate(
        self,
        query_filters: Dict[str, Any],
        sort: List[Tuple[str, int]],
        page: int,
        limit: int,
    ) -> Tuple[List[Blog], Dict[str, int]]:
        skip = (page - 1) * limit
        blogs = (
            await Blog.find(query_filters)
            .sort(sort)
            .skip(skip)
            .limit(limit)
            .to_list()
        )
        total = await Blog.find(query_filters).count()
        return blogs, build_pagination(page, limit, total)

    @store_operation("update blog")
    async def update_blog(
        self,
        blog_id: str,
        identity: Optional[CallerIdentity],
        changes: Dict[str, Any],
    ) -> Blog:
        """
        Apply a partial update from the author

        Fields that are missing, None, or blank keep their stored value; an
        explicit empty tag list clears the tags.
        """
        caller = require_identity(identity)

        oid = to_object_id(blog_id)
        blog = await Blog.get(oid) if oid is not None else None
        if blog is None:
            raise NotFound("Blog not found")

        authorize("update", caller, blog)

        now = datetime.now(timezone.utc)
        update_data: Dict[str, Any] = {}

        title = _clean_text(changes.get("title"))
        if title:
            _check_length("Title", title, TITLE_MAX_LENGTH)
            update_data["title"] = title

        excerpt = _clean_text(changes.get("excerpt"))
        if excerpt:
            _check_length("Excerpt", excerpt, EXCERPT_MAX_LENGTH)
            update_data["excerpt"] = excerpt

        content = sanitizer.sanitize_html(changes.get("content") or "")
        if content:
            update_data["content"] = content

        if changes.get("tags") is not None:
            update_data["tags"] = normalize_tags(changes["tags"])

        if changes.get("featured_image") is not None:
            update_data["featured_image"] = sanitizer.sanitize_url(changes["featured_image"])

        published = changes.get("published")
        if published is not None:
            update_data["published"] = bool(published)
            # Only a draft -> published transition stamps the date
            if published and not blog.published:
                update_data["published_at"] = now

        update_data["updated_at"] = now

        result = await self.blogs.update_one({"_id": oid}, {"$set": update_data})
        if result.matched_count == 0:
            raise NotFound("Blog not found")

        logger.info(f"Blog {oid} updated by {caller.id}: {sorted(update_data)}")
        return await self._reload(oid)

    @store_operation("delete blog")
    async def delete_blog(
        self, blog_id: str, identity: Optional[CallerIdentity]
    ) -> bool:
        """Delete a blog together with its embedded comments and likes"""
        caller = require_identity(identity)

        oid = to_object_id(blog_id)
        blog = await Blog.get(oid) if oid is not None else None
        if blog is None:
            raise NotFound("Blog not found")

        authorize("delete", caller, blog)

        await blog.delete()
        logger.info(f"Blog {oid} deleted by {caller.id}")
        return True

    @store_operation("toggle like")
    async def toggle_like(
        self, blog_id: str, identity: Optional[CallerIdentity]
    ) -> Tuple[bool, int]:
        """
        Flip the caller's like on a blog

        Toggle semantics: two calls by the same user cancel out.

        Returns:
            Tuple of (liked, likes count)
        """
        caller = authorize("toggle_like", identity)
        oid, _ = await self._get_visible(blog_id, caller)

        pulled = await self.blogs.update_one(
            {"_id": oid, "likes": caller.id}, {"$pull": {"likes": caller.id}}
        )
        if pulled.modified_count:
            liked = False
        else:
            added = await self.blogs.update_one(
                {"_id": oid}, {"$addToSet": {"likes": caller.id}}
            )
            if added.matched_count == 0:
                raise NotFound("Blog not found")
            liked = True

        blog = await self._reload(oid)
        return liked, len(blog.likes)

    @store_operation("add comment")
    async def add_comment(
        self,
        blog_id: str,
        identity: Optional[CallerIdentity],
        content: Optional[str],
    ) -> Comment:
        """Append a comment by the caller and return it"""
        caller = authorize("add_comment", identity)

        text = sanitizer.strip_markup(content or "")
        if not text:
            raise ValidationError("Comment content is required")
        _check_length("Comment", text, COMMENT_MAX_LENGTH)

        oid, _ = await self._get_visible(blog_id, caller)

        comment = Comment(author=caller.snapshot(), content=text)
        result = await self.blogs.update_one(
            {"_id": oid},
            {
                "$push": {"comments": comment.model_dump()},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        if result.matched_count == 0:
            raise NotFound("Blog not found")

        return comment

    @store_operation("fetch comments")
    async def list_comments(
        self, blog_id: str, identity: Optional[CallerIdentity] = None
    ) -> List[Comment]:
        """Comments of a visible blog, newest first"""
        authorize("list_comments", identity)
        _, blog = await self._get_visible(blog_id, identity)
        return sorted(blog.comments, key=lambda c: c.created_at, reverse=True)

    @store_operation("fetch tags")
    async def list_tags(self) -> List[str]:
        """Unique tags of published blogs, sorted"""
        authorize("list_tags", None)
        cursor = self.blogs.find({"published": True}, {"tags": 1})
        documents = await cursor.to_list(length=None)

        tags = set()
        for document in documents:
            tags.update(tag for tag in document.get("tags") or [] if tag)
        return sorted(tags)
