"""
Per-request authorization for blog operations.

Stateless: the caller identity comes from the auth layer (or is None for an
anonymous request) and is checked against the target blog on every call.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .errors import AuthRequired, Forbidden
from .models.blog import AuthorSnapshot, Blog
from .models.enums import UserRole
from .models.user import User

logger = logging.getLogger(__name__)


class CallerIdentity(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT

    @classmethod
    def from_user(cls, user: User) -> "CallerIdentity":
        return cls(id=str(user.id), name=user.name, email=user.email, role=user.role)

    def snapshot(self) -> AuthorSnapshot:
        return AuthorSnapshot(id=self.id, name=self.name, email=self.email)


class Access(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    AUTHOR = "author"


OPERATION_ACCESS = {
    "list": Access.ANONYMOUS,
    "list_tags": Access.ANONYMOUS,
    "list_comments": Access.ANONYMOUS,
    "get": Access.ANONYMOUS,  # drafts are further limited to their author
    "create": Access.AUTHENTICATED,
    "list_mine": Access.AUTHENTICATED,
    "toggle_like": Access.AUTHENTICATED,
    "add_comment": Access.AUTHENTICATED,
    "update": Access.AUTHOR,
    "delete": Access.AUTHOR,
}


def require_identity(identity: Optional[CallerIdentity]) -> CallerIdentity:
    if identity is None:
        raise AuthRequired()
    return identity


def is_author(identity: Optional[CallerIdentity], blog: Blog) -> bool:
    # Exact string comparison, no case folding
    return identity is not None and identity.id == blog.author.id


def authorize(
    operation: str,
    identity: Optional[CallerIdentity],
    blog: Optional[Blog] = None,
) -> Optional[CallerIdentity]:
    """
    Check the caller against an operation's access level.

    Raises:
        AuthRequired: operation needs a caller and there is none
        Forbidden: author-only operation attempted by someone else
    """
    access = OPERATION_ACCESS[operation]

    if access is Access.ANONYMOUS:
        return identity

    caller = require_identity(identity)

    if access is Access.AUTHOR:
        if blog is None:
            raise ValueError(f"{operation} needs the target blog for an ownership check")
        if not is_author(caller, blog):
            logger.warning(
                f"User {caller.id} denied {operation} on blog {blog.id} "
                f"owned by {blog.author.id}"
            )
            raise Forbidden(f"Not authorized to {operation} this blog")

    return caller
