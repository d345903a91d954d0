from typing import Any, Dict, Iterable, List, Optional, Tuple
import math
import re

from bson import ObjectId
from bson.errors import InvalidId


def parse_positive_int(value: Optional[Any], default: int) -> int:
    """Parse a query value as an int >= 1, falling back to default

    Args:
        value: Raw query value (string, int, or None)
        default: Value used when the input is missing, non-numeric, or < 1

    Returns:
        A positive integer
    """
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


def clamp_pagination(
    page: Optional[Any],
    limit: Optional[Any],
    default_limit: int = 10,
    max_limit: int = 100,
) -> Tuple[int, int]:
    """Turn raw page/limit query values into a safe (page, limit) pair

    Args:
        page: Raw page value; non-numeric or < 1 becomes 1
        limit: Raw limit value; non-numeric or < 1 becomes default_limit
        default_limit: Page size used when limit is unusable
        max_limit: Upper bound for the page size

    Returns:
        Tuple of (page, limit)
    """
    page_num = parse_positive_int(page, 1)
    page_size = min(parse_positive_int(limit, default_limit), max_limit)
    return page_num, page_size


def build_pagination(page: int, page_size: int, total_count: int) -> Dict[str, int]:
    """Pagination descriptor; total mirrors totalCount for older clients"""
    total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
    return {
        "page": page,
        "pageSize": page_size,
        "totalCount": total_count,
        "total": total_count,
        "totalPages": total_pages,
    }


def normalize_tags(tags: Optional[Iterable[Any]]) -> List[str]:
    """Trim tags, drop empty ones, and de-duplicate keeping first-seen order"""
    if not tags:
        return []
    seen = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def create_search_filter(
    search_text: Optional[str], fields: List[str]
) -> Optional[Dict]:
    """Create a case-insensitive literal substring filter over several fields

    Args:
        search_text: Text to search for; regex metacharacters are escaped
        fields: List of fields to search in (array fields match per element)

    Returns:
        MongoDB filter dictionary or None if search_text is empty
    """
    if not search_text or not search_text.strip():
        return None

    pattern = re.escape(search_text.strip())
    return {
        "$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]
    }


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a path id; None when it is not a valid ObjectId"""
    if not isinstance(value, (str, ObjectId)):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
