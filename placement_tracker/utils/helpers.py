import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from placement_tracker.core.exceptions import ValidationError
from placement_tracker.dependencies.error_code import ErrorCode


def validate_object_id(id_str: str) -> bool:
    """
    Validate if string is a valid MongoDB ObjectId.

    Args:
        id_str: String to validate

    Returns:
        bool: True if valid ObjectId
    """
    if isinstance(id_str, ObjectId):
        return True
    if not isinstance(id_str, str) or len(id_str) != 24:
        return False
    return ObjectId.is_valid(id_str)


def parse_object_id(value: Any, field_name: str = "id") -> ObjectId:
    """
    Convert a client supplied id into an ObjectId.

    Raises:
        ValidationError: If the value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    if not validate_object_id(value):
        raise ValidationError(f"Invalid {field_name}", ErrorCode.INVALID_OBJECT_ID)
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {field_name}", ErrorCode.INVALID_OBJECT_ID)


def build_search_query(
    search_term: Optional[str],
    fields: List[str],
) -> Optional[Dict]:
    """
    Build MongoDB search query from search term.

    Args:
        search_term: Search term
        fields: Fields to search in; on list fields any element may match

    Returns:
        Optional[Dict]: MongoDB query or None

    Example:
        >>> build_search_query("infra", ["company", "role"])
        {'$or': [
            {'company': {'$regex': 'infra', '$options': 'i'}},
            {'role': {'$regex': 'infra', '$options': 'i'}}
        ]}
    """
    if not search_term:
        return None

    search_term = search_term.strip()
    if not search_term:
        return None

    pattern = re.escape(search_term)
    regex_queries = [
        {field: {"$regex": pattern, "$options": "i"}}
        for field in fields
    ]
    return {"$or": regex_queries} if regex_queries else None


def calculate_pagination(
    total_items: int,
    page: int,
    per_page: int
) -> Dict[str, Any]:
    """
    Calculate pagination metadata.

    Example:
        >>> calculate_pagination(150, 3, 20)
        {
            'total': 150,
            'page': 3,
            'per_page': 20,
            'total_pages': 8,
            'offset': 40
        }
    """
    if page < 1:
        page = 1
    if per_page < 1:
        per_page = 20

    total_pages = (total_items + per_page - 1) // per_page
    offset = (page - 1) * per_page

    return {
        "total": total_items,
        "page": page,
        "per_page": per_page,
        "total_pages": total_pages,
        "offset": offset
    }
