import math
from typing import Any, Dict, List

from sqlalchemy.orm import Query

MAX_LIMIT = 100


def paginate(query: Query, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    """
    Run ``query`` for one page and describe where that page sits.
    The query must already carry its ordering.
    """
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return {"data": rows, "pagination": page_info(total, page, limit)}


def page_info(total: int, page: int, limit: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "total": total,
        "itemsPerPage": limit,
        "hasNextPage": has_next,
        "hasPrevPage": has_prev,
        "nextPage": page + 1 if has_next else None,
        "prevPage": page - 1 if has_prev else None,
    }


def serialize_page(result: Dict[str, Any], schema) -> Dict[str, Any]:
    items: List[Any] = [schema.model_validate(row) for row in result["data"]]
    return {"data": items, "pagination": result["pagination"]}
