import math
from typing import Any

from sqlalchemy.orm import Query

from app.db.schemas import Pagination


def build_filters(**params: Any) -> dict[str, Any]:
    """Keep only the filters the caller actually supplied."""
    return {key: value for key, value in params.items() if value}


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def paginate(query: Query, page: int, limit: int) -> tuple[list, Pagination]:
    # count and page are read against the same filtered query; no snapshot
    # isolation is asked for between the two reads
    total = query.order_by(None).count()
    rows = query.offset(page_offset(page, limit)).limit(limit).all()
    pagination = Pagination(page=page, limit=limit, total=total, total_pages=total_pages(total, limit))
    return rows, pagination
