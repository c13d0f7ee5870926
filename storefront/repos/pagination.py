# storefront/repos/pagination.py
import math
from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.domain.enums import SortOrder
from storefront.domain.schemas import PaginationParams


def _sort_column(model, sort: str | None):
    columns = model.__mapper__.columns
    if sort and sort in columns.keys():
        return getattr(model, sort)
    return model.created_at


def paginate(db: Session, stmt, model, params: PaginationParams) -> Dict[str, Any]:
    """Run ``stmt`` one page at a time; unknown sort fields fall back to created_at."""
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0

    column = _sort_column(model, params.sort)
    ordering = column.asc() if params.order == SortOrder.ASC else column.desc()

    rows = db.scalars(
        stmt.order_by(ordering, model.id.desc())
        .offset((params.page - 1) * params.limit)
        .limit(params.limit)
    ).all()

    return {
        "data": list(rows),
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "total_pages": math.ceil(total / params.limit),
    }
