# storefront/api/deps.py
from typing import Optional

from fastapi import Query

from storefront.domain.enums import SortOrder
from storefront.domain.schemas import PaginationParams
from storefront.services.product_client import ProductClient
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: Optional[str] = Query(None, description="Field to sort by, defaults to created_at"),
    order: SortOrder = Query(SortOrder.DESC),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit, sort=sort, order=order)


def get_product_client() -> ProductClient:
    return ProductClient()
