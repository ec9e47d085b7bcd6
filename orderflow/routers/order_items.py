"""
Order item endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_order_item_service
from ..schemas import (
    OrderItemDetailsResponse,
    OrderItemRequest,
    OrderItemResponse,
    PageResponse,
)
from ..services import OrderItemService

router = APIRouter(prefix="/order-items", tags=["order-items"])


@router.post("", response_model=OrderItemResponse, status_code=status.HTTP_201_CREATED)
def save_order_item(
    request: OrderItemRequest, service: OrderItemService = Depends(get_order_item_service)
):
    return service.save(
        order_id=request.order_id, product_id=request.product_id, quantity=request.quantity
    )


@router.get("", response_model=PageResponse[OrderItemResponse])
def find_order_items(
    item_id: Optional[str] = None,
    order_id: Optional[str] = None,
    product_id: Optional[str] = None,
    min_quantity: Optional[int] = None,
    max_quantity: Optional[int] = None,
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("order_id"),
    service: OrderItemService = Depends(get_order_item_service),
):
    """Filtered, paginated order item listing."""
    return service.find_page(
        item_id=item_id,
        order_id=order_id,
        product_id=product_id,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/details", response_model=PageResponse[OrderItemDetailsResponse])
def find_order_item_details(
    item_id: Optional[str] = None,
    product_id: Optional[str] = None,
    order_id: Optional[str] = None,
    client_id: Optional[int] = None,
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("quantity"),
    service: OrderItemService = Depends(get_order_item_service),
):
    """Order lines with their order, client and product."""
    return service.find_details_page(
        item_id=item_id,
        product_id=product_id,
        order_id=order_id,
        client_id=client_id,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )
