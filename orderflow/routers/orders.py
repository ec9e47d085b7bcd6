"""
Order endpoints, including the order reports.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_order_service
from ..schemas import (
    ClientSalesReportResponse,
    OrderDetailsResponse,
    OrderRequest,
    OrderResponse,
    OrderStatusRequest,
    PageResponse,
)
from ..services import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def save_order(request: OrderRequest, service: OrderService = Depends(get_order_service)):
    return service.save(client_id=request.client_id, status=request.status)


@router.get("", response_model=PageResponse[OrderResponse])
def find_orders(
    order_id: Optional[str] = None,
    client_id: Optional[int] = None,
    date_start: Optional[datetime] = None,
    date_end: Optional[datetime] = None,
    order_status: Optional[str] = Query(None, alias="status"),
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("order_date"),
    service: OrderService = Depends(get_order_service),
):
    """Filtered, paginated order listing."""
    return service.find_page(
        order_id=order_id,
        client_id=client_id,
        date_start=date_start,
        date_end=date_end,
        status=order_status,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/details", response_model=PageResponse[OrderDetailsResponse])
def find_order_details(
    order_id: Optional[str] = None,
    client_id: Optional[int] = None,
    date_start: Optional[datetime] = None,
    date_end: Optional[datetime] = None,
    min_quantity: Optional[int] = None,
    max_quantity: Optional[int] = None,
    order_status: Optional[str] = Query(None, alias="status"),
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("order_date"),
    service: OrderService = Depends(get_order_service),
):
    """Order lines joined with their order and client."""
    return service.find_details_page(
        order_id=order_id,
        client_id=client_id,
        date_start=date_start,
        date_end=date_end,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        status=order_status,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/sales-report", response_model=PageResponse[ClientSalesReportResponse])
def find_sales_report(
    date_start: Optional[datetime] = None,
    date_end: Optional[datetime] = None,
    min_orders: Optional[int] = None,
    max_orders: Optional[int] = None,
    order_status: Optional[str] = Query(None, alias="status"),
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("total_orders"),
    service: OrderService = Depends(get_order_service),
):
    """Order count and amount per client."""
    return service.find_sales_report(
        date_start=date_start,
        date_end=date_end,
        min_orders=min_orders,
        max_orders=max_orders,
        status=order_status,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/{order_id}", response_model=OrderResponse)
def find_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return service.find_by_id(order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request: OrderStatusRequest,
    service: OrderService = Depends(get_order_service),
):
    return service.update_status(order_id, request.status)
