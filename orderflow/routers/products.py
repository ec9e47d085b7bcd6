"""
Product endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_product_service
from ..schemas import (
    MessageResponse,
    PageResponse,
    ProductRequest,
    ProductResponse,
    ProductUpdateRequest,
)
from ..services import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def save_product(request: ProductRequest, service: ProductService = Depends(get_product_service)):
    return service.save(
        name=request.name,
        price=request.price,
        expiration_date=request.expiration_date,
        sku=request.sku,
    )


@router.get("", response_model=PageResponse[ProductResponse])
def find_products(
    name: Optional[str] = None,
    sku: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("name"),
    service: ProductService = Depends(get_product_service),
):
    """Filtered, paginated product listing."""
    return service.find_page(
        name=name,
        sku=sku,
        min_price=min_price,
        max_price=max_price,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/sku/{sku}", response_model=ProductResponse)
def find_product_by_sku(sku: str, service: ProductService = Depends(get_product_service)):
    return service.find_by_sku(sku)


@router.put("/sku/{sku}", response_model=ProductResponse)
def update_product(
    sku: str,
    request: ProductUpdateRequest,
    service: ProductService = Depends(get_product_service),
):
    return service.update_by_sku(
        sku,
        name=request.name,
        price=request.price,
        expiration_date=request.expiration_date,
    )


@router.delete("/sku/{sku}", response_model=MessageResponse)
def delete_product(sku: str, service: ProductService = Depends(get_product_service)):
    service.delete_by_sku(sku)
    return MessageResponse(message="Product deleted successfully.")
