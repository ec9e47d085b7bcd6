"""
Request and response models for the HTTP API.

Request bodies only describe shape; every business rule (required fields,
formats, ranges) is enforced by the service layer so that violations come
back as business errors rather than schema errors.
"""

from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .domain.entities import OrderStatus

T = TypeVar("T")


class ClientRequest(BaseModel):
    """Request model for registering a client."""

    name: Optional[str] = Field(None, description="Client name, more than 3 characters")
    email: Optional[str] = Field(None, description="Unique email address")
    cpf: Optional[str] = Field(None, description="CPF, with or without punctuation")
    birth_date: Optional[date] = Field(None, description="Date of birth, not in the future")


class ClientUpdateRequest(BaseModel):
    """Request model for updating a client identified by CPF."""

    name: Optional[str] = None
    email: Optional[str] = None
    birth_date: Optional[date] = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    cpf: str
    birth_date: date


class ProductRequest(BaseModel):
    """Request model for registering a product."""

    name: Optional[str] = None
    sku: Optional[str] = Field(None, description="8 alphanumeric characters")
    price: Optional[float] = Field(None, description="Unit price, greater than zero")
    expiration_date: Optional[date] = Field(None, description="Not in the past")


class ProductUpdateRequest(BaseModel):
    """Request model for updating a product identified by SKU."""

    name: Optional[str] = None
    price: Optional[float] = None
    expiration_date: Optional[date] = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    sku: str
    price: float
    expiration_date: date


class OrderRequest(BaseModel):
    """Request model for placing an order. New orders must be PENDING."""

    client_id: Optional[int] = None
    status: Optional[str] = None


class OrderStatusRequest(BaseModel):
    status: Optional[str] = Field(None, description="COMPLETED or CANCELLED")


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: int
    order_date: datetime
    status: OrderStatus


class OrderItemRequest(BaseModel):
    """Request model for adding a line to an order."""

    order_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[int] = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    product_id: UUID
    quantity: int
    price: float


class OrderDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: UUID
    order_date: datetime
    status: OrderStatus
    client_id: int
    client_name: str
    client_email: str
    product_id: UUID
    quantity: int
    price: float
    total_amount: float


class OrderItemDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item: OrderItemResponse
    order: OrderResponse
    client: ClientResponse
    product: ProductResponse


class ClientSalesReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: int
    client_name: str
    total_orders: int
    total_amount: float


class PageResponse(BaseModel, Generic[T]):
    """One page of a listing plus the total number of matching rows."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    items: List[T]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every business rule violation."""

    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
