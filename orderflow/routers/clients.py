"""
Client endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_client_service
from ..schemas import (
    ClientRequest,
    ClientResponse,
    ClientUpdateRequest,
    MessageResponse,
    PageResponse,
)
from ..services import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def save_client(request: ClientRequest, service: ClientService = Depends(get_client_service)):
    return service.save(
        name=request.name,
        email=request.email,
        cpf=request.cpf,
        birth_date=request.birth_date,
    )


@router.get("", response_model=PageResponse[ClientResponse])
def find_clients(
    name: Optional[str] = None,
    email: Optional[str] = None,
    cpf: Optional[str] = None,
    birth_start: Optional[date] = None,
    birth_end: Optional[date] = None,
    page: Optional[int] = None,
    lines_per_page: Optional[int] = None,
    direction: str = Query("asc"),
    order_by: str = Query("name"),
    service: ClientService = Depends(get_client_service),
):
    """Filtered, paginated client listing."""
    return service.find_page(
        name=name,
        email=email,
        cpf=cpf,
        birth_start=birth_start,
        birth_end=birth_end,
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


@router.get("/email/{email}", response_model=ClientResponse)
def find_client_by_email(email: str, service: ClientService = Depends(get_client_service)):
    return service.find_by_email(email)


@router.get("/cpf/{cpf}", response_model=ClientResponse)
def find_client_by_cpf(cpf: str, service: ClientService = Depends(get_client_service)):
    return service.find_by_cpf(cpf)


@router.put("/cpf/{cpf}", response_model=ClientResponse)
def update_client(
    cpf: str,
    request: ClientUpdateRequest,
    service: ClientService = Depends(get_client_service),
):
    return service.update_by_cpf(
        cpf, name=request.name, email=request.email, birth_date=request.birth_date
    )


@router.delete("/cpf/{cpf}", response_model=MessageResponse)
def delete_client(cpf: str, service: ClientService = Depends(get_client_service)):
    service.delete_by_cpf(cpf)
    return MessageResponse(message="Client deleted successfully.")
