from fastapi import APIRouter, Depends, Query
from quickbom.database.supabase_client import get_supabase
from quickbom.modules.clients.schemas import ClientCreate, ClientUpdate, ClientResponse, ClientDetailResponse
from quickbom.modules.clients.service import ClientService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/clients", tags=["clients"])


def get_client_service(supabase: Client = Depends(get_supabase)) -> ClientService:
    return ClientService(supabase)


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    client_type: Optional[str] = Query(None, alias="type"),
    status: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    service: ClientService = Depends(get_client_service)
):
    """List clients, newest first, with project counts and contract values"""
    return service.list_clients(client_type=client_type, status=status, category=category, search=search)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    service: ClientService = Depends(get_client_service)
):
    return service.create_client(data)


@router.get("/{client_id}", response_model=ClientDetailResponse)
async def get_client(
    client_id: int,
    service: ClientService = Depends(get_client_service)
):
    return service.get_client(client_id)


@router.put("/{client_id}", response_model=ClientDetailResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    service: ClientService = Depends(get_client_service)
):
    return service.update_client(client_id, data)


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    service: ClientService = Depends(get_client_service)
):
    """Delete client (400 while projects reference it)"""
    service.delete_client(client_id)
    return {"message": "Client deleted successfully"}
