from fastapi import APIRouter, Depends, Path, Query, Response

from ticketd.clients.schemas import ClientCreate, ClientPage, ClientResponse, ClientUpdate
from ticketd.shared.http import MAX_ID
from ticketd.shared.pagination import MAX_PAGE, PAGE_SIZE, next_page, page_offset, prev_page, total_pages
from ticketd.store.dependencies import get_store
from ticketd.store.repository import Repository

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    client: ClientCreate,
    store: Repository = Depends(get_store),
):
    return await store.create_client(client.name, client.allowed_domain)


@router.get("", response_model=ClientPage)
async def list_clients(
    page: int = Query(1, le=MAX_PAGE),
    store: Repository = Depends(get_store),
):
    page = max(page, 1)
    clients, total = await store.list_clients(page_offset(page), PAGE_SIZE)
    return ClientPage(
        items=clients,
        total=total,
        page=page,
        total_pages=total_pages(total),
        prev_page=prev_page(page),
        next_page=next_page(page, total),
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    return await store.get_client(client_id)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client: ClientUpdate,
    client_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    await store.update_client(client_id, client.name, client.allowed_domain)
    return await store.get_client(client_id)


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    """Delete a client with all of its forms and submissions."""
    await store.delete_client(client_id)
    return Response(status_code=204)
