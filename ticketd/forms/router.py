from typing import List

from fastapi import APIRouter, Depends, Path, Response

from ticketd.errors import NotFoundError
from ticketd.forms.schemas import FormCreate, FormResponse, FormUpdate
from ticketd.shared.http import MAX_ID
from ticketd.store.dependencies import get_store
from ticketd.store.repository import Repository

router = APIRouter(prefix="/clients/{client_id}/forms", tags=["forms"])


async def _owned_form(store: Repository, client_id: int, form_id: int) -> FormResponse:
    form = await store.get_form(form_id)
    # Another client's form is reported exactly like a missing one
    if form.client_id != client_id:
        raise NotFoundError("form", form_id)
    return form


@router.get("", response_model=List[FormResponse])
async def list_forms(
    client_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    await store.get_client(client_id)
    return await store.list_forms(client_id)


@router.post("", response_model=FormResponse, status_code=201)
async def create_form(
    form: FormCreate,
    client_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    return await store.create_form(client_id, form.name, form.type)


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    client_id: int = Path(ge=0, le=MAX_ID),
    form_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    return await _owned_form(store, client_id, form_id)


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form: FormUpdate,
    client_id: int = Path(ge=0, le=MAX_ID),
    form_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    await _owned_form(store, client_id, form_id)
    await store.update_form(form_id, form.name, form.type)
    return await store.get_form(form_id)


@router.delete("/{form_id}", status_code=204)
async def delete_form(
    client_id: int = Path(ge=0, le=MAX_ID),
    form_id: int = Path(ge=0, le=MAX_ID),
    store: Repository = Depends(get_store),
):
    await _owned_form(store, client_id, form_id)
    await store.delete_form(form_id)
    return Response(status_code=204)
