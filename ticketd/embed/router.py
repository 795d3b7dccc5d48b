from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ticketd.embed.service import build_embed_script, form_stylesheet
from ticketd.shared.http import parse_id, public_base_url
from ticketd.store.dependencies import get_store
from ticketd.store.repository import Repository

router = APIRouter(prefix="/embed", tags=["embed"])


@router.get("/form.css")
async def form_css():
    return Response(content=form_stylesheet(), media_type="text/css; charset=utf-8")


@router.get("/{form_id}.js")
async def embed_js(
    form_id: str,
    request: Request,
    store: Repository = Depends(get_store),
):
    parsed_id = parse_id(form_id)
    if parsed_id is None:
        raise HTTPException(status_code=400, detail="invalid form")
    form = await store.get_form(parsed_id)
    client = await store.get_client(form.client_id)

    script = build_embed_script(form, client, public_base_url(request))
    return Response(content=script, media_type="application/javascript; charset=utf-8")
