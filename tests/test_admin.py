import pytest
from httpx import AsyncClient

from ticketd.config import settings
from ticketd.submissions.schemas import SubmissionInput


@pytest.mark.asyncio
async def test_admin_api_requires_basic_auth(async_client: AsyncClient, admin_auth):
    response = await async_client.get("/admin/api/clients")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == 'Basic realm="TicketD"'

    response = await async_client.get("/admin/api/clients", auth=("admin", "wrong"))
    assert response.status_code == 401

    response = await async_client.get("/admin/api/clients", auth=admin_auth)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_admin_api_rejects_everyone_without_configured_credentials(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USER", "")
    monkeypatch.setattr(settings, "ADMIN_PASS", "")
    monkeypatch.setattr(settings, "DISABLE_AUTH", False)

    response = await async_client.get("/admin/api/clients", auth=("", ""))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_disable_auth_bypasses_basic_auth(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "DISABLE_AUTH", True)
    response = await async_client.get("/admin/api/clients")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_public_routes_need_no_auth(async_client: AsyncClient, admin_auth):
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

    response = await async_client.get("/embed/form.css")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_client_crud(async_client: AsyncClient, admin_auth):
    response = await async_client.post(
        "/admin/api/clients", json={"name": "Acme", "allowed_domain": "acme.com"}, auth=admin_auth
    )
    assert response.status_code == 201
    client = response.json()
    assert client["name"] == "Acme"

    response = await async_client.put(
        f"/admin/api/clients/{client['id']}",
        json={"name": "Acme Inc", "allowed_domain": "acme.io"},
        auth=admin_auth,
    )
    assert response.status_code == 200
    assert response.json()["allowed_domain"] == "acme.io"

    response = await async_client.get("/admin/api/clients", auth=admin_auth)
    page = response.json()
    assert page["total"] == 1
    assert page["page"] == 1
    assert page["total_pages"] == 1
    assert page["prev_page"] == 0 and page["next_page"] == 0
    assert page["items"][0]["name"] == "Acme Inc"

    response = await async_client.delete(f"/admin/api/clients/{client['id']}", auth=admin_auth)
    assert response.status_code == 204

    response = await async_client.get(f"/admin/api/clients/{client['id']}", auth=admin_auth)
    assert response.status_code == 404
    assert response.json() == {"detail": f"client with id {client['id']} not found"}


@pytest.mark.asyncio
async def test_client_create_invalid_domain(async_client: AsyncClient, admin_auth):
    response = await async_client.post(
        "/admin/api/clients", json={"name": "Acme", "allowed_domain": "not a domain"}, auth=admin_auth
    )
    assert response.status_code == 400
    assert response.json()["detail"].startswith("invalid domain")


@pytest.mark.asyncio
async def test_client_list_pages(async_client: AsyncClient, store, admin_auth):
    for i in range(21):
        await store.create_client(f"Client {i}", f"client{i}.com")

    first = (await async_client.get("/admin/api/clients", auth=admin_auth)).json()
    assert first["total"] == 21
    assert len(first["items"]) == 20
    assert first["total_pages"] == 2
    assert first["next_page"] == 2

    second = (await async_client.get("/admin/api/clients?page=2", auth=admin_auth)).json()
    assert [c["name"] for c in second["items"]] == ["Client 0"]
    assert second["prev_page"] == 1
    assert second["next_page"] == 0


@pytest.mark.asyncio
async def test_form_crud_scoped_to_client(async_client: AsyncClient, store, admin_auth):
    acme = await store.create_client("Acme", "acme.com")
    other = await store.create_client("Other", "other.com")

    response = await async_client.post(
        f"/admin/api/clients/{acme.id}/forms", json={"name": "Help", "type": "support"}, auth=admin_auth
    )
    assert response.status_code == 201
    form = response.json()
    assert form["type"] == "support"
    assert form["client_id"] == acme.id

    response = await async_client.get(f"/admin/api/clients/{other.id}/forms/{form['id']}", auth=admin_auth)
    assert response.status_code == 404

    response = await async_client.put(
        f"/admin/api/clients/{acme.id}/forms/{form['id']}",
        json={"name": "Contact", "type": "contact"},
        auth=admin_auth,
    )
    assert response.status_code == 200
    assert response.json()["type"] == "contact"

    response = await async_client.get(f"/admin/api/clients/{acme.id}/forms", auth=admin_auth)
    assert [f["name"] for f in response.json()] == ["Contact"]

    response = await async_client.delete(f"/admin/api/clients/{acme.id}/forms/{form['id']}", auth=admin_auth)
    assert response.status_code == 204
    response = await async_client.get(f"/admin/api/clients/{acme.id}/forms", auth=admin_auth)
    assert response.json() == []


@pytest.mark.asyncio
async def test_form_create_rejects_unknown_type_and_client(async_client: AsyncClient, store, admin_auth):
    acme = await store.create_client("Acme", "acme.com")

    response = await async_client.post(
        f"/admin/api/clients/{acme.id}/forms", json={"name": "Help", "type": "feedback"}, auth=admin_auth
    )
    assert response.status_code == 400

    response = await async_client.post(
        "/admin/api/clients/999/forms", json={"name": "Help", "type": "support"}, auth=admin_auth
    )
    assert response.status_code == 404

    response = await async_client.get("/admin/api/clients/999/forms", auth=admin_auth)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_submission_inbox_and_status(async_client: AsyncClient, store, admin_auth):
    acme = await store.create_client("Acme", "acme.com")
    form = await store.create_form(acme.id, "Help", "support")
    billing = await store.create_submission(form.id, SubmissionInput(subject="Billing issue", message="m"))
    await store.create_submission(form.id, SubmissionInput(subject="Login", message="m"))

    response = await async_client.get("/admin/api/submissions", auth=admin_auth)
    page = response.json()
    assert page["total"] == 2
    assert page["items"][0]["subject"] == "Login"
    assert page["items"][0]["client_name"] == "Acme"

    response = await async_client.get("/admin/api/submissions?search=billing", auth=admin_auth)
    assert [s["id"] for s in response.json()["items"]] == [billing.id]

    response = await async_client.patch(
        f"/admin/api/submissions/{billing.id}/status", json={"status": "in_progress"}, auth=admin_auth
    )
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"

    response = await async_client.get(
        f"/admin/api/submissions?status=in_progress&client={acme.id}", auth=admin_auth
    )
    assert response.json()["total"] == 1

    response = await async_client.patch(
        f"/admin/api/submissions/{billing.id}/status", json={"status": "DONE"}, auth=admin_auth
    )
    assert response.status_code == 400
    response = await async_client.get(f"/admin/api/submissions/{billing.id}", auth=admin_auth)
    assert response.json()["status"] == "IN_PROGRESS"

    response = await async_client.get("/admin/api/submissions?status=DONE", auth=admin_auth)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submission_delete(async_client: AsyncClient, store, admin_auth):
    acme = await store.create_client("Acme", "acme.com")
    form = await store.create_form(acme.id, "Contact", "contact")
    submission = await store.create_submission(form.id, SubmissionInput(message="m"))

    response = await async_client.delete(f"/admin/api/submissions/{submission.id}", auth=admin_auth)
    assert response.status_code == 204

    response = await async_client.delete(f"/admin/api/submissions/{submission.id}", auth=admin_auth)
    assert response.status_code == 404

    response = await async_client.patch(
        f"/admin/api/submissions/{submission.id}/status", json={"status": "CLOSED"}, auth=admin_auth
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_ids_beyond_integer_range_fail_validation(async_client: AsyncClient, admin_auth):
    huge = "99999999999999999999999"
    for url in (
        f"/admin/api/clients/{huge}",
        f"/admin/api/clients/{huge}/forms",
        f"/admin/api/clients/1/forms/{huge}",
        f"/admin/api/submissions/{huge}",
        f"/admin/api/submissions?client={huge}",
        f"/admin/api/submissions?page={huge}",
        f"/admin/api/clients?page={huge}",
    ):
        response = await async_client.get(url, auth=admin_auth)
        assert response.status_code == 422, url
