import pytest

from ticketd.intake.origin import OriginGuard, domain_allowed, extract_host
from ticketd.shared.http import MAX_ID, parse_id


@pytest.mark.parametrize(
    "host, allowed",
    [
        ("www.acme.com", "acme.com"),
        ("acme.com", "acme.com"),
        ("ACME.com ", " Acme.COM"),
        ("shop.eu.acme.com", "acme.com"),
        ("www.acme.com", "https://acme.com"),
        ("localhost:5173", "localhost"),
        ("127.0.0.1:3000", "localhost"),
        ("localhost", "127.0.0.1"),
        ("localhost", "localhost:8080"),
    ],
)
def test_domain_allowed(host, allowed):
    assert domain_allowed(host, allowed) is True


@pytest.mark.parametrize(
    "host, allowed",
    [
        ("acme.com.evil.com", "acme.com"),
        ("evilacme.com", "acme.com"),
        ("acme.com", "www.acme.com"),
        ("localhost.evil.com", "localhost"),
        ("", "acme.com"),
        ("acme.com", ""),
        ("10.0.0.1", "localhost"),
    ],
)
def test_domain_rejected(host, allowed):
    assert domain_allowed(host, allowed) is False


def test_extract_host_prefers_origin():
    assert extract_host("https://www.acme.com", "https://evil.com/page") == "www.acme.com"
    assert extract_host("", "https://shop.acme.com:8443/contact?x=1") == "shop.acme.com"
    assert extract_host("http://localhost:5173", "") == "localhost"


def test_extract_host_does_not_fall_back_when_origin_is_unusable():
    assert extract_host("null", "https://www.acme.com/") == ""
    assert extract_host("", "") == ""


@pytest.mark.asyncio
async def test_guard_admits_matching_origin(store):
    client = await store.create_client("Acme", "acme.com")
    form = await store.create_form(client.id, "Contact Us", "contact")

    admission = await OriginGuard(store).admit(str(form.id), "https://www.acme.com", "")
    assert admission.allowed
    assert admission.cors_headers(preflight=True) == {
        "Access-Control-Allow-Origin": "https://www.acme.com",
        "Vary": "Origin",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@pytest.mark.asyncio
async def test_guard_admits_referer_without_echoing_origin(store):
    client = await store.create_client("Acme", "acme.com")
    form = await store.create_form(client.id, "Contact Us", "contact")

    admission = await OriginGuard(store).admit(form.id, "", "https://acme.com/contact")
    assert admission.allowed
    assert "Access-Control-Allow-Origin" not in admission.cors_headers()


@pytest.mark.asyncio
async def test_guard_denies_mismatch_and_reports_allowed_domain(store):
    client = await store.create_client("Acme", "acme.com")
    form = await store.create_form(client.id, "Contact Us", "contact")

    admission = await OriginGuard(store).admit(form.id, "https://evil.com", "")
    assert not admission.allowed
    assert admission.allowed_domain == "acme.com"


@pytest.mark.asyncio
async def test_guard_denies_unknown_form_like_a_mismatch(store):
    guard = OriginGuard(store)
    for form_id in ("999", "abc", "-1"):
        admission = await guard.admit(form_id, "https://www.acme.com", "")
        assert not admission.allowed
        assert admission.allowed_domain is None


@pytest.mark.asyncio
async def test_guard_denies_without_host(store):
    client = await store.create_client("Acme", "acme.com")
    form = await store.create_form(client.id, "Contact Us", "contact")

    assert not (await OriginGuard(store).admit(form.id, "", "")).allowed


def test_parse_id_accepts_only_int64_range():
    assert parse_id("42") == 42
    assert parse_id(str(MAX_ID)) == MAX_ID
    assert parse_id(str(MAX_ID + 1)) is None
    assert parse_id("99999999999999999999999") is None
    assert parse_id(MAX_ID + 1) is None
    assert parse_id("-1") is None
    assert parse_id("４２") is None
