import io

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.routing import Route

from respond.config import RespondConfig
from respond.endpoint import responder_endpoint
from tests.respond.helpers import StatusError


@responder_endpoint
async def get_user(request, respond):
    user_id = int(request.path_params["id"])
    if user_id != 42:
        respond.not_found("no user %d", user_id)
        return

    respond.ok({"name": "Bob", "id": 42})


@responder_endpoint
def download_log(request, respond):
    respond.download("a.log", io.BytesIO(b"line 1\nline 2\n"))


@responder_endpoint
async def explode(request, respond):
    raise StatusError(503, "it's dead jim")


@responder_endpoint
async def explode_after_commit(request, respond):
    respond.no_content()
    raise RuntimeError("too late")


@responder_endpoint(config=RespondConfig(buffer_raw=False, chunk_size=2))
def streamed(request, respond):
    respond.ok(io.BytesIO(b"streamed"))


@responder_endpoint
async def go_home(request, respond):
    respond.redirect("/home?from=%s", "users")


@pytest_asyncio.fixture
async def client():
    app = Starlette(
        routes=[
            Route("/users/{id}", get_user),
            Route("/log", download_log),
            Route("/explode", explode),
            Route("/explode-after-commit", explode_after_commit),
            Route("/streamed", streamed),
            Route("/go-home", go_home),
        ]
    )
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.mark.asyncio
async def test_json_reply(client):
    response = await client.get("/users/42")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"name": "Bob", "id": 42}


@pytest.mark.asyncio
async def test_failure_helper(client):
    response = await client.get("/users/7")
    assert response.status_code == 404
    assert response.json() == {"status": 404, "message": "no user 7"}


@pytest.mark.asyncio
async def test_sync_handler_download(client):
    response = await client.get("/log")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.headers["content-disposition"] == 'attachment; filename="a.log"'
    assert response.content == b"line 1\nline 2\n"


@pytest.mark.asyncio
async def test_unhandled_exception_is_classified(client):
    response = await client.get("/explode")
    assert response.status_code == 503
    assert response.json() == {"status": 503, "message": "it's dead jim"}


@pytest.mark.asyncio
async def test_exception_after_commit_propagates(client):
    response = await client.get("/explode-after-commit")
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_streaming_config(client):
    response = await client.get("/streamed")
    assert response.status_code == 200
    assert response.content == b"streamed"


@pytest.mark.asyncio
async def test_redirect(client):
    response = await client.get("/go-home")
    assert response.status_code == 307
    assert response.headers["location"] == "/home?from=users"
