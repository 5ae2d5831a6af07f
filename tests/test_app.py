from fastapi import APIRouter
from fastapi.testclient import TestClient

from app.main import create_app
from app.middleware.rate_limit import ClientRateLimiter
from app.services.errors import StoreError
from app.services.memory_store import DEMO_PASSWORD, seed_demo_data


def test_healthcheck(client, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "testing")
    response = client.get("/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"status": "available", "system_info": {"environment": "testing"}}


def test_unknown_route(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"error": "the requested resource could not be found"}


def test_wrong_method(client):
    response = client.put("/healthcheck")

    assert response.status_code == 405
    assert response.json() == {"error": "the PUT method is not supported for this resource"}


def test_docs_describe_basic_auth(client):
    schema = client.get("/openapi.json").json()
    schemes = schema["components"]["securitySchemes"]

    assert any(scheme == {"type": "http", "scheme": "basic"} for scheme in schemes.values())


def test_unhandled_exception_becomes_500(memory_models):
    app = create_app(models=memory_models, limiter=ClientRateLimiter(enabled=False))
    broken = APIRouter()

    @broken.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    app.include_router(broken)

    with TestClient(app) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "the server encountered a problem and could not process your request"}
    assert response.headers["Connection"] == "close"


def test_store_failure_becomes_500(memory_models, monkeypatch, auth_headers):
    seed_demo_data(memory_models)

    def failing_get_all():
        raise StoreError("connection refused")

    monkeypatch.setattr(memory_models.actors, "get_all", failing_get_all)
    app = create_app(models=memory_models, limiter=ClientRateLimiter(enabled=False))

    with TestClient(app) as client:
        response = client.get("/actors", headers=auth_headers("user", DEMO_PASSWORD))

    assert response.status_code == 500
    assert "connection refused" not in response.text
