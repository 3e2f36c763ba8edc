"""Tests for the FastAPI exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from authz_engine.api import register_exception_handlers
from authz_engine.core.exceptions import (
    DuplicateEntityError,
    IdentityProviderError,
    ReferenceInUseError,
    ResourceNotFoundError,
)


def build_app(is_production=True):
    app = FastAPI()
    register_exception_handlers(app, is_production=is_production)

    @app.get("/duplicate")
    async def duplicate():
        raise DuplicateEntityError("Resource", "invoices")

    @app.get("/missing")
    async def missing():
        raise ResourceNotFoundError("res_1")

    @app.get("/in-use")
    async def in_use():
        raise ReferenceInUseError("still used", details={"references": {"a:b": ["r1"]}})

    @app.get("/idp-down")
    async def idp_down():
        raise IdentityProviderError("keycloak unreachable")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    return app


@pytest.fixture
def client():
    return TestClient(build_app(), raise_server_exceptions=False)


class TestExceptionHandlers:
    @pytest.mark.parametrize(
        "path, status, code",
        [
            ("/duplicate", 409, "DuplicateEntityError"),
            ("/missing", 404, "ResourceNotFoundError"),
            ("/in-use", 400, "ReferenceInUseError"),
            ("/idp-down", 503, "IdentityProviderError"),
        ],
    )
    def test_engine_errors(self, client, path, status, code):
        response = client.get(path)
        assert response.status_code == status
        assert response.json()["error"]["code"] == code

    def test_details_are_rendered(self, client):
        body = client.get("/in-use").json()
        assert body["error"]["details"] == {"references": {"a:b": ["r1"]}}

    def test_unexpected_error_hidden_in_production(self, client):
        response = client.get("/crash")
        assert response.status_code == 500
        assert response.json()["error"]["message"] == "An unexpected error occurred"
        assert response.json()["error"]["type"] == "RuntimeError"

    def test_unexpected_error_shown_outside_production(self):
        client = TestClient(build_app(is_production=False), raise_server_exceptions=False)
        assert client.get("/crash").json()["error"]["message"] == "secret internals"
