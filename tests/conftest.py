import pytest
from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from core.errors import register_error_handlers


@pytest.fixture()
def build_client():
    """Throwaway app with the structured error handlers and the given routers."""
    def _build(*routers: APIRouter) -> TestClient:
        app = FastAPI()
        register_error_handlers(app)
        for router in routers:
            app.include_router(router)
        return TestClient(app)
    return _build


@pytest.fixture()
def client():
    from main import app
    return TestClient(app)
