"""Shared fixtures: a fake CAD upstream and a FastAPI test client."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from fake_cad import RecordingTransport
from meteorspy.main import app


@pytest.fixture
def upstream():
    """Install a fake CAD API behind the app's shared HTTP client."""
    installed = []

    def install(responder, **client_kwargs) -> RecordingTransport:
        transport = RecordingTransport(responder)
        app.state.http = httpx.AsyncClient(transport=transport, **client_kwargs)
        installed.append(app.state.http)
        return transport

    yield install
    for http in installed:
        asyncio.run(http.aclose())
    if hasattr(app.state, "http"):
        del app.state.http


@pytest.fixture
def api():
    return TestClient(app)
