"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from chat_client.backend import ChatBackend  # noqa: E402
from chat_client.config import ClientSettings  # noqa: E402

BASE_URL = "http://backend.test/api"


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the root directory of the project."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(base_url=BASE_URL)


@pytest.fixture
def make_backend(settings: ClientSettings) -> Callable[..., ChatBackend]:
    """Build a ChatBackend whose HTTP calls go to ``handler``.

    ``handler`` may be sync or async; async handlers can await an event to
    hold a request in flight.
    """
    def _make(handler) -> ChatBackend:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ChatBackend(settings, client=client)

    return _make


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    for var in list(os.environ):
        if var == "CHAT_CLIENT_CONFIG" or var.startswith("CHAT_CLIENT__"):
            monkeypatch.delenv(var, raising=False)
    yield
