"""Shared fixtures: environment isolation and mocked transports."""

from __future__ import annotations

import os
from typing import Callable

import httpx
import pytest

from adapters.http_client import HttpxTransport
from core.domain.models import BodyMode
from core.services.api_client import ApiClient

BASE_URL = "http://api.test"


@pytest.fixture(autouse=True)
def isolate_api_client_env(monkeypatch, tmp_path):
    """Tests only see API_CLIENT_* variables they set themselves.

    Also moves the cwd to a temp dir so a developer's `.env` is never read.
    """

    for key in list(os.environ.keys()):
        if key.startswith("API_CLIENT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


Handler = Callable[[httpx.Request], object]


@pytest.fixture
def make_client() -> Callable[..., ApiClient]:
    """Build an `ApiClient` whose network is an `httpx.MockTransport`."""

    def _make(handler: Handler, mode: BodyMode = BodyMode.JSON, timeout_ms: int | None = None) -> ApiClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ApiClient(BASE_URL, mode, timeout_ms=timeout_ms, transport=HttpxTransport(http))

    return _make
