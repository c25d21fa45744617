from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

os.environ["ROYALE_API_TOKEN"] = "test-token"
os.environ["ROYALE_API_BASE_URL"] = "https://api.test/v1"
os.environ["ROYALE_LOG_JSON"] = "0"


Routes = dict[str, tuple[int, Any]]


@pytest.fixture()
def make_client() -> Callable[..., Any]:
    """Build a ClashRoyaleClient backed by a canned route table.

    Routes map a decoded request path (e.g. "/v1/players/#ABC/battlelog") to
    (status_code, json_body). Unknown paths return 404. Every request is
    appended to `client.requests`.
    """
    from royale_dashboard.clash_client import ClashRoyaleClient
    from royale_dashboard.core.config import Settings

    def _factory(routes: Routes, **settings_overrides: Any) -> ClashRoyaleClient:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            status, body = routes.get(request.url.path, (404, {"reason": "notFound"}))
            return httpx.Response(status, json=body)

        client = ClashRoyaleClient(
            Settings(**settings_overrides), transport=httpx.MockTransport(handler)
        )
        client.requests = seen  # type: ignore[attr-defined]
        return client

    return _factory
