"""Test doubles for the cloud HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

SERVER_URL = "https://cloud.example.com"
ACCESS_TOKEN = "test-access-key"


@dataclass
class CloudStub:
    """In-memory stand-in for the cloud HTTP API.

    Responses are keyed by ``(method, path)``; unknown routes answer 404.
    Every request is recorded for later assertions.
    """

    routes: dict[tuple[str, str], tuple[int, str, dict[str, str]]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.routes[(method, path)] = (status, body, headers or {})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"status": "ERROR", "message": "Not Found"})
        status, body, headers = route
        return httpx.Response(status, text=body, headers=headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]
