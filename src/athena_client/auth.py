"""Header-injection hooks awaited by the transport before every request."""
from __future__ import annotations
from typing import Dict, Mapping, Protocol


class AuthHook(Protocol):
    async def apply(self, headers: Dict[str, str]) -> None: ...


class BearerTokenAuth:
    def __init__(self, token: str):
        if not token:
            raise ValueError("token must be non-empty")
        self.token = token

    async def apply(self, headers: Dict[str, str]) -> None:
        headers["Authorization"] = f"Bearer {self.token}"


class StaticHeadersAuth:
    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    async def apply(self, headers: Dict[str, str]) -> None:
        headers.update(self.headers)
