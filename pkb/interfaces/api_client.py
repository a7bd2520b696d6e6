"""Client for a running pkb HTTP server."""

from typing import Any

import httpx

from pkb.search.errors import PkbError
from pkb.search.models import Result


class PkbAPIError(PkbError):
    """Request to the server failed: transport error, non-200 status or undecodable body."""

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        super().__init__(message)


class PkbClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout, transport=transport
        )

    async def search(self, query: str, sources: list[str] | None = None) -> list[Result]:
        params: dict[str, Any] = {"q": query}
        if sources:
            params["sources"] = ",".join(sources)
        try:
            response = await self._client.get("/search", params=params)
        except httpx.HTTPError as e:
            raise PkbAPIError(None, f"http request: {e}") from e
        if response.status_code != 200:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = (body.get("error") if isinstance(body, dict) else None) or response.text
            raise PkbAPIError(response.status_code, message or f"HTTP {response.status_code}")
        try:
            body = response.json()
            if not isinstance(body, list):
                raise ValueError(f"expected a JSON array, got {type(body).__name__}")
            return [Result.model_validate(item) for item in body]
        except ValueError as e:
            raise PkbAPIError(response.status_code, f"decode response: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PkbClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
