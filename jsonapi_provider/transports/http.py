"""httpx-based transport for :class:`NetworkResourceProvider`."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from jsonapi_provider.core.errors import TransportError
from jsonapi_provider.utils.content_negotiation import is_json_media_type, unrequested_extensions

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Perform one HTTP call per invocation and return the decoded body.

    Non-2xx responses carrying a JSON:API ``errors`` document are returned
    as values so the provider can surface them as error documents. Other
    failures raise :class:`TransportError`; httpx network errors propagate
    unchanged.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=dict(headers or {})
        )

    async def __call__(
        self, method: str, url: str, headers: Mapping[str, str], body: Any = None
    ) -> Any:
        content = json.dumps(body).encode("utf-8") if body is not None else None
        response = await self.client.request(method, url, headers=dict(headers), content=content)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return self.decode(method, url, response)

    def decode(self, method: str, url: str, response: httpx.Response) -> Any:
        if not response.content:
            if response.is_success:
                return None
            raise TransportError(
                f"HTTP {response.status_code} without body",
                method=method,
                url=url,
                status_code=response.status_code,
            )
        content_type = response.headers.get("content-type", "")
        if not is_json_media_type(content_type):
            raise TransportError(
                f"Unexpected content type {content_type!r}",
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
            )
        unrequested = unrequested_extensions(
            content_type, response.request.headers.get("accept", "")
        )
        if unrequested:
            raise TransportError(
                f"Response applies extensions that were not requested: {unrequested}",
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                "Response body is not valid JSON",
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if response.is_success:
            return body
        if isinstance(body, dict) and "errors" in body:
            return body
        raise TransportError(
            f"HTTP {response.status_code}",
            method=method,
            url=url,
            status_code=response.status_code,
            body=body,
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
