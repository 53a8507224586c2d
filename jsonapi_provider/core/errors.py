"""Exceptions raised by the JSON:API provider.

Protocol-level errors returned by a server are values (see
:class:`jsonapi_provider.core.document.ErrorDocument`), not exceptions.
The classes below cover local failures only.
"""

from __future__ import annotations

from typing import Any


class JSONAPIProviderError(Exception):
    """Base class for errors raised by this package."""


class ResourceNotFoundError(JSONAPIProviderError, LookupError):
    """No primary or included resource matches the requested identity."""

    def __init__(self, type_: str, id_: str) -> None:
        self.type = type_
        self.id = id_
        super().__init__(f'Cannot find resource with type "{type_}" and id "{id_}".')


class RelationshipNotDeclaredError(JSONAPIProviderError, LookupError):
    """The owner resource carries no entry for the requested relationship."""

    def __init__(self, type_: str, id_: str, relationship: str) -> None:
        self.type = type_
        self.id = id_
        self.relationship = relationship
        super().__init__(
            f'Resource with type "{type_}" and id "{id_}" '
            f'has no relationship "{relationship}".'
        )


class MalformedDocumentError(JSONAPIProviderError, ValueError):
    """A server document does not have a valid JSON:API shape."""


class SchemaValidationError(JSONAPIProviderError, ValueError):
    """A request or response disagrees with the registered resource schema."""

    def __init__(self, message: str, *, pointer: str | None = None) -> None:
        self.pointer = pointer
        if pointer:
            message = f"{message} (at {pointer})"
        super().__init__(message)


class TransportError(JSONAPIProviderError):
    """Raised by the bundled HTTP transport for non-JSON:API failures."""

    def __init__(
        self,
        message: str,
        *,
        method: str,
        url: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {url}: {message}")
