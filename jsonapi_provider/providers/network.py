"""Resource provider that maps operations onto JSON:API HTTP requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from jsonapi_provider.core.document import (
    BulkDocument,
    ErrorDocument,
    JSONAPIDocumentBuilder,
    parse_bulk_document,
    parse_document,
)
from jsonapi_provider.core.operation import Operation, Target
from jsonapi_provider.pagination import PageComposer, PageNumberComposer
from jsonapi_provider.providers.base import ResourceProvider, Result
from jsonapi_provider.schemas.registry import SchemaRegistry
from jsonapi_provider.utils.content_negotiation import default_headers
from jsonapi_provider.utils.query_params import compose_query_params, encode_query

logger = logging.getLogger(__name__)

# transport(method, url, headers[, body]) -> decoded response body
Transport = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class HTTPRequest:
    method: str
    url: str
    body: Optional[dict[str, Any]] = None


def _segment(value: str) -> str:
    return quote(value, safe="")


class NetworkResourceProvider(ResourceProvider):
    """Send each operation through an injected transport.

    The provider holds no state besides its configuration. Transport
    exceptions are propagated unchanged.
    """

    def __init__(
        self,
        prefix: str,
        transport: Transport,
        page_composer: PageComposer | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        registry: SchemaRegistry | None = None,
    ) -> None:
        self.prefix = prefix.rstrip("/")
        self.transport = transport
        self.page_composer = page_composer if page_composer is not None else PageNumberComposer()
        self.headers = dict(headers) if headers is not None else default_headers()
        self.registry = registry
        self.document_builder = JSONAPIDocumentBuilder()

    def build_path(self, operation: Operation) -> str:
        """Return the URL path addressed by an operation's ref."""
        ref = operation.ref
        path = f"{self.prefix}/{_segment(ref.type)}"
        if operation.route.target is Target.COLLECTION:
            return path
        if ref.id is None:
            raise ValueError(
                f"{operation.kind.value} on {ref.type!r} needs a server id; "
                "local ids are only valid inside bulk requests."
            )
        path = f"{path}/{_segment(ref.id)}"
        if operation.route.target is Target.RELATIONSHIP:
            path = f"{path}/relationships/{_segment(ref.relationship)}"
        return path

    def build_url(self, operation: Operation) -> str:
        pairs = compose_query_params(operation.params, self.page_composer)
        return f"{self.build_path(operation)}?{encode_query(pairs)}"

    def build_request(self, operation: Operation) -> HTTPRequest:
        """Map an operation onto verb, URL and body."""
        return HTTPRequest(operation.route.method, self.build_url(operation), operation.body())

    async def send(self, request: HTTPRequest) -> Any:
        logger.debug("Sending %s %s", request.method, request.url)
        headers = dict(self.headers)
        if request.body is None:
            return await self.transport(request.method, request.url, headers)
        return await self.transport(request.method, request.url, headers, request.body)

    async def execute(self, operation: Operation) -> Result:
        if self.registry is not None:
            self.registry.validate_operation(operation)
        request = self.build_request(operation)
        raw = await self.send(request)
        document = parse_document(raw, operation.route.shape)
        if isinstance(document, ErrorDocument):
            logger.warning(
                "%s %s returned %d error(s)", request.method, request.url, len(document.errors)
            )
        elif self.registry is not None:
            self.registry.validate_document(operation, document)
        return document

    async def bulk(self, operations: Sequence[Operation]) -> Union[BulkDocument, ErrorDocument]:
        operations = list(operations)
        if self.registry is not None:
            for operation in operations:
                self.registry.validate_operation(operation)
        body = self.document_builder.build_operations(
            operation.to_wire() for operation in operations
        )
        request = HTTPRequest("PATCH", f"{self.prefix}/bulk", body)
        raw = await self.send(request)
        result = parse_bulk_document(raw, [operation.route.shape for operation in operations])
        if isinstance(result, ErrorDocument):
            logger.warning("Bulk request of %d operation(s) failed", len(operations))
        elif self.registry is not None:
            for operation, document in result.pairs(operations):
                self.registry.validate_document(operation, document)
        return result
