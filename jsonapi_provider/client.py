"""Fluent client building provider operations step by step."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from jsonapi_provider.config import ProviderSettings
from jsonapi_provider.core.document import BulkDocument, DataDocument, ErrorDocument
from jsonapi_provider.core.operation import Operation, OperationKind, Ref
from jsonapi_provider.log import configure_logging
from jsonapi_provider.pagination import PageComposer
from jsonapi_provider.providers.base import ResourceProvider
from jsonapi_provider.providers.network import NetworkResourceProvider
from jsonapi_provider.schemas.query import SortField
from jsonapi_provider.schemas.registry import SchemaRegistry
from jsonapi_provider.schemas.resource import Resource
from jsonapi_provider.transports import HttpxTransport
from jsonapi_provider.utils.content_negotiation import default_headers


class QueryBuilder:
    """Immutable builder for a single operation; every call returns a copy."""

    def __init__(self, provider: ResourceProvider, operation: Operation) -> None:
        self._provider = provider
        self._operation = operation

    def _with_params(self, **changes: Any) -> "QueryBuilder":
        params = self._operation.params.model_copy(update=changes)
        operation = self._operation.model_copy(update={"params": params})
        return type(self)(self._provider, operation)

    def fields(self, *names: str) -> "QueryBuilder":
        """Restrict the fields returned for the addressed resource type."""
        fields = {**self._operation.params.fields, self._operation.ref.type: list(names)}
        return self._with_params(fields=fields)

    def include(self, path: str, type_: Optional[str] = None, *fields: str) -> "QueryBuilder":
        """Side-load a relationship path; with ``type_`` also set its fieldset."""
        segments = path.split(".")
        if not all(segments):
            raise ValueError(f"Invalid include path {path!r}.")
        params = self._operation.params
        changes: dict[str, Any] = {"include": [*params.include, segments]}
        if type_ is not None and fields:
            changes["fields"] = {**params.fields, type_: list(fields)}
        return self._with_params(**changes)

    def page(self, page: Any) -> "QueryBuilder":
        return self._with_params(page=page)

    def to_operation(self) -> Operation:
        return self._operation

    async def execute(self) -> Union[DataDocument, ErrorDocument]:
        return await self._provider.execute(self._operation)


class ListQueryBuilder(QueryBuilder):
    """Builder for collection reads, which also accept filter and sort terms."""

    def filter(self, key: str, value: Union[str, list[str]]) -> "ListQueryBuilder":
        value = list(value) if isinstance(value, (list, tuple)) else value
        filters = {**(self._operation.params.filter or {}), key: value}
        return self._with_params(filter=filters)

    def sort(self, field: str, ascending: bool = True) -> "ListQueryBuilder":
        terms = [*(self._operation.params.sort or []), SortField(field=field, ascending=ascending)]
        return self._with_params(sort=terms)


class Client:
    """Entry point creating query builders over a resource provider."""

    def __init__(self, provider: ResourceProvider, *, transport: Optional[HttpxTransport] = None) -> None:
        self.provider = provider
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ProviderSettings] = None,
        *,
        registry: Optional[SchemaRegistry] = None,
        page_composer: Optional[PageComposer] = None,
    ) -> "Client":
        """Build an httpx-backed network provider from settings."""
        settings = settings or ProviderSettings()
        configure_logging(settings.log_level, settings.log_json)
        transport = HttpxTransport(settings.base_url, timeout=settings.timeout)
        provider = NetworkResourceProvider(
            settings.prefix,
            transport,
            page_composer,
            headers={**default_headers(), **settings.headers},
            registry=registry,
        )
        return cls(provider, transport=transport)

    def _operation(
        self, kind: OperationKind, ref: Mapping[str, Any], data: Any = None
    ) -> Operation:
        return Operation(kind=kind, ref=Ref.model_validate(ref), data=data)

    def get(self, type_: str, id_: str) -> QueryBuilder:
        return QueryBuilder(self.provider, self._operation(OperationKind.GET_ONE, {"type": type_, "id": id_}))

    def list(self, type_: str) -> ListQueryBuilder:
        return ListQueryBuilder(self.provider, self._operation(OperationKind.GET_MANY, {"type": type_}))

    def relationship(self, type_: str, id_: str, relationship: str) -> QueryBuilder:
        ref = {"type": type_, "id": id_, "relationship": relationship}
        return QueryBuilder(self.provider, self._operation(OperationKind.GET_RELATIONSHIP, ref))

    def add(self, resource: Union[Resource, Mapping[str, Any]]) -> QueryBuilder:
        resource = Resource.model_validate(resource)
        ref = {"type": resource.type}
        return QueryBuilder(self.provider, self._operation(OperationKind.ADD_ONE, ref, resource))

    def update(self, resource: Union[Resource, Mapping[str, Any]]) -> QueryBuilder:
        resource = Resource.model_validate(resource)
        ref = {"type": resource.type, "id": resource.id, "lid": resource.lid}
        return QueryBuilder(self.provider, self._operation(OperationKind.UPDATE_ONE, ref, resource))

    def remove(self, type_: str, id_: str) -> QueryBuilder:
        return QueryBuilder(self.provider, self._operation(OperationKind.REMOVE_ONE, {"type": type_, "id": id_}))

    def add_relationship(self, type_: str, id_: str, relationship: str, identifiers: Any) -> QueryBuilder:
        ref = {"type": type_, "id": id_, "relationship": relationship}
        return QueryBuilder(self.provider, self._operation(OperationKind.ADD_RELATIONSHIP, ref, identifiers))

    def update_relationship(self, type_: str, id_: str, relationship: str, linkage: Any) -> QueryBuilder:
        ref = {"type": type_, "id": id_, "relationship": relationship}
        return QueryBuilder(self.provider, self._operation(OperationKind.UPDATE_RELATIONSHIP, ref, linkage))

    def remove_relationship(self, type_: str, id_: str, relationship: str, identifiers: Any) -> QueryBuilder:
        ref = {"type": type_, "id": id_, "relationship": relationship}
        return QueryBuilder(
            self.provider, self._operation(OperationKind.REMOVE_RELATIONSHIP, ref, identifiers)
        )

    async def bulk(
        self, items: Iterable[Union[QueryBuilder, Operation]]
    ) -> Union[BulkDocument, ErrorDocument]:
        """Submit builders or operations as one atomic, ordered bulk request."""
        operations = [item.to_operation() if isinstance(item, QueryBuilder) else item for item in items]
        return await self.provider.bulk(operations)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
