"""Resource provider contract shared by every JSON:API backend."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

from jsonapi_provider.core.document import BulkDocument, DataDocument, ErrorDocument
from jsonapi_provider.core.operation import Operation, OperationKind, Ref
from jsonapi_provider.schemas.query import QueryParams

RefLike = Union[Ref, Mapping[str, Any]]
ParamsLike = Union[QueryParams, Mapping[str, Any], None]
Result = Union[DataDocument, ErrorDocument]


class ResourceProvider:
    """Expose every JSON:API CRUD and relationship operation uniformly.

    Subclasses implement :meth:`execute` and :meth:`bulk`; the named
    operations only build an :class:`Operation` and dispatch it. Every
    operation returns a :class:`DataDocument` on success and an
    :class:`ErrorDocument` when the server answers with errors.
    """

    async def execute(self, operation: Operation) -> Result:
        """Run a single operation."""
        raise NotImplementedError

    async def bulk(self, operations: Sequence[Operation]) -> Union[BulkDocument, ErrorDocument]:
        """Run operations atomically; results match ``operations`` by position."""
        raise NotImplementedError

    async def dispatch(
        self, kind: OperationKind, ref: RefLike, params: ParamsLike = None, data: Any = None
    ) -> Result:
        operation = Operation(
            kind=kind,
            ref=ref,
            params=params if params is not None else QueryParams(),
            data=data,
        )
        return await self.execute(operation)

    async def get_one(self, ref: RefLike, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.GET_ONE, ref, params)

    async def get_many(self, ref: RefLike, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.GET_MANY, ref, params)

    async def get_relationship(self, ref: RefLike, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.GET_RELATIONSHIP, ref, params)

    async def add_one(self, ref: RefLike, data: Any, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.ADD_ONE, ref, params, data)

    async def add_relationship(self, ref: RefLike, data: Any, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.ADD_RELATIONSHIP, ref, params, data)

    async def update_one(self, ref: RefLike, data: Any, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.UPDATE_ONE, ref, params, data)

    async def update_relationship(self, ref: RefLike, data: Any, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.UPDATE_RELATIONSHIP, ref, params, data)

    async def remove_one(self, ref: RefLike, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.REMOVE_ONE, ref, params)

    async def remove_relationship(self, ref: RefLike, data: Any, params: ParamsLike = None) -> Result:
        return await self.dispatch(OperationKind.REMOVE_RELATIONSHIP, ref, params, data)
