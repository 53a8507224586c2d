"""Operation descriptors shared by every provider call and bulk entry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from jsonapi_provider.core.document import DocumentShape, JSONAPIDocumentBuilder
from jsonapi_provider.schemas.query import QueryParams
from jsonapi_provider.schemas.resource import Resource, ResourceIdentifier


class Target(str, Enum):
    """What a ref addresses."""

    RESOURCE = "resource"
    COLLECTION = "collection"
    RELATIONSHIP = "relationship"


class OperationKind(str, Enum):
    GET_ONE = "get-one"
    GET_MANY = "get-many"
    GET_RELATIONSHIP = "get-relationship"
    ADD_ONE = "add-one"
    ADD_RELATIONSHIP = "add-relationship"
    UPDATE_ONE = "update-one"
    UPDATE_RELATIONSHIP = "update-relationship"
    REMOVE_ONE = "remove-one"
    REMOVE_RELATIONSHIP = "remove-relationship"

    @property
    def route(self) -> "Route":
        return ROUTES[self]


@dataclass(frozen=True)
class Route:
    """HTTP verb, addressed target, body presence and response shape of a kind."""

    action: str
    method: str
    target: Target
    has_body: bool
    shape: DocumentShape


ROUTES: dict[OperationKind, Route] = {
    OperationKind.GET_ONE: Route("get", "GET", Target.RESOURCE, False, DocumentShape.RESOURCE),
    OperationKind.GET_MANY: Route("get", "GET", Target.COLLECTION, False, DocumentShape.COLLECTION),
    OperationKind.GET_RELATIONSHIP: Route(
        "get", "GET", Target.RELATIONSHIP, False, DocumentShape.LINKAGE
    ),
    OperationKind.ADD_ONE: Route("add", "POST", Target.COLLECTION, True, DocumentShape.RESOURCE),
    OperationKind.ADD_RELATIONSHIP: Route(
        "add", "POST", Target.RELATIONSHIP, True, DocumentShape.LINKAGE
    ),
    OperationKind.UPDATE_ONE: Route("update", "PATCH", Target.RESOURCE, True, DocumentShape.RESOURCE),
    OperationKind.UPDATE_RELATIONSHIP: Route(
        "update", "PATCH", Target.RELATIONSHIP, True, DocumentShape.LINKAGE
    ),
    OperationKind.REMOVE_ONE: Route("remove", "DELETE", Target.RESOURCE, False, DocumentShape.RESOURCE),
    OperationKind.REMOVE_RELATIONSHIP: Route(
        "remove", "DELETE", Target.RELATIONSHIP, True, DocumentShape.LINKAGE
    ),
}


class Ref(BaseModel):
    """Address of a collection, a resource or one of its relationships."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: Optional[str] = None
    lid: Optional[str] = None
    relationship: Optional[str] = None

    @property
    def target(self) -> Target:
        if self.relationship is not None:
            return Target.RELATIONSHIP
        if self.id is None and self.lid is None:
            return Target.COLLECTION
        return Target.RESOURCE

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


def _identifier_list(value: Any) -> list[ResourceIdentifier]:
    if not isinstance(value, list):
        raise ValueError("Expected a list of resource identifiers.")
    return [ResourceIdentifier.model_validate(item) for item in value]


class Operation(BaseModel):
    """A single request descriptor: kind, ref, query params and optional data.

    ``data`` is normalised per kind: a :class:`Resource` for add-one and
    update-one, a list of identifiers for add/remove-relationship, and an
    identifier, a list or ``None`` for update-relationship.
    """

    kind: OperationKind
    ref: Ref
    params: QueryParams = QueryParams()
    data: Any = None

    @model_validator(mode="after")
    def _check_shape(self) -> "Operation":
        route = self.kind.route
        if self.ref.target is not route.target:
            raise ValueError(
                f"{self.kind.value} addresses a {route.target.value}, "
                f"got a ref to a {self.ref.target.value}."
            )
        if self.kind in (OperationKind.ADD_ONE, OperationKind.UPDATE_ONE):
            self.data = Resource.model_validate(self.data)
            if self.data.type != self.ref.type:
                raise ValueError(
                    f"Resource type {self.data.type!r} does not match ref type {self.ref.type!r}."
                )
            if self.kind is OperationKind.UPDATE_ONE and self.data.id != self.ref.id:
                raise ValueError(
                    f"Resource id {self.data.id!r} does not match ref id {self.ref.id!r}."
                )
        elif self.kind in (OperationKind.ADD_RELATIONSHIP, OperationKind.REMOVE_RELATIONSHIP):
            self.data = _identifier_list(self.data)
        elif self.kind is OperationKind.UPDATE_RELATIONSHIP:
            if isinstance(self.data, list):
                self.data = _identifier_list(self.data)
            elif self.data is not None:
                self.data = ResourceIdentifier.model_validate(self.data)
        elif self.data is not None:
            raise ValueError(f"{self.kind.value} does not take a request body.")
        return self

    @property
    def route(self) -> Route:
        return self.kind.route

    def body(self) -> dict[str, Any] | None:
        """Return the JSON:API request document, or None for body-less kinds."""
        if not self.route.has_body:
            return None
        builder = JSONAPIDocumentBuilder()
        if isinstance(self.data, Resource):
            return builder.build_resource(self.data)
        return builder.build_linkage(self.data)

    def to_wire(self) -> dict[str, Any]:
        """Serialize as a bulk operation entry."""
        wire: dict[str, Any] = {"op": self.route.action, "ref": self.ref.to_wire()}
        params = self.params.model_dump(mode="json", exclude_defaults=True)
        if params:
            wire["params"] = params
        body = self.body()
        if body is not None:
            wire["data"] = body["data"]
        return wire
