"""JSON:API documents: tagged result types, parsing and request bodies."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Iterable, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, ValidationError

from jsonapi_provider.core.errors import MalformedDocumentError
from jsonapi_provider.schemas.resource import (
    ErrorObject,
    Linkage,
    Resource,
    ResourceIdentifier,
)


class DocumentShape(str, Enum):
    """Expected shape of primary ``data`` in a success document."""

    RESOURCE = "resource"
    COLLECTION = "collection"
    LINKAGE = "linkage"


PrimaryData = Union[Resource, List[Resource], ResourceIdentifier, List[ResourceIdentifier], None]


class DataDocument(BaseModel):
    """Success document carrying primary data and side-loaded resources."""

    kind: Literal["data"] = "data"
    data: PrimaryData = None
    included: List[Resource] = []
    links: Optional[dict[str, Any]] = None
    meta: Optional[dict[str, Any]] = None
    jsonapi: Optional[dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return False


class ErrorDocument(BaseModel):
    """Failure document carrying JSON:API error objects."""

    kind: Literal["errors"] = "errors"
    errors: List[ErrorObject]
    links: Optional[dict[str, Any]] = None
    meta: Optional[dict[str, Any]] = None
    jsonapi: Optional[dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return True


Result = Annotated[Union[DataDocument, ErrorDocument], Field(discriminator="kind")]


class BulkDocument(BaseModel):
    """Positional results of a bulk request."""

    kind: Literal["operations"] = "operations"
    operations: List[Result]
    meta: Optional[dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return False

    def pairs(self, submitted: Sequence[Any]) -> list[tuple[Any, Union[DataDocument, ErrorDocument]]]:
        """Bind each submitted operation to its result by position."""
        if len(submitted) != len(self.operations):
            raise MalformedDocumentError(
                f"Bulk response has {len(self.operations)} results "
                f"for {len(submitted)} operations."
            )
        return list(zip(submitted, self.operations))


def _parse_resource(value: Any) -> Resource:
    if not isinstance(value, Mapping):
        raise MalformedDocumentError(f"Expected a resource object, got {value!r}.")
    return Resource.model_validate(value)


def _parse_primary(data: Any, shape: DocumentShape) -> PrimaryData:
    if shape is DocumentShape.RESOURCE:
        if data is None:
            return None
        if isinstance(data, list):
            raise MalformedDocumentError("Expected a single resource, got a list.")
        return _parse_resource(data)
    if shape is DocumentShape.COLLECTION:
        if not isinstance(data, list):
            raise MalformedDocumentError("Expected a list of resources.")
        if any(item is None for item in data):
            raise MalformedDocumentError("Resource lists must not contain null entries.")
        return [_parse_resource(item) for item in data]
    if data is None:
        return None
    if isinstance(data, list):
        return [ResourceIdentifier.model_validate(item) for item in data]
    return ResourceIdentifier.model_validate(data)


def parse_document(
    raw: Any, shape: DocumentShape = DocumentShape.RESOURCE
) -> Union[DataDocument, ErrorDocument]:
    """Turn a decoded response body into a tagged result.

    ``None`` (an empty response body) is a success without data.
    """
    if raw is None:
        return DataDocument()
    if not isinstance(raw, Mapping):
        raise MalformedDocumentError(f"Expected a JSON object, got {type(raw).__name__}.")
    if "errors" in raw and "data" in raw:
        raise MalformedDocumentError("A document must not contain both data and errors.")
    try:
        if "errors" in raw:
            return ErrorDocument.model_validate(dict(raw))
        included = raw.get("included") or []
        return DataDocument(
            data=_parse_primary(raw.get("data"), shape),
            included=[_parse_resource(item) for item in included],
            links=raw.get("links"),
            meta=raw.get("meta"),
            jsonapi=raw.get("jsonapi"),
        )
    except ValidationError as exc:
        raise MalformedDocumentError(str(exc)) from exc


def parse_bulk_document(
    raw: Any, shapes: Sequence[DocumentShape]
) -> Union[BulkDocument, ErrorDocument]:
    """Parse a bulk response; results must match ``shapes`` one to one."""
    if not isinstance(raw, Mapping):
        raise MalformedDocumentError("Bulk response must be a JSON object.")
    if "errors" in raw:
        return parse_document(raw)
    results = raw.get("operations")
    if not isinstance(results, list):
        raise MalformedDocumentError("Bulk response must contain an operations list.")
    if len(results) != len(shapes):
        raise MalformedDocumentError(
            f"Bulk response has {len(results)} results for {len(shapes)} operations."
        )
    return BulkDocument(
        operations=[parse_document(item, shape) for item, shape in zip(results, shapes)],
        meta=raw.get("meta"),
    )


class JSONAPIDocumentBuilder:
    """Build JSON:API request bodies from models."""

    def build_resource(self, resource: Resource) -> dict[str, Any]:
        """Return a document wrapping a single resource object."""
        return {"data": resource.to_wire()}

    def build_linkage(self, linkage: Linkage) -> dict[str, Any]:
        """Return a relationship document for identifier(s) or ``None``."""
        if linkage is None:
            return {"data": None}
        if isinstance(linkage, list):
            return {"data": [identifier.to_wire() for identifier in linkage]}
        return {"data": linkage.to_wire()}

    def build_operations(self, operations: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """Return a bulk request body from serialized operations."""
        return {"operations": [dict(operation) for operation in operations]}
