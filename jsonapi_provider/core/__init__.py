"""Core JSON:API documents, operations, errors and relationship resolution."""

from .container import ResourceContainer
from .document import (
    BulkDocument,
    DataDocument,
    DocumentShape,
    ErrorDocument,
    JSONAPIDocumentBuilder,
    parse_bulk_document,
    parse_document,
)
from .errors import (
    JSONAPIProviderError,
    MalformedDocumentError,
    RelationshipNotDeclaredError,
    ResourceNotFoundError,
    SchemaValidationError,
    TransportError,
)
from .operation import Operation, OperationKind, Ref, Route, Target

__all__ = [
    "BulkDocument",
    "DataDocument",
    "DocumentShape",
    "ErrorDocument",
    "JSONAPIDocumentBuilder",
    "JSONAPIProviderError",
    "MalformedDocumentError",
    "Operation",
    "OperationKind",
    "Ref",
    "RelationshipNotDeclaredError",
    "ResourceContainer",
    "ResourceNotFoundError",
    "Route",
    "SchemaValidationError",
    "Target",
    "TransportError",
    "parse_bulk_document",
    "parse_document",
]
