"""Client-side JSON:API v1.1 resource access layer."""

from .core.container import ResourceContainer
from .core.document import BulkDocument, DataDocument, ErrorDocument
from .core.operation import Operation, OperationKind, Ref
from .providers import NetworkResourceProvider, ResourceProvider
from .schemas import QueryParams, Resource, ResourceIdentifier, SortField
from .schemas.registry import SchemaRegistry
from .client import Client
from .utils.query_params import compose_query_params

__all__ = [
    "BulkDocument",
    "Client",
    "DataDocument",
    "ErrorDocument",
    "NetworkResourceProvider",
    "Operation",
    "OperationKind",
    "QueryParams",
    "Ref",
    "Resource",
    "ResourceContainer",
    "ResourceIdentifier",
    "ResourceProvider",
    "SchemaRegistry",
    "SortField",
    "compose_query_params",
]
