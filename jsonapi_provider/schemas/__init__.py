"""Pydantic schemas for JSON:API.

Resource schema declarations live in :mod:`jsonapi_provider.schemas.registry`.
"""

from .query import QueryParams, SortField
from .resource import (
    ErrorObject,
    Relationship,
    Resource,
    ResourceIdentifier,
)

__all__ = [
    "ErrorObject",
    "QueryParams",
    "Relationship",
    "Resource",
    "ResourceIdentifier",
    "SortField",
]
