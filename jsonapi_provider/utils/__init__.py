"""Utilities for JSON:API query composition and headers."""

from .content_negotiation import (
    JSONAPI_MEDIA_TYPE,
    build_media_type,
    default_headers,
    parse_jsonapi_media_type,
    unrequested_extensions,
)
from .query_params import compose_query_params, encode_query

__all__ = [
    "JSONAPI_MEDIA_TYPE",
    "build_media_type",
    "compose_query_params",
    "default_headers",
    "encode_query",
    "parse_jsonapi_media_type",
    "unrequested_extensions",
]
