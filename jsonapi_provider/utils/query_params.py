"""Helpers for JSON:API query parameter composition."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode

from jsonapi_provider.pagination.base import PageComposer
from jsonapi_provider.schemas.query import QueryParams

# Kept literal in query strings: brackets of parameter families and list commas.
_SAFE_CHARS = "[],"


def _normalize(params: QueryParams | Mapping[str, Any] | None) -> QueryParams:
    if params is None:
        return QueryParams()
    if isinstance(params, QueryParams):
        return params
    return QueryParams.model_validate(params)


def compose_query_params(
    params: QueryParams | Mapping[str, Any] | None,
    page_composer: PageComposer | None = None,
) -> list[tuple[str, str]]:
    """Compose JSON:API query parameter families into ordered pairs.

    Families are emitted in a fixed order: fields, filter, page, sort,
    include. List filter values repeat the ``filter[key]`` pair once per
    element instead of joining them.
    """
    query = _normalize(params)
    pairs: list[tuple[str, str]] = []

    for resource_type, names in query.fields.items():
        pairs.append((f"fields[{resource_type}]", ",".join(names)))

    if query.filter is not None:
        for key, value in query.filter.items():
            if isinstance(value, list):
                pairs.extend((f"filter[{key}]", item) for item in value)
            else:
                pairs.append((f"filter[{key}]", value))

    if query.page is not None:
        if page_composer is None:
            raise ValueError("A page composer is required to encode page parameters.")
        for key, value in page_composer.compose_page(query.page):
            pairs.append((f"page[{key}]", value))

    if query.sort:
        pairs.append(("sort", ",".join(term.to_term() for term in query.sort)))

    if query.include:
        pairs.append(("include", ",".join(".".join(path) for path in query.include)))

    return pairs


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """Flatten query pairs into a query string."""
    return urlencode(pairs, safe=_SAFE_CHARS)
