"""Standard JSON:API pagination strategies."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from .base import PageComposer

PageT = TypeVar("PageT", bound=BaseModel)


def _coerce(model: Type[PageT], page: Any) -> PageT:
    if isinstance(page, model):
        return page
    return model.model_validate(page)


class RelationshipPage(BaseModel):
    """Page size applied to a multi-valued relationship's linkage."""

    size: int = Field(ge=1)


class PageNumberPage(BaseModel):
    """Page descriptor for page[number]/page[size] pagination."""

    number: Optional[int] = Field(default=None, ge=0)
    size: Optional[int] = Field(default=None, ge=1)
    relationships: Dict[str, RelationshipPage] = {}


class OffsetPage(BaseModel):
    """Page descriptor for page[offset]/page[limit] pagination."""

    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)


class CursorPage(BaseModel):
    """Page descriptor for page[cursor]/page[size] pagination."""

    cursor: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=1)


class PageNumberComposer(PageComposer):
    """Compose page[number], page[size] and per-relationship page sizes.

    Relationship sizes use the key ``relationships][<name>][size`` so that,
    once wrapped, the parameter reads ``page[relationships][<name>][size]``.
    """

    def compose_page(self, page: PageNumberPage | dict[str, Any]) -> list[tuple[str, str]]:
        page = _coerce(PageNumberPage, page)
        pairs: list[tuple[str, str]] = []
        if page.number is not None:
            pairs.append(("number", str(page.number)))
        if page.size is not None:
            pairs.append(("size", str(page.size)))
        for field, relationship_page in page.relationships.items():
            pairs.append((f"relationships][{field}][size", str(relationship_page.size)))
        return pairs


class OffsetPageComposer(PageComposer):
    """Compose page[offset]/page[limit] pairs."""

    def compose_page(self, page: OffsetPage | dict[str, Any]) -> list[tuple[str, str]]:
        page = _coerce(OffsetPage, page)
        pairs: list[tuple[str, str]] = []
        if page.offset is not None:
            pairs.append(("offset", str(page.offset)))
        if page.limit is not None:
            pairs.append(("limit", str(page.limit)))
        return pairs


class CursorPageComposer(PageComposer):
    """Compose page[cursor]/page[size] pairs."""

    def compose_page(self, page: CursorPage | dict[str, Any]) -> list[tuple[str, str]]:
        page = _coerce(CursorPage, page)
        pairs: list[tuple[str, str]] = []
        if page.cursor is not None:
            pairs.append(("cursor", page.cursor))
        if page.size is not None:
            pairs.append(("size", str(page.size)))
        return pairs
