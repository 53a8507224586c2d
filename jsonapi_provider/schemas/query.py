"""Pydantic models for JSON:API query parameter families."""

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SortField(BaseModel):
    """One sort term; ``-field`` on the wire when descending."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str
    ascending: bool = Field(default=True, validation_alias=AliasChoices("ascending", "asc"))

    def to_term(self) -> str:
        return self.field if self.ascending else f"-{self.field}"


class QueryParams(BaseModel):
    """Structured query: sparse fieldsets, filter, sort, page and include.

    ``filter`` and ``sort`` default to ``None``, meaning the query does not
    declare them at all; an empty mapping or list declares them without
    terms. ``page`` is opaque and handed to the configured page composer.
    """

    fields: Dict[str, List[str]] = {}
    filter: Optional[Dict[str, Union[str, List[str]]]] = None
    sort: Optional[List[SortField]] = None
    page: Any = None
    include: List[List[str]] = []

    @field_validator("sort", mode="before")
    @classmethod
    def _parse_sort_terms(cls, value: Any) -> Any:
        if value is None:
            return None
        terms = []
        for term in value:
            if isinstance(term, str):
                term = {"field": term.lstrip("-"), "ascending": not term.startswith("-")}
            terms.append(term)
        return terms

    @field_validator("include", mode="before")
    @classmethod
    def _split_include_paths(cls, value: Any) -> Any:
        if value is None:
            return []
        return [path.split(".") if isinstance(path, str) else path for path in value]

    @field_validator("include")
    @classmethod
    def _check_include_paths(cls, value: List[List[str]]) -> List[List[str]]:
        for path in value:
            if not path or not all(path):
                raise ValueError(f"Invalid include path {'.'.join(path)!r}.")
        return value
