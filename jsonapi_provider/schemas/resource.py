"""Pydantic models for JSON:API v1.1 resource objects."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ResourceIdentifier(BaseModel):
    """Resource identifier object: type + id (or lid before persistence)."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: Optional[str] = None
    lid: Optional[str] = None

    @model_validator(mode="after")
    def _require_identity(self) -> "ResourceIdentifier":
        if self.id is None and self.lid is None:
            raise ValueError("Resource identifier must include either id or lid.")
        return self

    def to_wire(self) -> dict[str, str]:
        """Return the identifier as a JSON-ready dict."""
        wire = {"type": self.type}
        if self.id is not None:
            wire["id"] = self.id
        if self.lid is not None:
            wire["lid"] = self.lid
        return wire


Linkage = Union[ResourceIdentifier, List[ResourceIdentifier], None]


class Relationship(BaseModel):
    """Relationship object: linkage data plus optional links and meta.

    Bare linkage (an identifier, a list of identifiers or ``None``) is
    accepted as shorthand for ``{"data": linkage}``.
    """

    data: Linkage = None
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_linkage(cls, value: Any) -> Any:
        if isinstance(value, Relationship):
            return value
        # A "type" member without "data" marks a bare identifier, even with meta.
        if isinstance(value, dict) and "data" not in value and "type" in value:
            return {"data": value}
        if isinstance(value, dict) and ({"data", "links", "meta"} & value.keys()):
            return value
        return {"data": value}

    @property
    def is_multiple(self) -> bool:
        return isinstance(self.data, list)

    def to_wire(self) -> dict[str, Any]:
        """Return the relationship as a JSON-ready dict; ``data`` is always kept."""
        if isinstance(self.data, list):
            data: Any = [identifier.to_wire() for identifier in self.data]
        elif self.data is None:
            data = None
        else:
            data = self.data.to_wire()
        wire: dict[str, Any] = {"data": data}
        if self.links:
            wire["links"] = dict(self.links)
        if self.meta:
            wire["meta"] = dict(self.meta)
        return wire


class Resource(BaseModel):
    """Resource object with attributes and relationships."""

    type: str
    id: Optional[str] = None
    lid: Optional[str] = None
    attributes: Dict[str, Any] = {}
    relationships: Dict[str, Relationship] = {}
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    @field_validator("attributes", "relationships", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def identifier(self) -> ResourceIdentifier:
        """Return the identifier of this resource."""
        return ResourceIdentifier(type=self.type, id=self.id, lid=self.lid)

    def matches(self, type_: str, id_: str) -> bool:
        return self.type == type_ and self.id == id_

    def to_wire(self) -> dict[str, Any]:
        """Serialize into a JSON:API resource object."""
        wire: dict[str, Any] = {"type": self.type}
        if self.id is not None:
            wire["id"] = self.id
        if self.lid is not None:
            wire["lid"] = self.lid
        if self.attributes:
            wire["attributes"] = dict(self.attributes)
        if self.relationships:
            wire["relationships"] = {
                name: relationship.to_wire()
                for name, relationship in self.relationships.items()
            }
        if self.links:
            wire["links"] = dict(self.links)
        if self.meta:
            wire["meta"] = dict(self.meta)
        return wire


class ErrorObject(BaseModel):
    """JSON:API error object; unknown members are preserved."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    source: Optional[Dict[str, Any]] = None
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    @field_validator("status", "code", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
