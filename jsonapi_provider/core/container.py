"""Relationship navigation over a decoded document's primary and included resources."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from jsonapi_provider.core.document import DataDocument
from jsonapi_provider.core.errors import RelationshipNotDeclaredError, ResourceNotFoundError
from jsonapi_provider.schemas.resource import Linkage, Resource, ResourceIdentifier


def _find(resources: Sequence[Resource], type_: str, id_: Optional[str]) -> Optional[Resource]:
    for resource in resources:
        if resource.type == type_ and resource.id == id_:
            return resource
    return None


class ResourceContainer:
    """Read-only view resolving relationships against side-loaded resources.

    The container keeps references to the caller's resources; it never
    copies, indexes or mutates them. Lookups are linear scans and the first
    match wins when ``included`` holds duplicates.
    """

    def __init__(
        self,
        data: Union[Resource, Sequence[Resource], None],
        included: Sequence[Resource] = (),
    ) -> None:
        self._data = data
        if data is None:
            self._primary: tuple[Resource, ...] = ()
        elif isinstance(data, Resource):
            self._primary = (data,)
        else:
            self._primary = tuple(data)
        self._included = tuple(included)

    @classmethod
    def from_document(cls, document: DataDocument) -> "ResourceContainer":
        """Build a container over a success document's resources."""
        data = document.data
        if isinstance(data, ResourceIdentifier) or (
            isinstance(data, list) and any(isinstance(item, ResourceIdentifier) for item in data)
        ):
            raise TypeError("Relationship documents carry identifiers, not resources.")
        return cls(data, document.included)

    def get(self) -> Union[Resource, Sequence[Resource], None]:
        """Return the primary data the container was built with."""
        return self._data

    @property
    def included(self) -> tuple[Resource, ...]:
        return self._included

    def find(self, type_: str, id_: str) -> Optional[Resource]:
        """Return the first primary, then included, resource with this identity."""
        resource = _find(self._primary, type_, id_)
        if resource is None:
            resource = _find(self._included, type_, id_)
        return resource

    def get_linkage(self, type_: str, id_: str, relationship: str) -> Linkage:
        """Return the raw linkage of a relationship of a known resource."""
        owner = self.find(type_, id_)
        if owner is None:
            raise ResourceNotFoundError(type_, id_)
        entry = owner.relationships.get(relationship)
        if entry is None:
            raise RelationshipNotDeclaredError(type_, id_, relationship)
        return entry.data

    def get_relationship(
        self, type_: str, id_: str, relationship: str
    ) -> Union[Resource, list[Resource], None]:
        """Resolve a relationship into included resources.

        A ``null`` relationship and a to-one target the server did not
        side-load both give ``None``; use :meth:`get_linkage` to tell them
        apart. To-many targets missing from ``included`` are skipped.
        """
        linkage = self.get_linkage(type_, id_, relationship)
        if linkage is None:
            return None
        if isinstance(linkage, list):
            resolved = (_find(self._included, item.type, item.id) for item in linkage)
            return [resource for resource in resolved if resource is not None]
        return _find(self._included, linkage.type, linkage.id)
