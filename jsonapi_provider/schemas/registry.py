"""Resource schema declarations and the registry that validates against them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Union

from pydantic import BaseModel, field_validator, model_validator

from jsonapi_provider.core.document import DataDocument, ErrorDocument
from jsonapi_provider.core.errors import SchemaValidationError
from jsonapi_provider.core.operation import Operation, OperationKind
from jsonapi_provider.schemas.query import QueryParams
from jsonapi_provider.schemas.resource import Linkage, Resource, ResourceIdentifier


class FieldMode(str, Enum):
    READONLY = "readonly"
    UNCHANGEABLE = "unchangeable"
    EDITABLE = "editable"


class Cardinality(str, Enum):
    SINGLE = "single"
    NULLABLE = "nullable"
    MULTIPLE = "multiple"


class SortDirection(str, Enum):
    BOTH = "both"
    ASC = "asc"
    DESC = "desc"


class ResourcePurpose(str, Enum):
    """Why a resource is validated: read from a server, created, or edited."""

    READ = "read"
    NEW = "new"
    EDIT = "edit"


class AttributeSchema(BaseModel):
    mode: FieldMode = FieldMode.EDITABLE
    optional: bool = False


class RelationshipSchema(BaseModel):
    """Relationship declaration: target types, cardinality and mutability."""

    types: List[str]
    cardinality: Cardinality = Cardinality.SINGLE
    mode: FieldMode = FieldMode.EDITABLE
    optional: bool = False

    @field_validator("types", mode="before")
    @classmethod
    def _single_type(cls, value: Any) -> Any:
        return [value] if isinstance(value, str) else value

    @field_validator("types")
    @classmethod
    def _non_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("A relationship must declare at least one target type.")
        return value


class FilterSchema(BaseModel):
    multiple: bool = False


class SortSchema(BaseModel):
    direction: SortDirection = SortDirection.BOTH


class ResourceSchema(BaseModel):
    """Static description of one resource type."""

    type: str
    attributes: Dict[str, AttributeSchema] = {}
    relationships: Dict[str, RelationshipSchema] = {}
    addable: bool = True
    updatable: bool = True
    removable: bool = True
    listable: bool = True
    filters: Dict[str, FilterSchema] = {}
    sorts: Dict[str, SortSchema] = {}

    @model_validator(mode="after")
    def _check_field_names(self) -> "ResourceSchema":
        overlap = self.attributes.keys() & self.relationships.keys()
        if overlap:
            raise ValueError(f"Fields declared as both attribute and relationship: {sorted(overlap)}.")
        reserved = (self.attributes.keys() | self.relationships.keys()) & {"type", "id"}
        if reserved:
            raise ValueError(f"Reserved field names: {sorted(reserved)}.")
        return self

    @property
    def field_names(self) -> set[str]:
        return set(self.attributes) | set(self.relationships)


class SchemaRegistry:
    """Hold resource schemas and check requests and responses against them."""

    def __init__(self, schemas: Iterable[ResourceSchema] = ()) -> None:
        self._schemas: dict[str, ResourceSchema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: Union[ResourceSchema, dict[str, Any]]) -> ResourceSchema:
        """Register a schema; each resource type may be registered once."""
        if not isinstance(schema, ResourceSchema):
            schema = ResourceSchema.model_validate(schema)
        if schema.type in self._schemas:
            raise ValueError(f"Resource type {schema.type!r} is already registered.")
        self._schemas[schema.type] = schema
        return schema

    def get(self, type_: str) -> ResourceSchema:
        try:
            return self._schemas[type_]
        except KeyError:
            raise SchemaValidationError(f"Unknown resource type {type_!r}.") from None

    def __contains__(self, type_: object) -> bool:
        return type_ in self._schemas

    def __iter__(self) -> Iterator[ResourceSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def _relationship(self, schema: ResourceSchema, name: str, pointer: str) -> RelationshipSchema:
        relationship = schema.relationships.get(name)
        if relationship is None:
            raise SchemaValidationError(
                f"Resource type {schema.type!r} has no relationship {name!r}.", pointer=pointer
            )
        return relationship

    def validate_linkage(
        self, type_: str, relationship: str, linkage: Linkage, *, pointer: str = "/data"
    ) -> None:
        """Check that linkage agrees with the relationship's cardinality and types."""
        declaration = self._relationship(self.get(type_), relationship, pointer)
        if declaration.cardinality is Cardinality.MULTIPLE:
            if not isinstance(linkage, list):
                raise SchemaValidationError(
                    f"Relationship {relationship!r} is to-many and needs a list.", pointer=pointer
                )
            identifiers = linkage
        else:
            if isinstance(linkage, list):
                raise SchemaValidationError(
                    f"Relationship {relationship!r} is to-one and cannot hold a list.",
                    pointer=pointer,
                )
            if linkage is None:
                if declaration.cardinality is not Cardinality.NULLABLE:
                    raise SchemaValidationError(
                        f"Relationship {relationship!r} is not nullable.", pointer=pointer
                    )
                return
            identifiers = [linkage]
        for index, identifier in enumerate(identifiers):
            if identifier.type not in declaration.types:
                raise SchemaValidationError(
                    f"Relationship {relationship!r} cannot point to type {identifier.type!r}.",
                    pointer=f"{pointer}/{index}" if isinstance(linkage, list) else pointer,
                )

    def validate_resource(
        self,
        resource: Resource,
        purpose: ResourcePurpose = ResourcePurpose.READ,
        *,
        pointer: str = "/data",
    ) -> None:
        """Check a resource object against its type's schema."""
        schema = self.get(resource.type)
        if purpose is ResourcePurpose.EDIT and resource.id is None and resource.lid is None:
            raise SchemaValidationError("Edited resources need an id or lid.", pointer=pointer)

        fields: dict[str, Union[AttributeSchema, RelationshipSchema]] = {}
        for name in resource.attributes:
            declaration = schema.attributes.get(name)
            if declaration is None:
                raise SchemaValidationError(
                    f"Resource type {schema.type!r} has no attribute {name!r}.",
                    pointer=f"{pointer}/attributes/{name}",
                )
            fields[f"attributes/{name}"] = declaration
        for name, relationship in resource.relationships.items():
            relationship_pointer = f"{pointer}/relationships/{name}"
            fields[f"relationships/{name}"] = self._relationship(schema, name, relationship_pointer)
            if "data" in relationship.model_fields_set:
                self.validate_linkage(
                    resource.type, name, relationship.data, pointer=f"{relationship_pointer}/data"
                )

        if purpose is ResourcePurpose.READ:
            return
        for location, declaration in fields.items():
            if declaration.mode is FieldMode.READONLY or (
                purpose is ResourcePurpose.EDIT and declaration.mode is not FieldMode.EDITABLE
            ):
                raise SchemaValidationError(
                    f"Field is {declaration.mode.value} and cannot be "
                    f"{'set' if purpose is ResourcePurpose.NEW else 'changed'}.",
                    pointer=f"{pointer}/{location}",
                )
        if purpose is ResourcePurpose.NEW:
            self._check_required(schema, resource, pointer)

    def _check_required(self, schema: ResourceSchema, resource: Resource, pointer: str) -> None:
        declared = [("attributes", schema.attributes, resource.attributes)]
        declared.append(("relationships", schema.relationships, resource.relationships))
        for section, declarations, values in declared:
            for name, declaration in declarations.items():
                required = declaration.mode is not FieldMode.READONLY and not declaration.optional
                if required and name not in values:
                    raise SchemaValidationError(
                        f"Missing required field {name!r}.", pointer=f"{pointer}/{section}"
                    )

    def validate_query(self, type_: str, params: QueryParams, *, listing: bool) -> None:
        """Check filter, sort, sparse fieldsets and include paths for ``type_``."""
        schema = self.get(type_)
        if params.filter:
            if not listing:
                raise SchemaValidationError("Filtering is only supported on collections.")
            for key, value in params.filter.items():
                declaration = schema.filters.get(key)
                if declaration is None:
                    raise SchemaValidationError(f"Resource type {type_!r} has no filter {key!r}.")
                if isinstance(value, list) and not declaration.multiple:
                    raise SchemaValidationError(f"Filter {key!r} accepts a single value.")
        if params.sort:
            if not listing:
                raise SchemaValidationError("Sorting is only supported on collections.")
            for term in params.sort:
                declaration = schema.sorts.get(term.field)
                if declaration is None:
                    raise SchemaValidationError(
                        f"Resource type {type_!r} cannot be sorted by {term.field!r}."
                    )
                expected = SortDirection.ASC if term.ascending else SortDirection.DESC
                if declaration.direction not in (SortDirection.BOTH, expected):
                    raise SchemaValidationError(
                        f"Sort field {term.field!r} only allows {declaration.direction.value}."
                    )
        for fieldset_type, names in params.fields.items():
            if fieldset_type not in self:
                continue
            unknown = set(names) - self.get(fieldset_type).field_names
            if unknown:
                raise SchemaValidationError(
                    f"Unknown fields for type {fieldset_type!r}: {sorted(unknown)}."
                )
        for path in params.include:
            self._check_include_path(type_, path)

    def _check_include_path(self, type_: str, path: List[str]) -> None:
        current = [type_]
        for name in path:
            known = [self._schemas[candidate] for candidate in current if candidate in self]
            if not known:
                return
            targets: list[str] = []
            for schema in known:
                if name in schema.relationships:
                    targets.extend(schema.relationships[name].types)
            if not targets:
                raise SchemaValidationError(
                    f"Include path {'.'.join(path)!r} does not follow declared relationships."
                )
            current = targets

    def validate_operation(self, operation: Operation) -> None:
        """Check an outgoing operation against the schema of its type."""
        ref = operation.ref
        schema = self.get(ref.type)
        kind = operation.kind
        if kind is OperationKind.GET_MANY and not schema.listable:
            raise SchemaValidationError(f"Resource type {ref.type!r} is not listable.")
        if kind is OperationKind.ADD_ONE:
            if not schema.addable:
                raise SchemaValidationError(f"Resource type {ref.type!r} is not addable.")
            self.validate_resource(operation.data, ResourcePurpose.NEW)
        if kind is OperationKind.UPDATE_ONE:
            if not schema.updatable:
                raise SchemaValidationError(f"Resource type {ref.type!r} is not updatable.")
            self.validate_resource(operation.data, ResourcePurpose.EDIT)
        if kind is OperationKind.REMOVE_ONE and not schema.removable:
            raise SchemaValidationError(f"Resource type {ref.type!r} is not removable.")
        if ref.relationship is not None:
            declaration = self._relationship(schema, ref.relationship, "/ref/relationship")
            if kind is not OperationKind.GET_RELATIONSHIP and declaration.mode is not FieldMode.EDITABLE:
                raise SchemaValidationError(f"Relationship {ref.relationship!r} is not editable.")
            if kind in (OperationKind.ADD_RELATIONSHIP, OperationKind.REMOVE_RELATIONSHIP):
                if declaration.cardinality is not Cardinality.MULTIPLE:
                    raise SchemaValidationError(
                        f"Relationship {ref.relationship!r} is to-one; members cannot be "
                        "added or removed."
                    )
            if operation.route.has_body:
                self.validate_linkage(ref.type, ref.relationship, operation.data)
        self.validate_query(ref.type, operation.params, listing=kind is OperationKind.GET_MANY)

    def validate_document(
        self, operation: Operation, document: Union[DataDocument, ErrorDocument]
    ) -> None:
        """Check a response document; resources of unregistered types pass through."""
        if isinstance(document, ErrorDocument):
            return
        data = document.data
        if isinstance(data, Resource):
            self._validate_known(data, "/data")
        elif isinstance(data, list) and data and isinstance(data[0], Resource):
            for index, resource in enumerate(data):
                self._validate_known(resource, f"/data/{index}")
        elif operation.ref.relationship is not None and operation.ref.type in self:
            if data is None or isinstance(data, (ResourceIdentifier, list)):
                self.validate_linkage(operation.ref.type, operation.ref.relationship, data)
        for index, resource in enumerate(document.included):
            self._validate_known(resource, f"/included/{index}")

    def _validate_known(self, resource: Resource, pointer: str) -> None:
        if resource.type in self:
            self.validate_resource(resource, ResourcePurpose.READ, pointer=pointer)
