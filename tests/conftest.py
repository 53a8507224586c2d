"""Shared fixtures: a recording fake transport and an in-process JSON:API app."""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from jsonapi_provider.pagination import PageNumberComposer
from jsonapi_provider.providers import NetworkResourceProvider
from jsonapi_provider.schemas.registry import (
    AttributeSchema,
    Cardinality,
    FieldMode,
    FilterSchema,
    RelationshipSchema,
    ResourceSchema,
    SchemaRegistry,
    SortDirection,
    SortSchema,
)
from jsonapi_provider.transports import HttpxTransport

from tests.app import create_app


class RecordingTransport:
    """Fake transport returning queued bodies and recording every call."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[Any, ...]] = []

    async def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        response = self.responses.pop(0) if self.responses else {"data": None}
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def fake_provider(recording_transport: RecordingTransport) -> NetworkResourceProvider:
    return NetworkResourceProvider("/api", recording_transport, PageNumberComposer())


@pytest.fixture
def registry() -> SchemaRegistry:
    """Schemas for the notes, users and tags served by the test app."""
    return SchemaRegistry(
        [
            ResourceSchema(
                type="notes",
                attributes={
                    "title": AttributeSchema(),
                    "text": AttributeSchema(optional=True),
                    "created": AttributeSchema(mode=FieldMode.READONLY),
                },
                relationships={
                    "author": RelationshipSchema(types="users", mode=FieldMode.UNCHANGEABLE),
                    "reviewer": RelationshipSchema(
                        types="users", cardinality=Cardinality.NULLABLE, optional=True
                    ),
                    "tags": RelationshipSchema(
                        types="tags", cardinality=Cardinality.MULTIPLE, optional=True
                    ),
                },
                filters={"title": FilterSchema(), "tag": FilterSchema(multiple=True)},
                sorts={"title": SortSchema(), "created": SortSchema(direction=SortDirection.DESC)},
            ),
            ResourceSchema(
                type="users",
                attributes={"login": AttributeSchema(mode=FieldMode.UNCHANGEABLE)},
                addable=False,
                removable=False,
            ),
            ResourceSchema(
                type="tags",
                attributes={"name": AttributeSchema()},
                listable=False,
            ),
        ]
    )


@pytest.fixture
def app():
    return create_app()


@pytest_asyncio.fixture
async def http_client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client


@pytest.fixture
def transport(http_client: httpx.AsyncClient) -> HttpxTransport:
    return HttpxTransport(client=http_client)


@pytest.fixture
def provider(transport: HttpxTransport) -> NetworkResourceProvider:
    return NetworkResourceProvider("/api", transport)
