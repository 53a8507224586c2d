"""In-memory FastAPI JSON:API app the provider is tested against.

Serves notes, users and tags under ``/api`` and records every request it
receives in ``app.state.requests``.
"""

from __future__ import annotations

import copy
import itertools
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

JSONAPI = "application/vnd.api+json"


def seed_data() -> dict[str, dict[str, dict[str, Any]]]:
    """Return example users, tags and notes keyed by type and id."""
    return {
        "users": {
            "1": {"type": "users", "id": "1", "attributes": {"login": "ada"}, "relationships": {}},
        },
        "tags": {
            "t1": {"type": "tags", "id": "t1", "attributes": {"name": "urgent"}, "relationships": {}},
            "t2": {"type": "tags", "id": "t2", "attributes": {"name": "home"}, "relationships": {}},
        },
        "notes": {
            "12": {
                "type": "notes",
                "id": "12",
                "attributes": {"title": "Groceries", "text": "milk"},
                "relationships": {
                    "author": {"data": {"type": "users", "id": "1"}},
                    "reviewer": {"data": None},
                    "tags": {"data": [{"type": "tags", "id": "t1"}, {"type": "tags", "id": "t2"}]},
                },
            },
            "13": {
                "type": "notes",
                "id": "13",
                "attributes": {"title": "Alpha", "text": "draft"},
                "relationships": {
                    "author": {"data": {"type": "users", "id": "1"}},
                    "reviewer": {"data": None},
                    "tags": {"data": []},
                },
            },
        },
    }


class ApiError(Exception):
    def __init__(self, status: int, title: str, detail: str) -> None:
        self.status = status
        self.document = {"errors": [{"status": str(status), "title": title, "detail": detail}]}


def _get(store: dict, type_: str, id_: str | None = None) -> Any:
    if type_ not in store:
        raise ApiError(404, "Not Found", f"Unknown resource type '{type_}'.")
    if id_ is None:
        return store[type_]
    resource = store[type_].get(id_)
    if resource is None:
        raise ApiError(404, "Not Found", f"Resource '{type_}/{id_}' does not exist.")
    return resource


def _linkage(resource: dict, name: str) -> list[dict]:
    data = resource["relationships"].get(name, {}).get("data")
    if data is None:
        return []
    return data if isinstance(data, list) else [data]


def _sparse(resource: dict, fields: dict[str, list[str]]) -> dict:
    names = fields.get(resource["type"])
    if names is None:
        return copy.deepcopy(resource)
    return {
        "type": resource["type"],
        "id": resource["id"],
        "attributes": {k: v for k, v in resource["attributes"].items() if k in names},
        "relationships": {k: v for k, v in resource["relationships"].items() if k in names},
    }


def _included(store: dict, primaries: list[dict], include: list[str], fields: dict) -> list[dict]:
    included: list[dict] = []
    seen = {(item["type"], item["id"]) for item in primaries}
    for path in include:
        current = primaries
        for name in path.split("."):
            following = []
            for resource in current:
                for identifier in _linkage(resource, name):
                    target = store.get(identifier["type"], {}).get(identifier["id"])
                    if target is not None:
                        following.append(target)
            for target in following:
                key = (target["type"], target["id"])
                if key not in seen:
                    seen.add(key)
                    included.append(_sparse(target, fields))
            current = following
    return included


def _parse_query(items: list[tuple[str, str]]) -> dict[str, Any]:
    query: dict[str, Any] = {"fields": {}, "filter": {}, "sort": [], "include": [], "page": {}}
    for key, value in items:
        if key.startswith("fields["):
            query["fields"][key[7:-1]] = [name for name in value.split(",") if name]
        elif key.startswith("filter["):
            query["filter"].setdefault(key[7:-1], []).append(value)
        elif key.startswith("page["):
            query["page"][key[5:-1]] = value
        elif key == "sort":
            query["sort"] = value.split(",")
        elif key == "include":
            query["include"] = value.split(",")
    return query


def _document(store: dict, data: Any, query: dict[str, Any]) -> dict[str, Any]:
    if data is None:
        return {"data": None}
    primaries = data if isinstance(data, list) else [data]
    document: dict[str, Any] = {
        "data": (
            [_sparse(item, query["fields"]) for item in primaries]
            if isinstance(data, list)
            else _sparse(data, query["fields"])
        )
    }
    if query["include"]:
        document["included"] = _included(store, primaries, query["include"], query["fields"])
    return document


def _list(store: dict, type_: str, query: dict[str, Any]) -> dict[str, Any]:
    items = list(_get(store, type_).values())
    for key, values in query["filter"].items():
        items = [item for item in items if str(item["attributes"].get(key)) in values]
    for term in reversed(query["sort"]):
        field = term.lstrip("-")
        items.sort(key=lambda item: item["attributes"].get(field), reverse=term.startswith("-"))
    total = len(items)
    if "size" in query["page"]:
        size = int(query["page"]["size"])
        number = int(query["page"].get("number", 1))
        items = items[(number - 1) * size : number * size]
    document = _document(store, items, query)
    document["meta"] = {"total": total}
    return document


def _relationship_document(resource: dict, name: str) -> dict[str, Any]:
    if name not in resource["relationships"]:
        raise ApiError(404, "Not Found", f"Unknown relationship '{name}'.")
    return {"data": copy.deepcopy(resource["relationships"][name]["data"])}


def _apply(store: dict, counter: Any, op: str, ref: dict, data: Any, query: dict) -> tuple[int, Any]:
    """Run one operation against ``store``; return status and document."""
    type_, id_, relationship = ref["type"], ref.get("id"), ref.get("relationship")
    if relationship is not None:
        resource = _get(store, type_, id_)
        if relationship not in resource["relationships"]:
            raise ApiError(404, "Not Found", f"Unknown relationship '{relationship}'.")
        entry = resource["relationships"][relationship]
        if op == "add":
            entry["data"] = entry["data"] + [item for item in data if item not in entry["data"]]
        elif op == "update":
            entry["data"] = data
        elif op == "remove":
            entry["data"] = [item for item in entry["data"] if item not in data]
        return 200, _relationship_document(resource, relationship)
    if op == "get":
        if id_ is None:
            return 200, _list(store, type_, query)
        _get(store, type_)
        return 200, _document(store, store[type_].get(id_), query)
    if op == "add":
        if "title" not in data.get("attributes", {}) and type_ == "notes":
            raise ApiError(422, "Unprocessable Entity", "Notes need a title.")
        resource = {
            "type": type_,
            "id": data.get("id") or str(next(counter)),
            "attributes": dict(data.get("attributes", {})),
            "relationships": dict(data.get("relationships", {})),
        }
        _get(store, type_)[resource["id"]] = resource
        return 201, _document(store, resource, query)
    if op == "update":
        resource = _get(store, type_, id_)
        resource["attributes"].update(data.get("attributes", {}))
        resource["relationships"].update(data.get("relationships", {}))
        return 200, _document(store, resource, query)
    if op == "remove":
        _get(store, type_, id_)
        del store[type_][id_]
        return 204, None
    raise ApiError(400, "Bad Request", f"Unknown operation '{op}'.")


def create_app() -> FastAPI:
    app = FastAPI()
    app.state.store = seed_data()
    app.state.requests = []
    counter = itertools.count(100)

    def respond(status: int, document: Any) -> Response:
        if document is None:
            return Response(status_code=status)
        return JSONResponse(document, status_code=status, media_type=JSONAPI)

    async def record(request: Request) -> Any:
        body = await request.json() if await request.body() else None
        app.state.requests.append(
            {
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "params": list(request.query_params.multi_items()),
                "headers": dict(request.headers),
                "body": body,
            }
        )
        return body

    async def handle(request: Request, op: str, ref: dict) -> Response:
        body = await record(request)
        data = body["data"] if body is not None else None
        query = _parse_query(list(request.query_params.multi_items()))
        try:
            status, document = _apply(app.state.store, counter, op, ref, data, query)
        except ApiError as exc:
            return respond(exc.status, exc.document)
        return respond(status, document)

    @app.get("/api/broken")
    async def broken() -> Response:
        return PlainTextResponse("upstream exploded", status_code=502)

    @app.patch("/api/bulk")
    async def bulk(request: Request) -> Response:
        body = await record(request)
        store = copy.deepcopy(app.state.store)
        results = []
        try:
            for entry in body["operations"]:
                query = {"fields": {}, "filter": {}, "sort": [], "include": [], "page": {}}
                query.update(entry.get("params", {}))
                query["include"] = [".".join(path) for path in query["include"]]
                _, document = _apply(store, counter, entry["op"], entry["ref"], entry.get("data"), query)
                results.append(document if document is not None else {"data": None})
        except ApiError as exc:
            return respond(exc.status, exc.document)
        app.state.store = store
        return respond(200, {"operations": results})

    @app.get("/api/{type_}")
    async def list_resources(request: Request, type_: str) -> Response:
        return await handle(request, "get", {"type": type_})

    @app.post("/api/{type_}")
    async def add_resource(request: Request, type_: str) -> Response:
        return await handle(request, "add", {"type": type_})

    @app.get("/api/{type_}/{id_}")
    async def get_resource(request: Request, type_: str, id_: str) -> Response:
        return await handle(request, "get", {"type": type_, "id": id_})

    @app.patch("/api/{type_}/{id_}")
    async def update_resource(request: Request, type_: str, id_: str) -> Response:
        return await handle(request, "update", {"type": type_, "id": id_})

    @app.delete("/api/{type_}/{id_}")
    async def remove_resource(request: Request, type_: str, id_: str) -> Response:
        return await handle(request, "remove", {"type": type_, "id": id_})

    @app.api_route("/api/{type_}/{id_}/relationships/{name}", methods=["GET", "POST", "PATCH", "DELETE"])
    async def relationship(request: Request, type_: str, id_: str, name: str) -> Response:
        op = {"GET": "get", "POST": "add", "PATCH": "update", "DELETE": "remove"}[request.method]
        return await handle(request, op, {"type": type_, "id": id_, "relationship": name})

    return app
