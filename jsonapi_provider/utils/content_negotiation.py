"""Helpers for JSON:API content negotiation."""

from __future__ import annotations

from typing import Any, Sequence

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


def _split_parameters(value: str) -> list[str]:
    return [part.strip() for part in value.split(";") if part.strip()]


def _parse_param_value(value: str) -> list[str]:
    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    if not value:
        return []
    return value.split(" ")


def parse_jsonapi_media_type(content_type: str) -> dict[str, Any]:
    """Parse JSON:API media type parameters (ext/profile)."""
    parts = _split_parameters(content_type)
    media_type = parts[0].lower() if parts else ""
    params: dict[str, Any] = {"media_type": media_type, "ext": [], "profile": []}

    for param in parts[1:]:
        if "=" not in param:
            continue
        name, raw_value = param.split("=", 1)
        name = name.strip().lower()
        raw_value = raw_value.strip()
        if name in {"ext", "profile"}:
            params[name] = _parse_param_value(raw_value)
        else:
            params.setdefault("other_params", {})[name] = raw_value
    return params


def build_media_type(
    ext: Sequence[str] = (), profile: Sequence[str] = ()
) -> str:
    """Return the JSON:API media type with optional ext/profile parameters."""
    media_type = JSONAPI_MEDIA_TYPE
    if ext:
        media_type += f'; ext="{" ".join(ext)}"'
    if profile:
        media_type += f'; profile="{" ".join(profile)}"'
    return media_type


def default_headers(
    ext: Sequence[str] = (), profile: Sequence[str] = ()
) -> dict[str, str]:
    """Return Accept and Content-Type headers for JSON:API requests."""
    media_type = build_media_type(ext, profile)
    return {"Accept": media_type, "Content-Type": media_type}


def is_json_media_type(content_type: str) -> bool:
    """Return True for the JSON:API media type or plain JSON."""
    media_type = parse_jsonapi_media_type(content_type)["media_type"]
    return media_type in {JSONAPI_MEDIA_TYPE, "application/json"}


def unrequested_extensions(content_type: str, accept: str) -> list[str]:
    """Return extensions applied by a response that the request did not accept."""
    applied = parse_jsonapi_media_type(content_type)
    if applied["media_type"] != JSONAPI_MEDIA_TYPE:
        return []
    requested: set[str] = set()
    for media_range in accept.split(","):
        parsed = parse_jsonapi_media_type(media_range)
        if parsed["media_type"] == JSONAPI_MEDIA_TYPE:
            requested.update(parsed["ext"])
    return [ext for ext in applied["ext"] if ext not in requested]
