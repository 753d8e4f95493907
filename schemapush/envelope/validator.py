"""Envelope validator — structural check of a parsed schema document.

Walks the envelope meta-schema by hand: the handful of keywords it uses
(type, required, properties, minLength, pattern) do not need a full
JSON Schema implementation.
"""

from __future__ import annotations

import re

from schemapush.envelope.schema import get_schema


def validate_envelope(data) -> list[str]:
    """Validate a parsed JSON document against the self-describing envelope.

    Args:
        data: The document as returned by ``json.loads``.

    Returns:
        List of error messages. Empty list means valid.
    """
    issues: list[str] = []
    _validate_node(data, get_schema(), "", issues)
    return issues


def schema_path(content: dict) -> str:
    """Return ``vendor/name/format/version`` for a valid self-describing schema."""
    meta = content["self"]
    return "/".join([meta["vendor"], meta["name"], meta["format"], meta["version"]])


def _validate_node(data, schema: dict, path: str, issues: list[str]):
    """Recursively validate data against a meta-schema node."""
    schema_type = schema.get("type")

    if schema_type and not _type_matches(data, schema_type):
        issues.append(f"{path or '/'}: expected type '{schema_type}', got {_json_type(data)}")
        return

    if schema_type == "string":
        min_len = schema.get("minLength", 0)
        if len(data) < min_len:
            issues.append(f"{path or '/'}: string too short (min {min_len}, got {len(data)})")
            return
        if "pattern" in schema and not re.match(schema["pattern"], data):
            issues.append(f"{path or '/'}: string '{data}' does not match pattern '{schema['pattern']}'")

    if schema_type == "object":
        for req in schema.get("required", []):
            if req not in data:
                issues.append(f"{path or '/'}: missing required property '{req}'")

        props = schema.get("properties", {})
        for key, value in data.items():
            if key in props:
                _validate_node(value, props[key], f"{path}.{key}", issues)


def _type_matches(data, schema_type: str) -> bool:
    type_map = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }
    expected = type_map.get(schema_type)
    if expected is None:
        return True
    # bool is a subclass of int in Python but not in JSON
    if schema_type in ("integer", "number") and isinstance(data, bool):
        return False
    return isinstance(data, expected)


def _json_type(data) -> str:
    names = {
        bool: "boolean",
        int: "integer",
        float: "number",
        str: "string",
        list: "array",
        dict: "object",
        type(None): "null",
    }
    return names.get(type(data), type(data).__name__)
