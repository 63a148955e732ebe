"""
JSON flattening for json-exporter.

Walks a decoded JSON document and yields one ``(path, value)`` pair per
numeric or boolean leaf. Object keys are joined with ``_`` and list
positions are appended as ``__<index>``, so ``{"a": {"b": [1]}}`` yields
``("a_b__0", 1.0)``. Strings and nulls carry no numeric value and are
dropped.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

import structlog

logger = structlog.get_logger()

LIST_SEPARATOR = "__"
KEY_SEPARATOR = "_"

_SANITIZE_TABLE = str.maketrans({" ": "_", "/": "_", ":": "_"})


def walk_json(value: Any, path: str = "") -> Iterator[tuple[str, float]]:
    """Lazily yield ``(path, float)`` pairs for every numeric leaf of *value*.

    Booleans are emitted as ``1.0`` / ``0.0``. Unrecognised leaf types are
    logged and skipped.

    Args:
        value: A decoded JSON value.
        path: Path of *value* inside the enclosing document.
    """
    # bool is a subclass of int, so it has to be tested first.
    if isinstance(value, bool):
        yield path, 1.0 if value else 0.0
    elif isinstance(value, (int, float)):
        yield path, float(value)
    elif value is None or isinstance(value, str):
        return
    elif isinstance(value, (list, tuple)):
        prefix = path + LIST_SEPARATOR
        for index, item in enumerate(value):
            yield from walk_json(item, f"{prefix}{index}")
    elif isinstance(value, Mapping):
        prefix = path + KEY_SEPARATOR if path else ""
        for key, item in value.items():
            yield from walk_json(item, f"{prefix}{key}")
    else:
        logger.warning("unknown_json_type", path=path, type=type(value).__name__)


def sanitize_key(key: str) -> str:
    """Replace characters that are invalid in metric names (space, ``/``, ``:``) with ``_``."""
    return key.translate(_SANITIZE_TABLE)
