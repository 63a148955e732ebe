"""
JSONPath sub-selection for json-exporter.

Narrows a decoded document with a JSONPath expression before it is
flattened. Expressions use the ``jsonpath-ng`` extended syntax, so
filters such as ``$.nodes[?id = "db"]`` work.

A path made only of single keys and single indices selects one node
and yields that node's value. Anything that can match several nodes
(wildcards, slices, filters, unions, ``..``) always yields a list, so
metric names stay stable whatever the number of matches.
"""

from __future__ import annotations

from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse
from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath, Root, This

from json_exporter.exceptions import SelectionNotFound


def is_single_node(path: JSONPath) -> bool:
    """Return ``True`` if *path* can match at most one node."""
    if isinstance(path, (Root, This)):
        return True
    if isinstance(path, Child):
        return is_single_node(path.left) and is_single_node(path.right)
    if isinstance(path, Fields):
        return len(path.fields) == 1 and path.fields[0] != "*"
    if isinstance(path, Index):
        indices = getattr(path, "indices", None)
        return indices is None or len(indices) == 1
    return False


def select(data: Any, expression: str) -> Any:
    """Evaluate *expression* against *data*.

    Returns:
        The matched value for a single-node path, otherwise the list of
        matched values in match order.

    Raises:
        SelectionNotFound: If nothing matches or the expression is invalid.
    """
    try:
        compiled = parse(expression)
    except JSONPathError as exc:
        raise SelectionNotFound(f"invalid jsonpath {expression!r}: {exc}") from exc

    matches = [match.value for match in compiled.find(data)]
    if not matches:
        raise SelectionNotFound(f"jsonpath {expression!r} matched nothing")
    if is_single_node(compiled):
        return matches[0]
    return matches
