"""Call-parameter serialization for query strings and JSON bodies.

Each field is governed by a ``FieldPolicy`` looked up by name: an optional
wire alias and how list values are encoded for each destination. Fields
without an entry use the default policy (no alias, lists joined with ``,``
in query strings and kept as lists in JSON bodies).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

QUERY = "query"
BODY = "body"

# Array encodings
JOIN = "join"  # ["a", "b"] -> "a,b"
REPEAT = "repeat"  # ["a", "b"] -> ?k=a&k=b (left as a list for the HTTP client)
KEEP = "keep"  # ["a", "b"] -> JSON list

ARRAY_DELIMITER = ","


@dataclass(frozen=True)
class FieldPolicy:
    """Serialization rule for a single parameter name."""

    alias: Optional[str] = None
    query_arrays: str = JOIN
    body_arrays: str = KEEP

    def array_mode(self, destination: str) -> str:
        return self.query_arrays if destination == QUERY else self.body_arrays


DEFAULT_FIELD_POLICY = FieldPolicy()

DEFAULT_POLICIES: Dict[str, FieldPolicy] = {
    # Free-text search goes over the wire as ``q``
    "query": FieldPolicy(alias="q"),
}


def serialize(
    params: Optional[Mapping[str, Any]],
    destination: str = QUERY,
    policies: Optional[Mapping[str, FieldPolicy]] = None,
) -> Dict[str, Any]:
    """Return a new wire-format mapping for *params*.

    ``None`` values are dropped. The input mapping is never modified and
    values of unexpected types are passed through unchanged.
    """
    if not params:
        return {}
    table = DEFAULT_POLICIES if policies is None else policies

    wire: Dict[str, Any] = {}
    for name, value in params.items():
        if value is None:
            continue
        policy = table.get(name, DEFAULT_FIELD_POLICY)
        key = policy.alias or name
        if isinstance(value, (list, tuple)):
            value = _encode_array(value, policy.array_mode(destination))
        wire[key] = value
    return wire


def serialize_query(
    params: Optional[Mapping[str, Any]],
    policies: Optional[Mapping[str, FieldPolicy]] = None,
) -> Dict[str, Any]:
    return serialize(params, QUERY, policies)


def serialize_body(
    params: Optional[Mapping[str, Any]],
    policies: Optional[Mapping[str, FieldPolicy]] = None,
) -> Dict[str, Any]:
    return serialize(params, BODY, policies)


def _encode_array(values: Any, mode: str) -> Any:
    if mode == JOIN:
        return ARRAY_DELIMITER.join(str(v) for v in values)
    return list(values)
