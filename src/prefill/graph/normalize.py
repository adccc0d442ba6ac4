"""Graph Normalizer - Convert raw graph payloads into ActionBlueprintGraph.

Two wire shapes are accepted:

- SCHEMA: ``{nodes: [...], edges: [{source, target}], forms: [...]}`` where
  each node references a form definition through ``data.component_id``
  and fields come from ``field_schema.properties``.
- LEGACY: ``{forms: [{id, name, fields: [...]}], edges: [{from, to}]}``
  with flat field lists (edges may also use ``source``/``target``).

The shape is decided once per payload by ``detect_shape`` and the payload
is then handed to exactly one conversion function. Both conversions are
total: missing optional metadata is defaulted, never raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

import structlog

from prefill.graph.models import (
    EMPTY_GRAPH,
    UNKNOWN_TYPE,
    ActionBlueprintGraph,
    Edge,
    Field,
    FormNode,
)

logger = structlog.get_logger(__name__)


class PayloadShape(Enum):
    """Wire shapes of the action blueprint graph payload."""

    SCHEMA = "schema"
    LEGACY = "legacy"


def detect_shape(raw: Any) -> PayloadShape:
    """Decide which wire shape a payload uses.

    A payload is SCHEMA shaped when it carries both a ``nodes`` list and a
    ``forms`` list; anything else is treated as LEGACY.
    """
    if (
        isinstance(raw, Mapping)
        and isinstance(raw.get("nodes"), list)
        and isinstance(raw.get("forms"), list)
    ):
        return PayloadShape.SCHEMA
    return PayloadShape.LEGACY


def normalize_field_type(prop: Mapping[str, Any] | None) -> str:
    """Resolve a schema property's type tag.

    Precedence: ``avantos_type``, then a list ``type`` joined with ``|``,
    then a string ``type``, else ``"unknown"``.
    """
    if not prop:
        return UNKNOWN_TYPE
    if prop.get("avantos_type"):
        return str(prop["avantos_type"])
    raw_type = prop.get("type")
    if isinstance(raw_type, (list, tuple)):
        return "|".join(str(t) for t in raw_type)
    if raw_type is None:
        return UNKNOWN_TYPE
    return str(raw_type)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _append_edge(edges: list[Edge], source: Any, target: Any) -> None:
    """Append an edge unless an endpoint is missing."""
    if source is None or target is None:
        logger.debug("edge_endpoint_missing", source=source, target=target)
        return
    edges.append(Edge(source=str(source), target=str(target)))


def from_schema_shape(raw: Mapping[str, Any]) -> ActionBlueprintGraph:
    """Convert a SCHEMA shaped payload.

    Args:
        raw: Payload with ``nodes``, ``edges`` and ``forms`` lists.

    Returns:
        Canonical graph with forms in node order.
    """
    definitions: dict[str, Mapping[str, Any]] = {}
    for definition in _as_list(raw.get("forms")):
        definition = _as_mapping(definition)
        if "id" in definition:
            definitions[str(definition["id"])] = definition

    forms: list[FormNode] = []
    for node in _as_list(raw.get("nodes")):
        node = _as_mapping(node)
        data = _as_mapping(node.get("data"))
        component_id = data.get("component_id")
        definition = definitions.get(str(component_id)) if component_id is not None else None
        if definition is None:
            logger.debug(
                "form_definition_missing",
                node_id=node.get("id"),
                component_id=component_id,
            )
            definition = {}

        properties = _as_mapping(_as_mapping(definition.get("field_schema")).get("properties"))
        fields = tuple(
            Field(
                id=str(key),
                label=str(_as_mapping(prop).get("title") or key),
                type=normalize_field_type(_as_mapping(prop)),
            )
            for key, prop in properties.items()
        )
        forms.append(
            FormNode(id=str(node.get("id", "")), name=str(data.get("name", "")), fields=fields)
        )

    edges: list[Edge] = []
    for edge in map(_as_mapping, _as_list(raw.get("edges"))):
        _append_edge(edges, edge.get("source"), edge.get("target"))
    return ActionBlueprintGraph(forms=tuple(forms), edges=tuple(edges))


def from_legacy_shape(raw: Mapping[str, Any]) -> ActionBlueprintGraph:
    """Convert a LEGACY shaped payload.

    Args:
        raw: Payload with flat ``forms`` (each with ``fields``) and ``edges``.

    Returns:
        Canonical graph with forms in payload order.
    """
    forms: list[FormNode] = []
    for form in map(_as_mapping, _as_list(raw.get("forms"))):
        fields = tuple(
            Field(
                id=str(f.get("id", "")),
                label=str(f.get("label") or f.get("id", "")),
                type=str(f.get("type") or UNKNOWN_TYPE),
            )
            for f in map(_as_mapping, _as_list(form.get("fields")))
        )
        forms.append(
            FormNode(id=str(form.get("id", "")), name=str(form.get("name", "")), fields=fields)
        )

    edges: list[Edge] = []
    for edge in map(_as_mapping, _as_list(raw.get("edges"))):
        source = edge.get("from") if edge.get("from") is not None else edge.get("source")
        target = edge.get("to") if edge.get("to") is not None else edge.get("target")
        _append_edge(edges, source, target)

    return ActionBlueprintGraph(forms=tuple(forms), edges=tuple(edges))


_CONVERTERS = {
    PayloadShape.SCHEMA: from_schema_shape,
    PayloadShape.LEGACY: from_legacy_shape,
}


def normalize_graph(raw: Any) -> ActionBlueprintGraph:
    """Normalize a raw payload (either shape) into the canonical graph.

    Non-mapping payloads (including None) yield the empty graph.

    Args:
        raw: Decoded JSON payload.

    Returns:
        ActionBlueprintGraph.
    """
    if not isinstance(raw, Mapping):
        return EMPTY_GRAPH
    shape = detect_shape(raw)
    graph = _CONVERTERS[shape](raw)
    logger.debug(
        "graph_normalized",
        shape=shape.value,
        forms=graph.form_count(),
        edges=len(graph.edges),
    )
    return graph
