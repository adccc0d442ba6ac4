"""Graph Serialization - Export graph, source groups and prefill state.

These JSON-compatible dicts are what presentation layers read; they never
recompute grouping or normalization themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prefill.graph.models import ActionBlueprintGraph, FormNode
    from prefill.graph.resolver import SourceGroup
    from prefill.mapping.sources import PrefillState


def serialize_form(form: FormNode) -> dict[str, Any]:
    """Serialize a FormNode with its fields."""
    return {
        "id": form.id,
        "name": form.name,
        "fields": [{"id": f.id, "label": f.label, "type": f.type} for f in form.fields],
    }


def serialize_graph(graph: ActionBlueprintGraph) -> dict[str, Any]:
    """Serialize the canonical graph.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with ``forms`` and ``edges`` (edges use ``from``/``to``).
    """
    return {
        "forms": [serialize_form(form) for form in graph.forms],
        "edges": [{"from": edge.source, "to": edge.target} for edge in graph.edges],
    }


def serialize_groups(groups: list[SourceGroup]) -> list[dict[str, Any]]:
    """Serialize ``group_sources`` output."""
    return [
        {
            "kind": group.kind.value,
            "label": group.label,
            "forms": [
                {
                    "id": form.id,
                    "name": form.name,
                    "fields": [{"id": f.id, "label": f.label} for f in form.fields],
                }
                for form in group.forms
            ],
        }
        for group in groups
    ]


def serialize_state(state: PrefillState) -> dict[str, dict[str, Any]]:
    """Serialize a PrefillState using the wire names of each source."""
    return {
        form_id: {field_id: source.to_dict() for field_id, source in mapping.items()}
        for form_id, mapping in state.items()
    }
