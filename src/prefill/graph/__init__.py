"""Graph module - Canonical form graph, normalization and source resolution.

Exports:
- Field, FormNode, Edge, ActionBlueprintGraph: Canonical graph structures
- normalize_graph: Raw payload (either wire shape) -> ActionBlueprintGraph
- group_sources: Direct / transitive / global source groups for a form
- GLOBAL_CATALOG: Static global source pseudo-forms
"""

from prefill.graph.catalog import GLOBAL_CATALOG
from prefill.graph.models import EMPTY_GRAPH, ActionBlueprintGraph, Edge, Field, FormNode
from prefill.graph.normalize import PayloadShape, detect_shape, normalize_graph
from prefill.graph.resolver import (
    GroupKind,
    SourceField,
    SourceForm,
    SourceGroup,
    direct_dependencies,
    group_sources,
    transitive_dependencies,
)

__all__ = [
    "ActionBlueprintGraph",
    "EMPTY_GRAPH",
    "Edge",
    "Field",
    "FormNode",
    "GLOBAL_CATALOG",
    "GroupKind",
    "PayloadShape",
    "SourceField",
    "SourceForm",
    "SourceGroup",
    "detect_shape",
    "direct_dependencies",
    "group_sources",
    "normalize_graph",
    "transitive_dependencies",
]
