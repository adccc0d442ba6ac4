"""Dependency Resolver - Group the prefill sources available to a form.

Given the canonical graph and a selected form, sources are partitioned by
relationship to the selected form:

- DIRECT: forms with a prerequisite edge straight into the selected form
- TRANSITIVE: every other ancestor, reached by walking edges backward
- GLOBAL: the static catalog, identical for every selection

All functions here are pure; an absent graph or selection yields empty
DIRECT/TRANSITIVE groups rather than an error.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

import structlog

from prefill.graph.catalog import GLOBAL_CATALOG
from prefill.graph.models import EMPTY_GRAPH, ActionBlueprintGraph, Edge, FormNode
from prefill.mapping.sources import FormFieldSource, GlobalSource, PrefillSource

logger = structlog.get_logger(__name__)


class GroupKind(Enum):
    """Relationship of a source group to the selected form."""

    DIRECT = "direct"
    TRANSITIVE = "transitive"
    GLOBAL = "global"

    @property
    def label(self) -> str:
        return _GROUP_LABELS[self]


_GROUP_LABELS = {
    GroupKind.DIRECT: "Direct dependencies",
    GroupKind.TRANSITIVE: "Transitive dependencies",
    GroupKind.GLOBAL: "Global data",
}


@dataclass(frozen=True)
class SourceField:
    """A selectable field, projected to what source display needs."""

    id: str
    label: str


@dataclass(frozen=True)
class SourceForm:
    """A form offered as a source, with its selectable fields."""

    id: str
    name: str
    fields: tuple[SourceField, ...] = ()

    @classmethod
    def from_form(cls, form: FormNode) -> SourceForm:
        return cls(
            id=form.id,
            name=form.name,
            fields=tuple(SourceField(id=f.id, label=f.label or f.id) for f in form.fields),
        )

    def has_field(self, field_id: str) -> bool:
        return any(f.id == field_id for f in self.fields)


@dataclass(frozen=True)
class SourceGroup:
    """One relationship group of candidate sources.

    The group's ``kind`` decides which PrefillSource variant its candidates
    become, so a global property and a form field with the same display
    label can never be confused.
    """

    kind: GroupKind
    forms: tuple[SourceForm, ...] = ()

    @property
    def label(self) -> str:
        return self.kind.label

    def find_form(self, form_id: str) -> SourceForm | None:
        for form in self.forms:
            if form.id == form_id:
                return form
        return None

    def source_for(self, form_id: str, field_id: str) -> PrefillSource:
        """Build the PrefillSource for a candidate in this group.

        Args:
            form_id: Candidate form (or catalog entry) id.
            field_id: Candidate field id.

        Returns:
            GlobalSource for the GLOBAL group, FormFieldSource otherwise.

        Raises:
            KeyError: If the candidate is not offered by this group.
        """
        form = self.find_form(form_id)
        if form is None or not form.has_field(field_id):
            raise KeyError(f"{form_id}.{field_id} is not a candidate in {self.label}")
        label = f"{form.name}.{field_id}"
        if self.kind is GroupKind.GLOBAL:
            return GlobalSource(label=label, group_id=form.id, field_id=field_id)
        return FormFieldSource(form_id=form.id, field_id=field_id, label=label)


GLOBAL_GROUP = SourceGroup(
    kind=GroupKind.GLOBAL,
    forms=tuple(SourceForm.from_form(entry) for entry in GLOBAL_CATALOG),
)


def _incoming_index(graph: ActionBlueprintGraph) -> dict[str, list[Edge]]:
    index: dict[str, list[Edge]] = {}
    for edge in graph.edges:
        index.setdefault(edge.target, []).append(edge)
    return index


def direct_dependencies(graph: ActionBlueprintGraph, form_id: str) -> list[str]:
    """Return ids of forms with an edge directly into ``form_id``.

    Discovery order, no duplicates, never ``form_id`` itself.
    """
    direct: dict[str, None] = {}
    for edge in graph.edges:
        if edge.target == form_id and edge.source != form_id:
            direct.setdefault(edge.source, None)
    return list(direct)


def iter_ancestors(graph: ActionBlueprintGraph, form_id: str) -> Iterator[str]:
    """Yield every ancestor of ``form_id`` once, depth-first.

    Walks prerequisite edges backward with an explicit stack. The visited
    set keeps diamond-shaped dependencies from yielding an ancestor twice
    and stops a cyclic input from looping forever. ``form_id`` itself is
    never yielded.
    """
    incoming = _incoming_index(graph)
    visited: set[str] = {form_id}
    cycle_reported = False
    stack: list[Iterator[Edge]] = [iter(incoming.get(form_id, ()))]

    while stack:
        edge = next(stack[-1], None)
        if edge is None:
            stack.pop()
            continue
        parent = edge.source
        if parent == form_id and not cycle_reported:
            cycle_reported = True
            logger.warning("dependency_cycle_detected", form_id=form_id, via=str(edge))
        if parent in visited:
            continue
        visited.add(parent)
        yield parent
        stack.append(iter(incoming.get(parent, ())))


def transitive_dependencies(graph: ActionBlueprintGraph, form_id: str) -> list[str]:
    """Return ancestors of ``form_id`` that are not direct dependencies."""
    direct = set(direct_dependencies(graph, form_id))
    return [ancestor for ancestor in iter_ancestors(graph, form_id) if ancestor not in direct]


def _project(graph: ActionBlueprintGraph, form_ids: list[str]) -> tuple[SourceForm, ...]:
    forms = []
    for form_id in form_ids:
        form = graph.find_form(form_id)
        # Edges may name forms the payload never defined
        if form is not None:
            forms.append(SourceForm.from_form(form))
    return tuple(forms)


def group_sources(
    graph: ActionBlueprintGraph | None,
    selected_form_id: str | None,
) -> list[SourceGroup]:
    """Compute the three source groups for a selected form.

    Args:
        graph: Canonical graph, or None when nothing is loaded yet.
        selected_form_id: The form whose fields are being mapped, or None.

    Returns:
        ``[DIRECT, TRANSITIVE, GLOBAL]`` groups, always all three.
    """
    graph = graph or EMPTY_GRAPH
    if graph.is_empty or not selected_form_id:
        return [
            SourceGroup(kind=GroupKind.DIRECT),
            SourceGroup(kind=GroupKind.TRANSITIVE),
            GLOBAL_GROUP,
        ]

    direct_ids = direct_dependencies(graph, selected_form_id)
    direct_set = set(direct_ids)
    transitive_ids = [
        ancestor
        for ancestor in iter_ancestors(graph, selected_form_id)
        if ancestor not in direct_set
    ]

    return [
        SourceGroup(kind=GroupKind.DIRECT, forms=_project(graph, direct_ids)),
        SourceGroup(kind=GroupKind.TRANSITIVE, forms=_project(graph, transitive_ids)),
        GLOBAL_GROUP,
    ]


def find_group(groups: list[SourceGroup], kind: GroupKind) -> SourceGroup:
    """Return the group of the given kind from a ``group_sources`` result."""
    for group in groups:
        if group.kind is kind:
            return group
    raise KeyError(kind.value)
