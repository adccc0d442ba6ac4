"""Graph models - Canonical in-memory form dependency graph.

This module defines the structures every other component works with:
- Field: A single data-entry field of a form
- FormNode: A form in the dependency graph
- Edge: A prerequisite relationship between two forms
- ActionBlueprintGraph: Forms plus edges
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

UNKNOWN_TYPE = "unknown"


@dataclass(frozen=True)
class Field:
    """A field on a form.

    Attributes:
        id: Identifier, unique within its form.
        label: Display text (defaults to id).
        type: Normalized type tag (e.g. "short-text", "string|null").
    """

    id: str
    label: str = ""
    type: str = UNKNOWN_TYPE

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.id)


@dataclass(frozen=True)
class FormNode:
    """A form (graph node) with its ordered fields.

    Attributes:
        id: Identifier, unique within the graph.
        name: Human-readable form name.
        fields: Fields in source definition order.
    """

    id: str
    name: str = ""
    fields: tuple[Field, ...] = ()

    def find_field(self, field_id: str) -> Field | None:
        """Return the field with the given id, or None."""
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def has_field(self, field_id: str) -> bool:
        """Check if the form defines a field with this id."""
        return self.find_field(field_id) is not None

    def field_ids(self) -> list[str]:
        """Return field ids in order."""
        return [f.id for f in self.fields]


@dataclass(frozen=True)
class Edge:
    """Prerequisite edge: ``source`` must be completed before ``target``."""

    source: str
    target: str

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


@dataclass(frozen=True)
class ActionBlueprintGraph:
    """Canonical form dependency graph.

    Built once per fetch and replaced wholesale on reload. Forms keep the
    order of the payload they were normalized from.
    """

    forms: tuple[FormNode, ...] = ()
    edges: tuple[Edge, ...] = ()
    _index: dict[str, FormNode] = field(
        default_factory=dict, init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        # First occurrence wins when a payload repeats an id
        for form in self.forms:
            self._index.setdefault(form.id, form)

    @property
    def is_empty(self) -> bool:
        """True when the graph holds no forms."""
        return not self.forms

    def find_form(self, form_id: str) -> FormNode | None:
        """Find a form by id.

        Args:
            form_id: The form identifier.

        Returns:
            The FormNode, or None if not present.
        """
        return self._index.get(form_id)

    def has_form(self, form_id: str) -> bool:
        """Check if a form with this id exists."""
        return form_id in self._index

    def iter_forms(self) -> Iterator[FormNode]:
        """Iterate over forms in graph order."""
        yield from self.forms

    def iter_incoming(self, form_id: str) -> Iterator[Edge]:
        """Iterate over edges whose target is ``form_id``."""
        for edge in self.edges:
            if edge.target == form_id:
                yield edge

    def form_count(self) -> int:
        """Return number of forms."""
        return len(self.forms)


EMPTY_GRAPH = ActionBlueprintGraph()
