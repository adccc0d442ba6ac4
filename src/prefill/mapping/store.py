"""Prefill Mapping Store - Per form, per field chosen sources.

The store is the single source of truth for which source prefills which
field. It is a plain associative structure owned by the caller: every
operation completes before returning and no partial state is observable.
Sources are not validated against the graph; callers build them from the
resolver's candidate groups.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

import structlog

from prefill.mapping.sources import PrefillMapping, PrefillSource, PrefillState

if TYPE_CHECKING:
    from prefill.graph.models import ActionBlueprintGraph, FormNode

logger = structlog.get_logger(__name__)


class PrefillStore:
    """In-memory PrefillState keyed by (form id, field id).

    Example:
        >>> store = PrefillStore()
        >>> store.set("B", "email", FormFieldSource("A", "email", "Form A.email"))
        >>> store.get("B")
        {'email': FormFieldSource(form_id='A', field_id='email', label='Form A.email')}
    """

    def __init__(self, initial: Mapping[str, Mapping[str, PrefillSource]] | None = None) -> None:
        """Initialize from a caller-supplied state (copied, may be None)."""
        self._state: PrefillState = {}
        for form_id, mapping in (initial or {}).items():
            if mapping:
                self._state[form_id] = dict(mapping)

    def get(self, form_id: str) -> PrefillMapping:
        """Return the mapping for a form (a copy; empty if none set)."""
        return dict(self._state.get(form_id, {}))

    def get_source(self, form_id: str, field_id: str) -> PrefillSource | None:
        """Return the source mapped to one field, or None."""
        return self._state.get(form_id, {}).get(field_id)

    def set(self, form_id: str, field_id: str, source: PrefillSource) -> None:
        """Map a field to a source, replacing any existing mapping."""
        self._state.setdefault(form_id, {})[field_id] = source
        logger.debug("prefill_set", form_id=form_id, field_id=field_id, source=source.label)

    def clear(self, form_id: str, field_id: str) -> None:
        """Remove a field's mapping. No-op when nothing is mapped."""
        mapping = self._state.get(form_id)
        if not mapping or field_id not in mapping:
            return
        del mapping[field_id]
        if not mapping:
            del self._state[form_id]
        logger.debug("prefill_cleared", form_id=form_id, field_id=field_id)

    def snapshot(self) -> PrefillState:
        """Return a copy of the whole state."""
        return {form_id: dict(mapping) for form_id, mapping in self._state.items()}

    def visible(self, form: FormNode) -> PrefillMapping:
        """Return mappings for fields that currently exist on ``form``.

        Entries for fields the form no longer has stay in the store but
        are not returned.
        """
        mapping = self._state.get(form.id, {})
        return {field_id: mapping[field_id] for field_id in form.field_ids() if field_id in mapping}

    def prune(self, graph: ActionBlueprintGraph) -> list[tuple[str, str]]:
        """Drop entries whose form or field is not in ``graph``.

        Args:
            graph: The graph to check entries against.

        Returns:
            The removed (form id, field id) pairs.
        """
        removed: list[tuple[str, str]] = []
        for form_id in list(self._state):
            form = graph.find_form(form_id)
            for field_id in list(self._state[form_id]):
                if form is None or not form.has_field(field_id):
                    removed.append((form_id, field_id))
                    del self._state[form_id][field_id]
            if not self._state[form_id]:
                del self._state[form_id]
        if removed:
            logger.info("stale_prefills_pruned", count=len(removed))
        return removed

    def iter_entries(self) -> Iterator[tuple[str, str, PrefillSource]]:
        """Iterate over (form id, field id, source) triples."""
        for form_id, mapping in self._state.items():
            for field_id, source in mapping.items():
                yield form_id, field_id, source

    def __len__(self) -> int:
        """Return the number of mapped fields across all forms."""
        return sum(len(mapping) for mapping in self._state.values())

    def __contains__(self, key: object) -> bool:
        """Check ``(form_id, field_id) in store``."""
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        form_id, field_id = key
        return field_id in self._state.get(form_id, {})
