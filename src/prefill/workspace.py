"""
prefill.workspace - Owned state for one prefill editing process.

A Workspace ties together the pieces a presentation layer needs:

- the graph load lifecycle (idle -> loading -> success | error)
- the currently selected form
- the PrefillStore (outlives graph reloads)
- the SelectionSession used to pick a source for one field

Until a graph has loaded every query runs against the empty graph, so
selection and grouping stay well-defined while loading or after a failed
fetch.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from prefill.client import fetch_graph
from prefill.errors import ConfigError, FetchError, SessionStateError, UnknownFormError
from prefill.graph.models import EMPTY_GRAPH, ActionBlueprintGraph, Field, FormNode
from prefill.graph.normalize import normalize_graph
from prefill.graph.resolver import GroupKind, SourceGroup, find_group, group_sources
from prefill.mapping.session import SelectionSession
from prefill.mapping.sources import FormFieldSource, PrefillSource, PrefillState
from prefill.mapping.store import PrefillStore

logger = structlog.get_logger(__name__)

# Form D's email prefilled from Form A's email in the bundled sample graph
DEFAULT_PREFILL_STATE: PrefillState = {
    "form-0f58384c-4966-4ce6-9ec2-40b96d61f745": {
        "email": FormFieldSource(
            form_id="form-47c61d17-62b0-4c42-8ca2-0eff641c9d88",
            field_id="email",
            label="Form A.email",
        )
    }
}


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FieldRow:
    """A field of the selected form with its visible mapping."""

    field: Field
    source: PrefillSource | None

    @property
    def is_mapped(self) -> bool:
        return self.source is not None


Fetcher = Callable[[], Any]


def _coerce_timeout(value: Any) -> float | None:
    """Validate ``api.timeout``: None, or a positive number of seconds."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"api.timeout must be a number of seconds, got {value!r}")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"api.timeout must be a number of seconds, got {value!r}") from e
    if timeout <= 0:
        raise ConfigError(f"api.timeout must be positive, got {value!r}")
    return timeout


class Workspace:
    """Graph, selection, mapping store and selection session for one process.

    Args:
        fetcher: Zero-argument callable returning the raw graph payload and
            raising FetchError on failure.
        initial_state: Starting PrefillState (copied).
        prune_on_reload: Drop stale mappings each time a graph loads.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        initial_state: Mapping[str, Mapping[str, PrefillSource]] | None = None,
        prune_on_reload: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._prune_on_reload = prune_on_reload
        self.status = LoadState.IDLE
        self.error: str | None = None
        self.graph: ActionBlueprintGraph = EMPTY_GRAPH
        self.selected_form_id: str | None = None
        self.store = PrefillStore(initial_state)
        self.session = SelectionSession(self.store)

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        initial_state: Mapping[str, Mapping[str, PrefillSource]] | None = None,
    ) -> Workspace:
        """Build a Workspace fetching from ``config["api"]``."""
        api = config.get("api", {})
        base_url = api.get("base_url", "http://localhost:4000")
        timeout = _coerce_timeout(api.get("timeout"))

        def fetcher() -> Any:
            return fetch_graph(base_url, timeout=timeout)

        return cls(
            fetcher,
            initial_state=initial_state,
            prune_on_reload=bool(config.get("workspace", {}).get("prune_on_reload", False)),
        )

    # Load lifecycle

    def load(self) -> LoadState:
        """Fetch and normalize the graph, replacing any previous one.

        On success the first form is selected if nothing is selected yet.
        On FetchError the workspace enters ERROR with the message kept in
        ``error``; no retry is attempted and stored mappings are untouched.
        """
        self.status = LoadState.LOADING
        self.error = None
        try:
            payload = self._fetcher()
        except FetchError as e:
            self.error = str(e)
            self.status = LoadState.ERROR
            logger.error("graph_load_failed", error=self.error, status=e.status)
            return self.status

        self.graph = normalize_graph(payload)
        if self.selected_form_id is None or not self.graph.has_form(self.selected_form_id):
            self.selected_form_id = self.graph.forms[0].id if self.graph.forms else None
        if self._prune_on_reload:
            self.store.prune(self.graph)
        self.status = LoadState.SUCCESS
        logger.info(
            "graph_loaded",
            forms=self.graph.form_count(),
            edges=len(self.graph.edges),
            selected=self.selected_form_id,
        )
        return self.status

    # Selection

    @property
    def selected_form(self) -> FormNode | None:
        if self.selected_form_id is None:
            return None
        return self.graph.find_form(self.selected_form_id)

    def select_form(self, form_id: str) -> FormNode:
        """Select a form; any open session is cancelled.

        Raises:
            UnknownFormError: If ``form_id`` is not in the loaded graph.
        """
        form = self.graph.find_form(form_id)
        if form is None:
            raise UnknownFormError(form_id)
        if form_id != self.selected_form_id:
            self.session.cancel()
        self.selected_form_id = form_id
        return form

    def source_groups(self) -> list[SourceGroup]:
        """Direct, transitive and global groups for the selected form."""
        return group_sources(self.graph, self.selected_form_id)

    def field_rows(self) -> list[FieldRow]:
        """Fields of the selected form with their visible mappings."""
        form = self.selected_form
        if form is None:
            return []
        visible = self.store.visible(form)
        return [FieldRow(field=f, source=visible.get(f.id)) for f in form.fields]

    # Mapping edits

    def open_mapping(self, field_id: str) -> None:
        """Open the selection session for a field of the selected form.

        Raises:
            SessionStateError: If no form is selected or the field is not on it.
        """
        form = self.selected_form
        if form is None:
            raise SessionStateError("No form is selected")
        if not form.has_field(field_id):
            raise SessionStateError(f"Field '{field_id}' not found on form '{form.id}'")
        self.session.open(field_id)

    def highlight(self, kind: GroupKind, form_id: str, field_id: str) -> PrefillSource:
        """Highlight a candidate from the current source groups.

        Raises:
            KeyError: If the candidate is not offered in that group.
            SessionStateError: If the session is closed.
        """
        source = find_group(self.source_groups(), kind).source_for(form_id, field_id)
        self.session.highlight(source)
        return source

    def can_commit(self) -> bool:
        return self.session.can_commit(self.selected_form_id)

    def commit(self) -> PrefillSource:
        """Commit the highlighted source for the selected form's active field."""
        return self.session.commit(self.selected_form_id)

    def cancel(self) -> None:
        self.session.cancel()

    def clear_mapping(self, field_id: str) -> None:
        """Clear a field mapping on the selected form (no-op if unmapped)."""
        if self.selected_form_id is not None:
            self.store.clear(self.selected_form_id, field_id)
