"""Selection Session - State of one "pick a source for this field" interaction.

States::

    CLOSED --open(field)--> OPEN(field, highlight=None)
    OPEN   --highlight(s)--> OPEN(field, highlight=s)
    OPEN   --commit()-----> CLOSED   (writes the highlight into the store)
    OPEN   --cancel()-----> CLOSED   (store untouched)

The highlighted source is kept as a PrefillSource object so its variant
travels with it from the resolver to the store.
"""

from __future__ import annotations

from enum import Enum

import structlog

from prefill.errors import InvalidCommitError, SessionStateError
from prefill.mapping.sources import PrefillSource
from prefill.mapping.store import PrefillStore

logger = structlog.get_logger(__name__)


class SessionState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class SelectionSession:
    """Ephemeral per-invocation selection state bound to a PrefillStore."""

    def __init__(self, store: PrefillStore) -> None:
        self._store = store
        self._field_id: str | None = None
        self._highlight: PrefillSource | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self._field_id is not None else SessionState.CLOSED

    @property
    def is_open(self) -> bool:
        return self._field_id is not None

    @property
    def field_id(self) -> str | None:
        """The field being mapped, or None when closed."""
        return self._field_id

    @property
    def highlighted(self) -> PrefillSource | None:
        """The candidate source currently highlighted, if any."""
        return self._highlight

    def open(self, field_id: str) -> None:
        """Start mapping ``field_id`` with nothing highlighted.

        Any existing committed mapping for the field is ignored; reopening
        while already open switches to the new field and drops the highlight.
        """
        self._field_id = field_id
        self._highlight = None

    def highlight(self, source: PrefillSource) -> None:
        """Replace the highlighted source. Does not touch the store.

        Raises:
            SessionStateError: If the session is closed.
        """
        if self._field_id is None:
            raise SessionStateError("Cannot highlight a source while the session is closed")
        self._highlight = source

    def can_commit(self, selected_form_id: str | None) -> bool:
        """True when commit would succeed for this selected form."""
        return bool(selected_form_id) and self._field_id is not None and self._highlight is not None

    def commit(self, selected_form_id: str | None) -> PrefillSource:
        """Write the highlight into the store and close.

        Args:
            selected_form_id: The form whose field is being mapped.

        Returns:
            The committed source.

        Raises:
            InvalidCommitError: If there is no active field, no highlighted
                source, or no selected form. The store is left unchanged.
        """
        if self._field_id is None:
            raise InvalidCommitError("No field is being mapped")
        if self._highlight is None:
            raise InvalidCommitError("No source is highlighted")
        if not selected_form_id:
            raise InvalidCommitError("No form is selected")

        source = self._highlight
        self._store.set(selected_form_id, self._field_id, source)
        logger.info(
            "prefill_committed",
            form_id=selected_form_id,
            field_id=self._field_id,
            source_kind=source.kind.value,
            source=source.label,
        )
        self._close()
        return source

    def cancel(self) -> None:
        """Close without writing. No-op when already closed."""
        self._close()

    def _close(self) -> None:
        self._field_id = None
        self._highlight = None
