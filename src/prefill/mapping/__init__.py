"""Mapping module - Prefill sources, the mapping store and selection sessions.

Exports:
- FormFieldSource, GlobalSource: PrefillSource variants
- SourceKind: Tag of a PrefillSource
- PrefillStore: (form, field) -> source store
- SelectionSession, SessionState: Source picking state machine
"""

from prefill.mapping.session import SelectionSession, SessionState
from prefill.mapping.sources import (
    FormFieldSource,
    GlobalSource,
    PrefillMapping,
    PrefillSource,
    PrefillState,
    SourceKind,
    source_from_dict,
    state_from_dict,
)
from prefill.mapping.store import PrefillStore

__all__ = [
    "FormFieldSource",
    "GlobalSource",
    "PrefillMapping",
    "PrefillSource",
    "PrefillState",
    "PrefillStore",
    "SelectionSession",
    "SessionState",
    "SourceKind",
    "source_from_dict",
    "state_from_dict",
]
