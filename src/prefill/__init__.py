"""
prefill - Form dependency graph prefill mapping

Given a directed acyclic graph of forms, prefill resolves which upstream
form fields (and which global properties) may supply a value for each
field of a selected form, and keeps the chosen field -> source mapping.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("prefill")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from prefill.errors import (
    ConfigError,
    FetchError,
    InvalidCommitError,
    PrefillError,
    SessionStateError,
    UnknownFormError,
)
from prefill.graph.models import ActionBlueprintGraph, Edge, Field, FormNode
from prefill.graph.normalize import normalize_graph
from prefill.graph.resolver import SourceGroup, group_sources
from prefill.mapping.session import SelectionSession
from prefill.mapping.sources import FormFieldSource, GlobalSource
from prefill.mapping.store import PrefillStore

__all__ = [
    "__version__",
    "ActionBlueprintGraph",
    "ConfigError",
    "Edge",
    "FetchError",
    "Field",
    "FormFieldSource",
    "FormNode",
    "GlobalSource",
    "InvalidCommitError",
    "PrefillError",
    "PrefillStore",
    "SelectionSession",
    "SessionStateError",
    "SourceGroup",
    "UnknownFormError",
    "group_sources",
    "normalize_graph",
]
