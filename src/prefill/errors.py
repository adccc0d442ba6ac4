"""Exception types raised by prefill.

Normalization gaps and empty resolver input are handled by defaulting and
never raise; everything here is local to the operation that caused it.
"""

from __future__ import annotations


class PrefillError(Exception):
    """Base class for all prefill errors."""


class FetchError(PrefillError):
    """The upstream graph could not be fetched or decoded.

    Attributes:
        status: HTTP status code for non-2xx responses, None for transport
            or decoding failures.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SessionStateError(PrefillError):
    """A selection session operation is not valid in the current state."""


class InvalidCommitError(SessionStateError):
    """Commit attempted without an active field, highlighted source or selected form."""


class UnknownFormError(PrefillError):
    """A form id was selected that does not exist in the loaded graph."""

    def __init__(self, form_id: str) -> None:
        super().__init__(f"Form '{form_id}' not found in graph")
        self.form_id = form_id


class ConfigError(PrefillError):
    """Configuration file or override could not be parsed."""
