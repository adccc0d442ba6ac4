"""prefill.utilities - Shared helpers."""
