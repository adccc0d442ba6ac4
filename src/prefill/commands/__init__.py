"""
prefill.commands - CLI command implementations
"""

__all__ = [
    "forms",
    "map_cmd",
    "serve",
]
