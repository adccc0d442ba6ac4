"""prefill.server - Mock data server for the action blueprint graph.

Serves a static graph document, read once at startup, at
``GET /action-blueprint-graph``.
"""

from prefill.server.app import create_app, load_graph_data, run_server

__all__ = ["create_app", "load_graph_data", "run_server"]
