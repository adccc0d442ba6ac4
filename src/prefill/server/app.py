"""prefill.server.app - Flask app factory for the mock data server.

Routes:
    GET /action-blueprint-graph  -> 200, the preloaded graph document
    OPTIONS <any path>           -> 204, CORS preflight
    anything else                -> 404 {"error": "Not Found"}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from prefill.client import GRAPH_PATH
from prefill.config.defaults import DEFAULT_DATA_PATH
from prefill.errors import ConfigError

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = "GET,OPTIONS"


def load_graph_data(path: Path | str | None = None) -> Any:
    """Read the graph document served by the mock server.

    Args:
        path: JSON file to read; the packaged sample when None.

    Raises:
        ConfigError: If the file is missing or not valid JSON.
    """
    data_path = Path(path) if path else DEFAULT_DATA_PATH
    try:
        return json.loads(data_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read graph data {data_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in graph data {data_path}: {e}") from e


def create_app(graph_data: Any) -> Flask:
    """Create the mock server application.

    Args:
        graph_data: Decoded graph document, served as-is.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    # Field order in the payload is significant; keep the document's key order
    app.json.sort_keys = False

    CORS(app, origins="*", methods=["GET", "OPTIONS"])

    _state: dict[str, Any] = {"graph": graph_data}

    def _not_found() -> tuple[Response, int]:
        return jsonify({"error": "Not Found"}), 404

    @app.before_request
    def _preflight_and_method_guard():
        if request.method == "OPTIONS":
            response = Response(status=204)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            return response
        if request.method != "GET":
            return _not_found()
        return None

    @app.route(GRAPH_PATH, methods=["GET"])
    def action_blueprint_graph():
        """GET /action-blueprint-graph - The preloaded graph document."""
        return jsonify(_state["graph"])

    @app.errorhandler(404)
    @app.errorhandler(405)
    def _handle_not_found(_error):
        return _not_found()

    return app


def run_server(config: dict[str, Any]) -> None:
    """Load the graph document and serve it until interrupted.

    Args:
        config: Effective configuration; reads the ``server`` table.
    """
    server_config = config.get("server", {})
    host = server_config.get("host", "127.0.0.1")
    port = int(server_config.get("port", 4000))
    data_path = server_config.get("data_path")

    app = create_app(load_graph_data(data_path))
    logger.info("mock_server_starting", host=host, port=port, data_path=str(data_path))
    print(f"Mock backend running at http://{host}:{port}")
    app.run(host=host, port=port, debug=False, use_reloader=False)
