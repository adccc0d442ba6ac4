"""
prefill.client - Fetch the action blueprint graph from the upstream server.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any

import structlog

from prefill.errors import FetchError

GRAPH_PATH = "/action-blueprint-graph"

logger = structlog.get_logger(__name__)


def graph_url(base_url: str) -> str:
    """Join the base URL and the graph route."""
    return base_url.rstrip("/") + GRAPH_PATH


def fetch_graph(base_url: str, timeout: float | None = None) -> Any:
    """GET the raw graph payload.

    Args:
        base_url: Upstream base URL, e.g. "http://localhost:4000".
        timeout: Socket timeout in seconds; None waits indefinitely.

    Returns:
        The decoded JSON payload (either wire shape).

    Raises:
        FetchError: On non-2xx status, transport failure or invalid JSON.
    """
    url = graph_url(base_url)
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    logger.debug("graph_fetch_started", url=url)
    try:
        if timeout is None:
            resp = urllib.request.urlopen(req)
        else:
            resp = urllib.request.urlopen(req, timeout=timeout)
        with resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise FetchError(f"Failed to load graph: {e.code}", status=e.code) from e
    except (urllib.error.URLError, OSError) as e:
        reason = getattr(e, "reason", e)
        raise FetchError(f"Failed to load graph: {reason}") from e

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FetchError(f"Failed to load graph: invalid JSON ({e})") from e
