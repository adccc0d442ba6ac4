"""
prefill.commands.serve - Run the mock data server.
"""

from __future__ import annotations

import argparse


def run(args: argparse.Namespace) -> int:
    """Run the serve command."""
    from prefill.config import get_config
    from prefill.server import run_server

    config = get_config(getattr(args, "config", None))
    server = config.setdefault("server", {})
    if getattr(args, "host", None):
        server["host"] = args.host
    if getattr(args, "port", None):
        server["port"] = args.port
    if getattr(args, "data", None):
        server["data_path"] = str(args.data)

    run_server(config)
    return 0
