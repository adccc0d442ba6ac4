"""
prefill.config.defaults - Default configuration values
"""

from pathlib import Path

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "server" / "data" / "graph.json"

DEFAULT_CONFIG = {
    "api": {
        "base_url": "http://localhost:4000",
        # No timeout unless configured; a hung fetch stays in "loading"
        "timeout": None,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 4000,
        "data_path": str(DEFAULT_DATA_PATH),
    },
    "workspace": {
        "prune_on_reload": False,
    },
    "logging": {
        "level": "WARNING",
        "json": False,
    },
}
