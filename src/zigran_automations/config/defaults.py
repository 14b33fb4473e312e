"""Default configuration values for the Zigran automations client."""

from __future__ import annotations

DEFAULT_CONFIG: dict[str, dict[str, object]] = {
    "api": {
        "base_url": "https://api.zigran.com/api",
        "token": "",
        "timeout": 10.0,
    },
    "logging": {
        "level": "info",
        "file": "~/.local/share/zigran/automations.log",
        "log_to_file": False,
    },
}
