"""Configuration manager for reading/writing the client config file."""

from __future__ import annotations

import logging
import os
import platform
import stat
import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError

from zigran_automations.config.defaults import DEFAULT_CONFIG
from zigran_automations.config.schema import ZigranConfig

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path("~/.config/zigran").expanduser()
_CONFIG_FILE = "config.toml"


class ConfigManager:
    """Manages reading, writing, and locating the config file.

    The config lives at ``~/.config/zigran/config.toml``.  If the file does
    not exist, :meth:`load` returns a :class:`ZigranConfig` populated
    entirely from defaults.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir = config_dir or _CONFIG_DIR

    def load(self) -> ZigranConfig:
        """Load configuration from disk, falling back to defaults."""
        path = self.get_config_path()
        if not path.is_file():
            logger.debug("Config file not found at %s, using defaults", path)
            return ZigranConfig()

        try:
            with open(path, "rb") as fh:
                raw = tomllib.load(fh)
        except (tomllib.TOMLDecodeError, OSError) as exc:
            logger.warning("Failed to read config at %s: %s; using defaults", path, exc)
            return ZigranConfig()

        merged = _deep_merge(DEFAULT_CONFIG, raw)
        try:
            return ZigranConfig(**merged)
        except ValidationError as exc:
            logger.warning(
                "Invalid value in config at %s (%d errors); using defaults",
                path,
                exc.error_count(),
            )
            return ZigranConfig()

    def save(self, config: ZigranConfig) -> None:
        """Persist configuration to disk as TOML.

        On Linux and macOS the file is ``chmod 600`` to protect the API token.
        """
        path = self.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as fh:
            tomli_w.dump(config.model_dump(), fh)

        if platform.system() in ("Linux", "Darwin"):
            os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0o600

        logger.debug("Config saved to %s", path)

    def exists(self) -> bool:
        """Return ``True`` if the config file exists on disk."""
        return self.get_config_path().is_file()

    def get_config_path(self) -> Path:
        """Return the full path to the config TOML file."""
        return self._config_dir / _CONFIG_FILE


def _deep_merge(base: dict[str, object], override: dict[str, object]) -> dict[str, object]:
    """Recursively merge *override* into a copy of *base*.

    Nested dicts are merged rather than replaced so that partial TOML
    sections work.
    """
    merged: dict[str, object] = {}
    for key in {*base, *override}:
        base_val = base.get(key)
        over_val = override.get(key)
        if isinstance(base_val, dict) and isinstance(over_val, dict):
            merged[key] = _deep_merge(base_val, over_val)  # type: ignore[arg-type]
        elif key in override:
            merged[key] = over_val
        else:
            merged[key] = base_val
    return merged
