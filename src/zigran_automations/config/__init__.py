"""Zigran automations configuration system."""

from zigran_automations.config.manager import ConfigManager
from zigran_automations.config.schema import ZigranConfig

__all__ = ["ConfigManager", "ZigranConfig"]
