"""Zigran automations — rule compiler and resilient backend client."""

__version__ = "0.1.0"
