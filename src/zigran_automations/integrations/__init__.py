"""
Integrations

Third-party provider lifecycle (connect, disconnect, sync, status).
"""

from zigran_automations.integrations.repository import IntegrationRepository

__all__ = ["IntegrationRepository"]
