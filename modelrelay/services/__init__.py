"""
Service Layer

Stateful helpers used by the CLI wiring.
"""

from modelrelay.services.config_service import ConfigService

__all__ = ["ConfigService"]
