"""Core app configuration, security and store lifecycle."""

from querypad.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
