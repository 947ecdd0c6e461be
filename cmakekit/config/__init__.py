"""Configuration for cmakekit."""

from .settings import Settings, default_settings, load_settings, parse_settings

__all__ = ["Settings", "default_settings", "load_settings", "parse_settings"]
