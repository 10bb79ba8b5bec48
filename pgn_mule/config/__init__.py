"""Configuration module for pgn-mule."""

from pgn_mule.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
