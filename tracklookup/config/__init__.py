"""Configuration module: exports Settings and load_config."""

from tracklookup.config.loader import load_config
from tracklookup.config.settings import Settings

__all__ = ["Settings", "load_config"]
