"""Core: config, constants, and service bootstrap.

Single place for settings and shared constants.
"""

from codegen.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
