"""
Configuration module for the stimulus selection project.
"""

from .settings import get_config, config, reload_config

__all__ = ["get_config", "config", "reload_config"]
