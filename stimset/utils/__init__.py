"""
Utility functions for the stimulus selection project.
"""

from .helpers import (
    ensure_directory,
    load_json,
    save_json,
    get_timestamp,
)

__all__ = [
    "ensure_directory",
    "load_json",
    "save_json",
    "get_timestamp",
]
