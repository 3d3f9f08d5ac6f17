"""
Utility helper functions for the stimulus selection project.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Parameters
    ----------
    path : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        The directory path
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a JSON file, e.g. a previous run summary."""
    with open(path, "r") as f:
        return json.load(f)


def save_json(
    data: Dict[str, Any],
    path: Union[str, Path],
    indent: int = 2
) -> None:
    """
    Save data to JSON file.

    Parameters
    ----------
    data : Dict[str, Any]
        Data to save
    path : Union[str, Path]
        Output path
    indent : int
        JSON indentation
    """
    path = Path(path)
    ensure_directory(path.parent)

    with open(path, "w") as f:
        json.dump(data, f, indent=indent, default=str)

    logger.info(f"Saved JSON to {path}")


def get_timestamp() -> str:
    """Timestamp in YYYYMMDD_HHMMSS format."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
