"""
Visualization module for the stimulus selection project.

This module provides:
- Forward association and frequency histograms
- Rendered preview tables of the selected sets
"""

from .figures import (
    FigureGenerator,
    create_distribution_histograms,
    create_preview_table,
)

__all__ = [
    "FigureGenerator",
    "create_distribution_histograms",
    "create_preview_table",
]
