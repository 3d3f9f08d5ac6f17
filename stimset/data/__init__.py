"""
Data module for the stimulus selection project.

This module provides:
- Association norm loading and normalization
- Frequency table loading and restriction
- Export functionality
"""

from .preprocessing import (
    MalformedRecordError,
    normalize_association_norms,
    read_association_norms,
    read_frequency_table,
    preprocess_frequency_table,
    export_for_analysis,
)

__all__ = [
    "MalformedRecordError",
    "normalize_association_norms",
    "read_association_norms",
    "read_frequency_table",
    "preprocess_frequency_table",
    "export_for_analysis",
]
