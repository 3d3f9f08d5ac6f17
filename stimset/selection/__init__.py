"""
Selection module for the stimulus selection project.

This module provides:
- Strength selection of cue-target rows
- Cue/response overlap resolution
- Singular/plural collapsing
- Final semantic set trimming
- Episodic cue selection and pairing
- Condition assignment and balance checks
"""

from .balance import BalanceReport, assign_conditions, check_balance
from .episodic import pair_episodic_cues, select_episodic_cues
from .finalize import finalize_semantic_set, usable_target_count
from .invariants import InvariantViolationError
from .overlap import resolve_cue_response_overlap
from .pipeline import SelectionResults, StimulusSelector, build_stimulus_table, run_selection_pipeline
from .plurals import collapse_cross_column_plurals, collapse_plurals, find_multiforms, split_by_suffix
from .strength import select_strongest_associations

__all__ = [
    "BalanceReport",
    "assign_conditions",
    "check_balance",
    "pair_episodic_cues",
    "select_episodic_cues",
    "finalize_semantic_set",
    "usable_target_count",
    "InvariantViolationError",
    "resolve_cue_response_overlap",
    "SelectionResults",
    "StimulusSelector",
    "build_stimulus_table",
    "run_selection_pipeline",
    "collapse_cross_column_plurals",
    "collapse_plurals",
    "find_multiforms",
    "split_by_suffix",
    "select_strongest_associations",
]
