"""
Final trimming of the semantic cue set.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

import pandas as pd

from .grouping import STRENGTH, filter_small_groups, top_n_per_group, unique_in_order

logger = logging.getLogger(__name__)


def usable_target_count(n_targets: int, n_conditions: int = 3) -> int:
    """Largest multiple of ``n_conditions`` not exceeding ``n_targets``."""
    return n_targets - n_targets % n_conditions


def select_top_cues(
    df: pd.DataFrame,
    excluded_responses: Optional[Iterable[str]] = None,
    n_cues: int = 3,
) -> pd.DataFrame:
    """
    Keep exactly ``n_cues`` cues per target.

    Response groups smaller than ``n_cues`` are dropped, the strongest
    ``n_cues`` rows of each remaining group are kept (boundary ties resolved
    in table order) and manually excluded responses are removed.

    Parameters
    ----------
    df : pd.DataFrame
        Association table after plural collapsing
    excluded_responses : Optional[Iterable[str]]
        Targets rejected on manual review
    n_cues : int
        Cues per target

    Returns
    -------
    pd.DataFrame
        Targets in table order, cues in descending strength
    """
    excluded = set(excluded_responses or ())

    df = filter_small_groups(df, "response", n_cues)
    df = top_n_per_group(df, "response", n_cues)

    target_order = {target: i for i, target in enumerate(unique_in_order(df["response"]))}
    ranked = df.sort_values(STRENGTH, ascending=False, kind="mergesort")
    ranked = ranked.groupby("response", sort=False).head(n_cues)
    ranked = ranked.assign(_target_order=ranked["response"].map(target_order))
    df = ranked.sort_values("_target_order", kind="mergesort").drop(columns="_target_order")

    n_excluded = df.loc[df["response"].isin(excluded), "response"].nunique()
    if n_excluded:
        logger.info(f"Removed {n_excluded} manually excluded targets")
    return df[~df["response"].isin(excluded)]


def truncate_targets(df: pd.DataFrame, n_targets: int) -> pd.DataFrame:
    """Keep the rows of the first ``n_targets`` targets in table order."""
    targets = unique_in_order(df["response"])
    return df[df["response"].isin(targets[:n_targets])]


def finalize_semantic_set(
    df: pd.DataFrame,
    excluded_responses: Optional[Iterable[str]] = None,
    n_cues: int = 3,
    n_conditions: int = 3,
) -> Tuple[pd.DataFrame, int]:
    """
    Reduce the table to the final semantic set.

    Applies ``select_top_cues`` and truncates the targets to a multiple of
    ``n_conditions`` so they split evenly into the experimental conditions.

    Returns
    -------
    Tuple[pd.DataFrame, int]
        (final semantic set, number of targets available before truncation)
    """
    df = select_top_cues(df, excluded_responses, n_cues)
    n_targets = df["response"].nunique()
    n_usable = usable_target_count(n_targets, n_conditions)
    df = truncate_targets(df, n_usable)

    logger.info(
        f"Final semantic set: {n_usable} of {n_targets} targets, "
        f"{len(df):,} cue rows"
    )
    return df, n_targets
