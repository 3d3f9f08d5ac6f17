"""
Strength-based selection of candidate cue-target rows.

Joins the association norms to the frequency table and narrows the table to
strong, well-populated response groups in which every cue is used once.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import pandas as pd

from .grouping import STRENGTH, filter_small_groups, first_extreme_per_group, top_n_per_group
from .invariants import check_unique_cues

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_CUES = ("slave", "president")


def join_response_frequency(norms: pd.DataFrame, frequency: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join norms to frequency data on response == word.

    Rows whose response has no frequency record are dropped. The order of
    the norms is kept and the frequency columns describe the response.
    """
    joined = norms.merge(frequency, how="inner", left_on="response", right_on="word")
    return joined.drop(columns=["word"]).reset_index(drop=True)


def select_strongest_associations(
    norms: pd.DataFrame,
    frequency: pd.DataFrame,
    excluded_cues: Optional[Iterable[str]] = DEFAULT_EXCLUDED_CUES,
    min_forward_association: float = 0.1,
    min_group_size: int = 3,
    top_n: int = 5,
) -> pd.DataFrame:
    """
    Select the strongest cue for each usable target.

    Steps, in order:
    1. Join on response frequency data.
    2. Drop excluded cues and rows at or below the strength threshold.
    3. Drop response groups smaller than ``min_group_size``.
    4. Keep the first strongest row per cue.
    5. Re-check response group sizes.
    6. Keep the top ``top_n`` rows per response (ties at the boundary kept).

    Parameters
    ----------
    norms : pd.DataFrame
        Normalized association table
    frequency : pd.DataFrame
        Restricted frequency table
    excluded_cues : Optional[Iterable[str]]
        Cue words never used
    min_forward_association : float
        Strict lower bound on forward association
    min_group_size : int
        Minimum number of rows per response
    top_n : int
        Rows kept per response

    Returns
    -------
    pd.DataFrame
        Candidate table with globally unique cues
    """
    excluded = set(excluded_cues or ())

    df = join_response_frequency(norms, frequency)
    logger.info(f"After frequency join: {len(df):,} rows")

    df = df[~df["cue"].isin(excluded) & (df[STRENGTH] > min_forward_association)]
    logger.info(f"After cue exclusion and strength > {min_forward_association}: {len(df):,} rows")

    df = filter_small_groups(df, "response", min_group_size)
    df = first_extreme_per_group(df, "cue", largest=True)
    logger.info(f"After strongest row per cue: {len(df):,} rows")

    df = filter_small_groups(df, "response", min_group_size)
    df = top_n_per_group(df, "response", top_n)

    check_unique_cues(df)
    logger.info(
        f"Strength selection kept {len(df):,} rows for "
        f"{df['response'].nunique():,} responses"
    )
    return df
