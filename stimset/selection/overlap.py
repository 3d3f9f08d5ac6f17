"""
Resolution of words used both as a cue and as a response.

For each conflicting word the role whose response group is weaker on average
is removed, together with its whole row group.
"""

from __future__ import annotations

import logging
from typing import List

import pandas as pd

from .grouping import group_mean, unique_in_order, weaker
from .invariants import check_no_overlap

logger = logging.getLogger(__name__)


def find_overlapping_words(df: pd.DataFrame) -> List[str]:
    """Words present in both columns, in cue-column encounter order."""
    responses = set(df["response"])
    return [cue for cue in unique_in_order(df["cue"]) if cue in responses]


def resolve_cue_response_overlap(df: pd.DataFrame) -> pd.DataFrame:
    """
    Remove every cue/response intersection.

    For an overlapping word ``w``, let ``t`` be the response of the first row
    cued by ``w``. X is the response group of ``t`` and Y the response group
    of ``w``. The group with the lower mean forward association is removed;
    on a tie Y is removed. ``w`` and every word of the removed rows leave the
    worklist, which is rebuilt from the table until no overlap remains.

    Parameters
    ----------
    df : pd.DataFrame
        Association table with unique cues

    Returns
    -------
    pd.DataFrame
        Table in which no word is both cue and response
    """
    initial_n = len(df)
    n_resolved = 0

    pending = find_overlapping_words(df)
    while pending:
        while pending:
            word = pending.pop(0)
            cue_rows = df[df["cue"] == word]
            word_group = df[df["response"] == word]
            if cue_rows.empty or word_group.empty:
                continue

            target = cue_rows["response"].iloc[0]
            target_group = df[df["response"] == target]

            if weaker(group_mean(target_group), group_mean(word_group)):
                removed = target_group
                logger.debug(f"'{word}' kept as response; dropped response group '{target}'")
            else:
                removed = word_group
                logger.debug(f"'{word}' kept as cue; dropped its response group")

            df = df.drop(index=removed.index)
            n_resolved += 1

            settled = set(removed["cue"]) | set(removed["response"])
            pending = [w for w in pending if w not in settled]

        pending = find_overlapping_words(df)

    check_no_overlap(df)
    logger.info(
        f"Overlap resolution settled {n_resolved} conflicts: "
        f"{initial_n:,} -> {len(df):,} rows"
    )
    return df
