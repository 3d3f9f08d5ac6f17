"""
Collapsing of singular/plural duplicates.

A word and the same word with a trailing suffix ("s" by default) are treated
as two forms of one item. Only the form with the stronger associations is
kept; all rows of the other form are dropped.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

import pandas as pd

from .grouping import group_mean, strongest_rows, top_k_mean, unique_in_order, weaker
from .invariants import check_no_cross_multiforms, check_no_multiforms

logger = logging.getLogger(__name__)


def split_by_suffix(words: Iterable[str], suffix: str = "s") -> Tuple[List[str], List[str]]:
    """
    Partition words into those ending with ``suffix`` and those that don't.

    Returns
    -------
    Tuple[List[str], List[str]]
        (suffixed, unsuffixed), each in encounter order without duplicates
    """
    suffixed, unsuffixed = [], []
    for word in unique_in_order(words):
        (suffixed if word.endswith(suffix) else unsuffixed).append(word)
    return suffixed, unsuffixed


def find_multiforms(words: Iterable[str], suffix: str = "s") -> List[str]:
    """Unsuffixed words whose suffixed form is also present."""
    suffixed, unsuffixed = split_by_suffix(words, suffix)
    suffixed = set(suffixed)
    return [word for word in unsuffixed if word + suffix in suffixed]


def collapse_plurals(
    df: pd.DataFrame,
    column: str,
    suffix: str = "s",
    comparison_size: int = 3,
) -> pd.DataFrame:
    """
    Keep one form of every singular/plural pair within ``column``.

    The mean forward association of the strongest ``comparison_size`` rows of
    each form is compared. The plural form is dropped only if its mean is
    strictly lower; otherwise the singular form is dropped. A form with no
    rows always loses.

    Parameters
    ----------
    df : pd.DataFrame
        Association table
    column : str
        "cue" or "response"
    suffix : str
        Plural suffix
    comparison_size : int
        Rows per form entering the comparison

    Returns
    -------
    pd.DataFrame
        Table without multiforms in ``column``
    """
    initial_n = len(df)
    n_resolved = 0

    pending = find_multiforms(df[column], suffix)
    while pending:
        while pending:
            singular = pending.pop(0)
            plural = singular + suffix
            singular_rows = df[df[column] == singular]
            plural_rows = df[df[column] == plural]

            singular_mean = top_k_mean(singular_rows, comparison_size)
            plural_mean = top_k_mean(plural_rows, comparison_size)

            dropped = plural_rows if weaker(plural_mean, singular_mean) else singular_rows
            df = df.drop(index=dropped.index)
            n_resolved += 1

            settled = set(dropped["cue"]) | set(dropped["response"])
            pending = [w for w in pending if w not in settled]

        pending = find_multiforms(df[column], suffix)

    check_no_multiforms(df, column, suffix)
    logger.info(
        f"Collapsed {n_resolved} plural pairs in '{column}': "
        f"{initial_n:,} -> {len(df):,} rows"
    )
    return df


def find_cross_multiforms(df: pd.DataFrame, suffix: str = "s") -> List[Tuple[str, str]]:
    """
    Singular/plural pairs split across the two columns.

    Returns
    -------
    List[Tuple[str, str]]
        (singular, role of the singular) pairs; the plural holds the other role
    """
    cue_suffixed, cue_unsuffixed = split_by_suffix(df["cue"], suffix)
    resp_suffixed, resp_unsuffixed = split_by_suffix(df["response"], suffix)
    cue_suffixed, resp_suffixed = set(cue_suffixed), set(resp_suffixed)

    pairs = [(w, "cue") for w in cue_unsuffixed if w + suffix in resp_suffixed]
    pairs += [(w, "response") for w in resp_unsuffixed if w + suffix in cue_suffixed]
    return pairs


def _role_rows(df: pd.DataFrame, word: str, role: str, comparison_size: int) -> pd.DataFrame:
    rows = df[df[role] == word]
    if role == "response":
        rows = strongest_rows(rows, comparison_size)
    return rows


def collapse_cross_column_plurals(
    df: pd.DataFrame,
    suffix: str = "s",
    comparison_size: int = 3,
) -> pd.DataFrame:
    """
    Keep one form of every singular/plural pair split across cue and response.

    Each form is compared through its rows in its own role. A singular
    response represented by a single row is compared through every row
    sharing that response instead. The losing form's role rows are
    dropped, the plural only when strictly weaker.
    """
    initial_n = len(df)
    n_resolved = 0

    pending = find_cross_multiforms(df, suffix)
    while pending:
        while pending:
            singular, singular_role = pending.pop(0)
            plural = singular + suffix
            plural_role = "response" if singular_role == "cue" else "cue"

            singular_rows = df[df[singular_role] == singular]
            plural_rows = df[df[plural_role] == plural]

            singular_group = _role_rows(df, singular, singular_role, comparison_size)
            if singular_role == "response" and len(singular_group) == 1:
                singular_group = df[df["response"] == singular]
            plural_group = _role_rows(df, plural, plural_role, comparison_size)

            if weaker(group_mean(plural_group), group_mean(singular_group)):
                dropped = plural_rows
            else:
                dropped = singular_rows
            df = df.drop(index=dropped.index)
            n_resolved += 1

            settled = set(dropped["cue"]) | set(dropped["response"])
            pending = [(w, role) for w, role in pending if w not in settled and w + suffix not in settled]

        pending = find_cross_multiforms(df, suffix)

    check_no_cross_multiforms(df, suffix)
    logger.info(
        f"Collapsed {n_resolved} cross-column plural pairs: "
        f"{initial_n:,} -> {len(df):,} rows"
    )
    return df
