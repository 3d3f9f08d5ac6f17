"""
Group-wise table operations shared by the selection stages.

Every helper returns rows of the input table selected by index label, so the
original row order and handles are preserved.
"""

from __future__ import annotations

import math
from typing import Iterable, List

import pandas as pd

STRENGTH = "forward_association"


def filter_small_groups(df: pd.DataFrame, column: str, min_size: int) -> pd.DataFrame:
    """Drop every group of ``column`` with fewer than ``min_size`` rows."""
    if df.empty:
        return df
    sizes = df.groupby(column, sort=False)[column].transform("size")
    return df[sizes >= min_size]


def first_extreme_per_group(df: pd.DataFrame, column: str, largest: bool = True) -> pd.DataFrame:
    """
    Keep exactly one row per group: the first row holding the group's
    maximal (or minimal) strength.

    Parameters
    ----------
    df : pd.DataFrame
        Association table
    column : str
        Grouping column
    largest : bool
        Keep the maximum if True, the minimum otherwise

    Returns
    -------
    pd.DataFrame
        One row per distinct ``column`` value, in table order
    """
    if df.empty:
        return df
    grouped = df.groupby(column, sort=False)[STRENGTH]
    handles = grouped.idxmax() if largest else grouped.idxmin()
    return df[df.index.isin(handles.values)]


def top_n_per_group(df: pd.DataFrame, column: str, n: int) -> pd.DataFrame:
    """
    Keep the rows ranked in the top ``n`` by strength within each group.

    Ranks use the minimum rank for ties, so every row tied with the n-th
    value is kept and a group may return more than ``n`` rows.
    """
    if df.empty:
        return df
    ranks = df.groupby(column, sort=False)[STRENGTH].rank(method="min", ascending=False)
    return df[ranks <= n]


def strongest_rows(rows: pd.DataFrame, k: int) -> pd.DataFrame:
    """Return the ``k`` strongest rows, ties kept in table order."""
    return rows.sort_values(STRENGTH, ascending=False, kind="mergesort").head(k)


def top_k_mean(rows: pd.DataFrame, k: int) -> float:
    """
    Mean strength of the ``k`` strongest rows.

    An empty group has no defined mean and yields NaN.
    """
    if rows.empty:
        return math.nan
    return float(strongest_rows(rows, k)[STRENGTH].mean())


def group_mean(rows: pd.DataFrame) -> float:
    """Mean strength of a row group, NaN when empty."""
    if rows.empty:
        return math.nan
    return float(rows[STRENGTH].mean())


def weaker(candidate: float, other: float) -> bool:
    """
    True if ``candidate`` strictly loses to ``other``.

    A NaN mean always loses against a defined one.
    """
    if math.isnan(candidate):
        return not math.isnan(other)
    if math.isnan(other):
        return False
    return candidate < other


def unique_in_order(values: Iterable[str]) -> List[str]:
    """Distinct values in first-encounter order."""
    return list(dict.fromkeys(values))
