"""
Stage-boundary invariant checks.

A violated invariant means an upstream stage is broken, not that the input
data is malformed, so the checks raise instead of repairing the table.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from .grouping import STRENGTH


class InvariantViolationError(RuntimeError):
    """Raised when a selection stage leaves the table in an inconsistent state."""


def check_unique_cues(df: pd.DataFrame) -> None:
    duplicated = df.loc[df["cue"].duplicated(), "cue"].unique()
    if len(duplicated):
        raise InvariantViolationError(f"Cues appear in more than one row: {sorted(duplicated)[:10]}")


def check_no_overlap(df: pd.DataFrame) -> None:
    overlap = set(df["cue"]) & set(df["response"])
    if overlap:
        raise InvariantViolationError(f"Words used as both cue and response: {sorted(overlap)[:10]}")


def check_no_multiforms(df: pd.DataFrame, column: str, suffix: str = "s") -> None:
    words = set(df[column])
    pairs = sorted(w for w in words if not w.endswith(suffix) and w + suffix in words)
    if pairs:
        raise InvariantViolationError(f"Singular and plural forms both present in {column}: {pairs[:10]}")


def check_no_cross_multiforms(df: pd.DataFrame, suffix: str = "s") -> None:
    cues, responses = set(df["cue"]), set(df["response"])
    pairs = sorted(
        {w for w in cues if not w.endswith(suffix) and w + suffix in responses}
        | {w for w in responses if not w.endswith(suffix) and w + suffix in cues}
    )
    if pairs:
        raise InvariantViolationError(f"Singular and plural forms split across cue and response: {pairs[:10]}")


def check_min_strength(df: pd.DataFrame, threshold: float) -> None:
    if (df[STRENGTH] <= threshold).any():
        raise InvariantViolationError(f"Rows with {STRENGTH} <= {threshold} survived filtering")


def check_group_sizes(df: pd.DataFrame, minimum: int, exact: Optional[int] = None) -> None:
    """Check every response group has at least ``minimum`` (or exactly ``exact``) rows."""
    sizes = df.groupby("response").size()
    if (sizes < minimum).any():
        small = sizes[sizes < minimum].index.tolist()
        raise InvariantViolationError(f"Response groups smaller than {minimum}: {small[:10]}")
    if exact is not None and (sizes != exact).any():
        bad = sizes[sizes != exact].index.tolist()
        raise InvariantViolationError(f"Response groups without exactly {exact} rows: {bad[:10]}")
