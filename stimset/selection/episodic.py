"""
Selection of episodic (unrelated) cues and their random pairing with targets.

Episodic cues are common nouns that are not part of the semantic set and that
are only weakly associated with anything in the norms, so that a cue-target
link can only be learned episodically.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .grouping import STRENGTH, first_extreme_per_group, unique_in_order

logger = logging.getLogger(__name__)


def select_episodic_cues(
    norms: pd.DataFrame,
    frequency: pd.DataFrame,
    semantic_set: pd.DataFrame,
    n_cues: int,
    noun_pos_tags: Optional[Iterable[str]] = ("nn",),
    suffix: str = "s",
) -> pd.DataFrame:
    """
    Select the ``n_cues`` weakest-associated noun cues outside the semantic set.

    Parameters
    ----------
    norms : pd.DataFrame
        Normalized, unfiltered association table
    frequency : pd.DataFrame
        Restricted frequency table
    semantic_set : pd.DataFrame
        Final semantic set
    n_cues : int
        Number of cues required (one per target)
    noun_pos_tags : Optional[Iterable[str]]
        POS values accepted as common nouns
    suffix : str
        Plural suffix

    Returns
    -------
    pd.DataFrame
        One row per episodic cue (its weakest association), ascending strength

    Raises
    ------
    ValueError
        If fewer than ``n_cues`` candidates remain
    """
    used = set(semantic_set["cue"]) | set(semantic_set["response"])
    df = norms[~norms["cue"].isin(used)]

    cues = set(df["cue"])
    plurals = {c for c in cues if c.endswith(suffix) and c[: -len(suffix)] in cues}
    df = df[~df["cue"].isin(plurals)]

    nouns = frequency[frequency["pos"].isin(set(noun_pos_tags or ()))]
    df = df.merge(nouns, how="inner", left_on="cue", right_on="word").drop(columns=["word"])
    logger.info(f"Episodic candidates: {df['cue'].nunique():,} noun cues")

    df = first_extreme_per_group(df, "cue", largest=False)
    df = df.sort_values(STRENGTH, ascending=True, kind="mergesort")

    if len(df) < n_cues:
        raise ValueError(f"Only {len(df)} episodic cue candidates for {n_cues} targets")

    return df.head(n_cues).reset_index(drop=True)


def pair_episodic_cues(
    episodic_cues: Sequence[str],
    targets: Sequence[str],
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """
    Randomly pair episodic cues with targets.

    Parameters
    ----------
    episodic_cues : Sequence[str]
        Selected cue words
    targets : Sequence[str]
        Distinct targets of the semantic set, in table order
    seed : Optional[int]
        Random seed for reproducibility

    Returns
    -------
    pd.DataFrame
        Columns response, episodic_cue
    """
    if len(episodic_cues) != len(targets):
        raise ValueError(
            f"Cannot pair {len(episodic_cues)} episodic cues with {len(targets)} targets"
        )

    rng = random.Random(seed)
    shuffled: List[str] = list(episodic_cues)
    rng.shuffle(shuffled)

    return pd.DataFrame({"response": list(targets), "episodic_cue": shuffled})


def targets_in_order(semantic_set: pd.DataFrame) -> List[str]:
    return unique_in_order(semantic_set["response"])
