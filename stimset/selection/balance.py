"""
Assignment of targets to experimental conditions.

Targets are ranked by the mean strength of their semantic cues and assigned
in consecutive blocks, one target per condition per block, so the
conditions end up matched on associative strength. A one-way ANOVA per
matching variable documents how well the conditions are balanced.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from .grouping import STRENGTH

logger = logging.getLogger(__name__)

BALANCE_VARIABLES = {
    "mean_forward_association": "Mean semantic forward association",
    "subtlex_wf": "Target frequency (per million)",
}


@dataclass
class BalanceTest:
    """One-way ANOVA of a matching variable across conditions."""

    variable: str
    condition_means: Dict[str, float]
    f_statistic: float
    p_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variable": self.variable,
            "condition_means": self.condition_means,
            "f_statistic": self.f_statistic,
            "p_value": self.p_value,
        }


@dataclass
class BalanceReport:
    """Balance of the condition assignment."""

    n_per_condition: Dict[str, int]
    tests: Dict[str, BalanceTest]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_per_condition": self.n_per_condition,
            "tests": {name: test.to_dict() for name, test in self.tests.items()},
        }


def summarize_targets(semantic_set: pd.DataFrame) -> pd.DataFrame:
    """
    One row per target with its mean semantic strength and frequency.

    Target order follows the semantic set.
    """
    summary = semantic_set.groupby("response", sort=False).agg(
        mean_forward_association=(STRENGTH, "mean"),
        subtlex_wf=("subtlex_wf", "first"),
    )
    return summary.reset_index()


def assign_conditions(
    semantic_set: pd.DataFrame,
    conditions: Sequence[str],
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """
    Assign every target to one condition.

    Parameters
    ----------
    semantic_set : pd.DataFrame
        Final semantic set; its target count must be a multiple of the
        number of conditions
    conditions : Sequence[str]
        Condition labels
    seed : Optional[int]
        Random seed for the within-block label order

    Returns
    -------
    pd.DataFrame
        Columns response, mean_forward_association, subtlex_wf, condition
    """
    targets = summarize_targets(semantic_set)
    n_conditions = len(conditions)
    if len(targets) % n_conditions:
        raise ValueError(
            f"{len(targets)} targets cannot be split evenly into {n_conditions} conditions"
        )

    rng = random.Random(seed)
    ranked = targets.sort_values("mean_forward_association", ascending=False, kind="mergesort")

    labels = []
    for _ in range(len(ranked) // n_conditions):
        block = list(conditions)
        rng.shuffle(block)
        labels.extend(block)
    ranked = ranked.assign(condition=labels)

    # Back to semantic set order
    return ranked.loc[targets.index].reset_index(drop=True)


def check_balance(assignment: pd.DataFrame) -> BalanceReport:
    """
    Test each matching variable for differences between conditions.

    Parameters
    ----------
    assignment : pd.DataFrame
        Output of ``assign_conditions``

    Returns
    -------
    BalanceReport
        Group sizes and one-way ANOVA per variable
    """
    grouped = assignment.groupby("condition", sort=False)
    n_per_condition = {str(k): int(v) for k, v in grouped.size().items()}

    tests = {}
    for variable in BALANCE_VARIABLES:
        samples = [group[variable].to_numpy(dtype=float) for _, group in grouped]
        means = {str(name): float(group[variable].mean()) for name, group in grouped}

        if len(samples) < 2 or any(len(s) < 2 for s in samples):
            f_stat, p_value = np.nan, np.nan
        else:
            f_stat, p_value = stats.f_oneway(*samples)

        tests[variable] = BalanceTest(
            variable=variable,
            condition_means=means,
            f_statistic=float(f_stat),
            p_value=float(p_value),
        )
        logger.info(
            f"{BALANCE_VARIABLES[variable]}: F = {float(f_stat):.2f}, p = {float(p_value):.3f}"
        )

    return BalanceReport(n_per_condition=n_per_condition, tests=tests)
