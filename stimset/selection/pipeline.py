"""
End-to-end stimulus selection pipeline.

This module provides:
- The ordered composition of all selection stages
- A ``StimulusSelector`` that loads inputs, runs the stages and exports results
- The wide stimulus table handed to the experiment software

Stages:
1. Load and normalize norms and frequency data
2. Strength selection
3. Cue/response overlap resolution
4. Plural collapsing (cue, response, cross-column)
5. Finalizing (top-3 cues, manual exclusions, multiple of 3 targets)
6. Episodic cue selection and random pairing
7. Condition assignment and balance check
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from config.settings import get_config
from ..data.preprocessing import (
    export_for_analysis,
    preprocess_frequency_table,
    read_association_norms,
    read_frequency_table,
)
from ..utils.helpers import ensure_directory, save_json, get_timestamp
from .balance import BalanceReport, assign_conditions, check_balance
from .episodic import pair_episodic_cues, select_episodic_cues, targets_in_order
from .finalize import finalize_semantic_set, usable_target_count
from .grouping import STRENGTH, filter_small_groups
from .invariants import (
    check_group_sizes,
    check_min_strength,
    check_no_cross_multiforms,
    check_no_multiforms,
    check_no_overlap,
    check_unique_cues,
)
from .overlap import resolve_cue_response_overlap
from .plurals import collapse_cross_column_plurals, collapse_plurals
from .strength import select_strongest_associations

logger = logging.getLogger(__name__)


@dataclass
class SelectionResults:
    """Tables produced by one pipeline run."""

    base_norms: pd.DataFrame
    frequency: pd.DataFrame
    strongest: pd.DataFrame
    non_overlapping: pd.DataFrame
    collapsed: pd.DataFrame
    semantic_set: pd.DataFrame
    episodic_cues: pd.DataFrame
    pairing: pd.DataFrame
    conditions: pd.DataFrame
    balance: BalanceReport
    stimulus_table: pd.DataFrame
    n_unique_targets: int
    usable_target_count: int
    seed: Optional[int]
    stage_counts: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> Dict[str, Any]:
        """JSON-serializable run summary."""
        return {
            "stage_counts": self.stage_counts,
            "n_unique_targets": self.n_unique_targets,
            "usable_target_count": self.usable_target_count,
            "n_semantic_cues": int(self.semantic_set["cue"].nunique()),
            "n_episodic_cues": len(self.episodic_cues),
            "mean_forward_association": float(self.semantic_set[STRENGTH].mean()),
            "mean_episodic_forward_association": float(self.episodic_cues[STRENGTH].mean()),
            "seed": self.seed,
            "balance": self.balance.to_dict(),
        }


def build_stimulus_table(
    semantic_set: pd.DataFrame,
    pairing: pd.DataFrame,
    conditions: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    Pivot the semantic set to one row per target.

    Parameters
    ----------
    semantic_set : pd.DataFrame
        Final semantic set, cues in descending strength within each target
    pairing : pd.DataFrame
        Columns response, episodic_cue
    conditions : Optional[pd.DataFrame]
        Columns response, condition

    Returns
    -------
    pd.DataFrame
        Columns response, semantic_cue_1..k, episodic_cue[, condition]
    """
    if semantic_set.empty:
        columns = ["response", "episodic_cue"] + (["condition"] if conditions is not None else [])
        return pd.DataFrame(columns=columns)

    ranked = semantic_set.assign(
        slot=semantic_set.groupby("response", sort=False).cumcount() + 1
    )
    wide = ranked.pivot(index="response", columns="slot", values="cue")
    wide.columns = [f"semantic_cue_{slot}" for slot in wide.columns]
    wide = wide.reindex(pd.Index(targets_in_order(semantic_set), name="response")).reset_index()

    table = wide.merge(pairing, how="left", on="response")
    if conditions is not None:
        table = table.merge(conditions[["response", "condition"]], how="left", on="response")
    return table


def run_selection_pipeline(
    norms: pd.DataFrame,
    frequency: pd.DataFrame,
    app_config: Optional[Any] = None,
    seed: Optional[int] = None,
) -> SelectionResults:
    """
    Run every selection stage on already loaded tables.

    Parameters
    ----------
    norms : pd.DataFrame
        Normalized association norms
    frequency : pd.DataFrame
        Restricted frequency table
    app_config : Optional[Any]
        Application configuration. Uses the global one if None.
    seed : Optional[int]
        Overrides the configured random seed

    Returns
    -------
    SelectionResults
        All intermediate and final tables
    """
    app_config = app_config or get_config()
    sel = app_config.selection
    epi = app_config.episodic
    seed = epi.random_seed if seed is None else seed

    counts = {"norms": len(norms), "frequency": len(frequency)}

    strongest = select_strongest_associations(
        norms,
        frequency,
        excluded_cues=sel.excluded_cues,
        min_forward_association=sel.min_forward_association,
        min_group_size=sel.min_group_size,
        top_n=sel.top_n_cues,
    )
    check_min_strength(strongest, sel.min_forward_association)
    check_group_sizes(strongest, sel.min_group_size)
    counts["strongest"] = len(strongest)

    non_overlapping = resolve_cue_response_overlap(strongest)
    counts["non_overlapping"] = len(non_overlapping)

    collapsed = collapse_plurals(
        non_overlapping, "cue", sel.plural_suffix, sel.plural_comparison_size
    )
    collapsed = filter_small_groups(collapsed, "response", sel.min_group_size)
    collapsed = collapse_plurals(
        collapsed, "response", sel.plural_suffix, sel.plural_comparison_size
    )
    collapsed = collapse_cross_column_plurals(
        collapsed, sel.plural_suffix, sel.plural_comparison_size
    )
    counts["collapsed"] = len(collapsed)

    semantic_set, n_unique_targets = finalize_semantic_set(
        collapsed,
        excluded_responses=sel.excluded_responses,
        n_cues=sel.n_final_cues,
        n_conditions=sel.n_conditions,
    )
    usable = usable_target_count(n_unique_targets, sel.n_conditions)
    _check_semantic_set(semantic_set, sel)
    counts["semantic_set"] = len(semantic_set)

    episodic = select_episodic_cues(
        norms,
        frequency,
        semantic_set,
        n_cues=usable,
        noun_pos_tags=epi.noun_pos_tags,
        suffix=sel.plural_suffix,
    )
    targets = targets_in_order(semantic_set)
    pairing = pair_episodic_cues(episodic["cue"].tolist(), targets, seed=seed)
    counts["episodic_cues"] = len(episodic)

    conditions = assign_conditions(semantic_set, epi.conditions, seed=seed)
    balance = check_balance(conditions)

    stimulus_table = build_stimulus_table(semantic_set, pairing, conditions)

    return SelectionResults(
        base_norms=norms,
        frequency=frequency,
        strongest=strongest,
        non_overlapping=non_overlapping,
        collapsed=collapsed,
        semantic_set=semantic_set,
        episodic_cues=episodic,
        pairing=pairing,
        conditions=conditions,
        balance=balance,
        stimulus_table=stimulus_table,
        n_unique_targets=n_unique_targets,
        usable_target_count=usable,
        seed=seed,
        stage_counts=counts,
    )


def _check_semantic_set(semantic_set: pd.DataFrame, sel: Any) -> None:
    check_unique_cues(semantic_set)
    check_no_overlap(semantic_set)
    check_no_multiforms(semantic_set, "cue", sel.plural_suffix)
    check_no_multiforms(semantic_set, "response", sel.plural_suffix)
    check_no_cross_multiforms(semantic_set, sel.plural_suffix)
    check_min_strength(semantic_set, sel.min_forward_association)
    check_group_sizes(semantic_set, sel.n_final_cues, exact=sel.n_final_cues)


class StimulusSelector:
    """
    Selector for the cued-recall stimulus set.

    Loads the association norms and frequency table, runs the selection
    stages in order and exports the resulting tables.
    """

    def __init__(self, config: Optional[Any] = None):
        """
        Initialize the selector.

        Parameters
        ----------
        config : Optional[Any]
            Application configuration. Uses default if None.
        """
        self.config = config or get_config()
        self.norms: Optional[pd.DataFrame] = None
        self.frequency: Optional[pd.DataFrame] = None
        self.results: Optional[SelectionResults] = None

    def load_data(
        self,
        norms_path: Optional[Path] = None,
        frequency_path: Optional[Path] = None,
    ) -> None:
        """
        Load and preprocess the input tables.

        Parameters
        ----------
        norms_path : Optional[Path]
            Raw norms csv; configured path if None
        frequency_path : Optional[Path]
            Frequency csv; configured path if None
        """
        norms_path = Path(norms_path or self.config.paths.norms_path)
        frequency_path = Path(frequency_path or self.config.paths.frequency_path)
        sel = self.config.selection

        self.norms = read_association_norms(norms_path)
        self.frequency = preprocess_frequency_table(
            read_frequency_table(frequency_path),
            min_length=sel.min_word_length,
            max_length=sel.max_word_length,
            min_frequency=sel.min_frequency,
            max_frequency=sel.max_frequency,
        )
        logger.info(
            f"Loaded {len(self.norms):,} association records and "
            f"{len(self.frequency):,} frequency records"
        )

    def run_full_pipeline(self, seed: Optional[int] = None) -> SelectionResults:
        """
        Run all selection stages.

        Parameters
        ----------
        seed : Optional[int]
            Overrides the configured random seed

        Returns
        -------
        SelectionResults
            All intermediate and final tables
        """
        if self.norms is None or self.frequency is None:
            raise ValueError("Data not loaded. Call load_data() first.")

        logger.info("Running stimulus selection...")
        self.results = run_selection_pipeline(self.norms, self.frequency, self.config, seed=seed)
        logger.info(
            f"Selection complete: {self.results.usable_target_count} targets "
            f"({self.results.n_unique_targets} available)"
        )
        return self.results

    def export_results(self, output_dir: Path, format: str = "csv") -> Dict[str, Path]:
        """
        Export the selected tables and a run summary.

        Parameters
        ----------
        output_dir : Path
            Directory for the exported files
        format : str
            Table format ("csv", "json", "parquet", "excel")

        Returns
        -------
        Dict[str, Path]
            Mapping of table names to written files
        """
        if self.results is None:
            raise ValueError("No results. Call run_full_pipeline() first.")

        output_dir = ensure_directory(output_dir)
        extension = "xlsx" if format == "excel" else format

        tables = {
            "stimulus_table": self.results.stimulus_table,
            "semantic_set": self.results.semantic_set,
            "episodic_cues": self.results.episodic_cues,
            "episodic_pairing": self.results.pairing,
        }
        written = {}
        for name, table in tables.items():
            path = output_dir / f"{name}.{extension}"
            export_for_analysis(table, path, format=format)
            written[name] = path

        summary = self.results.summary()
        summary["generated_at"] = get_timestamp()
        summary_path = output_dir / "selection_summary.json"
        save_json(summary, summary_path)
        written["summary"] = summary_path

        logger.info(f"Results exported to {output_dir}")
        return written
