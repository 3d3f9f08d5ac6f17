"""
Figure generation for the stimulus selection.

This module creates:
- Histograms of the forward association and target frequency distributions
- Rendered preview tables of the semantic and episodic cue sets

All figures use a colorblind-friendly palette and are saved through
``FigureGenerator``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from config.settings import get_config

plt.rcParams.update({
    'font.size': 9,
    'axes.titlesize': 10,
    'axes.labelsize': 9,
    'xtick.labelsize': 8,
    'ytick.labelsize': 8,
    'savefig.bbox': 'tight',
    'savefig.pad_inches': 0.1,
})

logger = logging.getLogger(__name__)


COLORS = {
    'strength': '#2166AC',     # Blue
    'frequency': '#B2182B',    # Red
    'neutral': '#666666',      # Gray
    'header': '#D9D9D9',
}

DOUBLE_COLUMN = 7.0  # inches


@dataclass
class FigureConfig:
    """Configuration for figure generation."""

    width: float = DOUBLE_COLUMN
    height: float = 3.0
    bins: int = 20
    max_rows: int = 15
    dpi: int = 300
    formats: List[str] = None

    def __post_init__(self):
        if self.formats is None:
            self.formats = ['pdf', 'png']


class FigureGenerator:
    """
    Generator for the selection report figures.
    """

    def __init__(self, output_dir: Optional[Path] = None, config: Optional[FigureConfig] = None):
        """
        Initialize the generator.

        Parameters
        ----------
        output_dir : Optional[Path]
            Directory for saving figures
        config : Optional[FigureConfig]
            Figure settings; taken from the application config if None
        """
        if config is None:
            vis = get_config().visualization
            config = FigureConfig(
                bins=vis.histogram_bins,
                max_rows=vis.preview_rows,
                formats=list(vis.output_formats),
                dpi=vis.dpi,
            )
        self.config = config
        self.output_dir = Path(output_dir or get_config().paths.figures_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def save_figure(
        self,
        fig: plt.Figure,
        name: str,
        formats: Optional[List[str]] = None
    ) -> List[Path]:
        """
        Save figure in multiple formats.

        Parameters
        ----------
        fig : plt.Figure
            Figure to save
        name : str
            Base filename (without extension)
        formats : Optional[List[str]]
            Output formats

        Returns
        -------
        List[Path]
            Paths to saved files
        """
        if formats is None:
            formats = self.config.formats

        saved_paths = []
        for fmt in formats:
            path = self.output_dir / f"{name}.{fmt}"
            fig.savefig(path, format=fmt, dpi=self.config.dpi, bbox_inches='tight')
            saved_paths.append(path)
            logger.info(f"Saved figure: {path}")

        plt.close(fig)
        return saved_paths

    def generate_all_figures(
        self,
        semantic_set: pd.DataFrame,
        stimulus_table: pd.DataFrame,
        episodic_cues: pd.DataFrame,
    ) -> Dict[str, List[Path]]:
        """
        Generate all report figures for a selection run.

        Parameters
        ----------
        semantic_set : pd.DataFrame
            Final semantic set (long format)
        stimulus_table : pd.DataFrame
            Wide stimulus table
        episodic_cues : pd.DataFrame
            Selected episodic cue rows

        Returns
        -------
        Dict[str, List[Path]]
            Mapping of figure names to saved paths
        """
        figures = {}

        fig = create_distribution_histograms(semantic_set, self.config)
        figures['distributions'] = self.save_figure(fig, 'distributions')

        fig = create_preview_table(
            stimulus_table, "Semantic cue set", self.config
        )
        figures['semantic_preview'] = self.save_figure(fig, 'semantic_preview')

        columns = [c for c in ["cue", "response", "forward_association", "subtlex_wf"]
                   if c in episodic_cues.columns]
        fig = create_preview_table(
            episodic_cues[columns], "Episodic cue set", self.config
        )
        figures['episodic_preview'] = self.save_figure(fig, 'episodic_preview')

        return figures


def create_distribution_histograms(
    semantic_set: pd.DataFrame,
    config: Optional[FigureConfig] = None
) -> plt.Figure:
    """
    Create side-by-side histograms of cue strength and target frequency.

    Parameters
    ----------
    semantic_set : pd.DataFrame
        Final semantic set with forward_association and subtlex_wf columns
    config : Optional[FigureConfig]
        Figure configuration

    Returns
    -------
    plt.Figure
        The figure object
    """
    if config is None:
        config = FigureConfig()

    fig, (ax_strength, ax_freq) = plt.subplots(1, 2, figsize=(config.width, config.height))

    strengths = semantic_set["forward_association"].to_numpy(dtype=float)
    ax_strength.hist(strengths, bins=config.bins, color=COLORS['strength'], edgecolor='white')
    ax_strength.set_xlabel("Forward association")
    ax_strength.set_ylabel("Cue-target pairs")
    ax_strength.set_title("Semantic cue strength")

    # One frequency value per target
    frequencies = semantic_set.drop_duplicates("response")["subtlex_wf"].to_numpy(dtype=float)
    ax_freq.hist(frequencies, bins=config.bins, color=COLORS['frequency'], edgecolor='white')
    ax_freq.set_xlabel("SUBTLEX frequency (per million)")
    ax_freq.set_ylabel("Targets")
    ax_freq.set_title("Target frequency")

    for ax, values in [(ax_strength, strengths), (ax_freq, frequencies)]:
        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        if len(values):
            ax.axvline(np.mean(values), color=COLORS['neutral'], linestyle='--', linewidth=0.8)

    fig.tight_layout()
    return fig


def create_preview_table(
    table: pd.DataFrame,
    title: str,
    config: Optional[FigureConfig] = None
) -> plt.Figure:
    """
    Render the first rows of a table as a figure.

    Parameters
    ----------
    table : pd.DataFrame
        Table to preview
    title : str
        Figure title
    config : Optional[FigureConfig]
        Figure configuration (``max_rows`` limits the preview)

    Returns
    -------
    plt.Figure
        The figure object
    """
    if config is None:
        config = FigureConfig()

    preview = table.head(config.max_rows).copy()
    for col in preview.select_dtypes(include="number").columns:
        preview[col] = preview[col].map(lambda v: f"{v:.3f}")

    height = 0.6 + 0.25 * (len(preview) + 1)
    fig, ax = plt.subplots(figsize=(config.width, height))
    ax.axis('off')

    if preview.empty:
        ax.text(0.5, 0.5, "No rows", ha='center', va='center', color=COLORS['neutral'])
    else:
        rendered = ax.table(
            cellText=preview.astype(str).values,
            colLabels=list(preview.columns),
            loc='center',
            cellLoc='center',
        )
        rendered.auto_set_font_size(False)
        rendered.set_fontsize(7)
        for (row, _), cell in rendered.get_celld().items():
            if row == 0:
                cell.set_facecolor(COLORS['header'])

    ax.set_title(f"{title} (first {len(preview)} of {len(table)} rows)")
    return fig
