"""
Configuration settings for the semantic/episodic cue stimulus selection.

This module contains all configurable parameters for the selection pipeline,
including filtering thresholds, episodic cue settings, file locations and
figure styling.

Environment variables (optionally loaded from a .env file):
    NORMS_PATH                  Raw association norms csv
    FREQUENCY_PATH              Word frequency / length / POS csv
    STIMSET_SEED                Seed for the episodic pairing and condition assignment
    STIMSET_EXCLUDED_RESPONSES  Comma-separated responses removed after manual review
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"
EXPORTS_DIR = DATA_DIR / "exports"
FIGURES_DIR = PROJECT_ROOT / "figures"


def _env_list(name: str) -> List[str]:
    """Read a comma-separated environment variable as a list of lowercase words."""
    raw = os.getenv(name, "")
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


@dataclass
class SelectionConfig:
    """Configuration for the semantic cue selection (stages 1-6).

    Group-size and top-n settings are applied per response (target) word.
    """

    # Frequency table restriction (inclusive bounds)
    min_word_length: int = 4
    max_word_length: int = 10
    min_frequency: float = 5.0  # SUBTLEX words per million
    max_frequency: float = 200.0

    # Strength selection
    excluded_cues: List[str] = field(default_factory=lambda: ["slave", "president"])
    min_forward_association: float = 0.1  # strict lower bound
    min_group_size: int = 3
    top_n_cues: int = 5

    # Plural collapsing
    plural_suffix: str = "s"
    plural_comparison_size: int = 3

    # Finalizing
    n_final_cues: int = 3
    n_conditions: int = 3

    # Responses judged to be the wrong part of speech on manual review
    excluded_responses: List[str] = field(
        default_factory=lambda: _env_list("STIMSET_EXCLUDED_RESPONSES")
    )


@dataclass
class EpisodicConfig:
    """Configuration for the episodic (unrelated) cue selection (stage 7)."""

    # Common-noun tags after lowercasing the POS column
    noun_pos_tags: List[str] = field(default_factory=lambda: ["nn"])

    random_seed: int = field(default_factory=lambda: int(os.getenv("STIMSET_SEED", "42")))

    # Condition labels, one per experimental condition
    conditions: List[str] = field(default_factory=lambda: [
        "semantic",
        "episodic",
        "uncued",
    ])


@dataclass
class PathsConfig:
    """Input and output locations."""

    norms_path: Path = field(
        default_factory=lambda: Path(os.getenv("NORMS_PATH", str(RAW_DATA_DIR / "association_norms.csv")))
    )
    frequency_path: Path = field(
        default_factory=lambda: Path(os.getenv("FREQUENCY_PATH", str(RAW_DATA_DIR / "word_frequencies.csv")))
    )
    exports_dir: Path = EXPORTS_DIR
    figures_dir: Path = FIGURES_DIR


@dataclass
class VisualizationConfig:
    """Configuration for figure generation."""

    histogram_bins: int = 20
    preview_rows: int = 15

    # Output formats
    output_formats: list = field(default_factory=lambda: ["pdf", "png"])
    dpi: int = 300


@dataclass
class AppConfig:
    """Main application configuration."""

    selection: SelectionConfig = field(default_factory=SelectionConfig)
    episodic: EpisodicConfig = field(default_factory=EpisodicConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)


# Global configuration instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return config


def reload_config() -> AppConfig:
    """Reload configuration from environment."""
    global config
    load_dotenv(override=True)
    config = AppConfig()
    return config
