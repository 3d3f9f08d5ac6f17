"""
Synthetic association norms for development and testing ONLY.

The generated tables have the layout of the real inputs (headerless norms
csv, labeled frequency csv) and deliberately contain the conflicts the
selection stages resolve: cues shared between targets, words used as both
cue and target, singular/plural pairs, excluded cues, weak noun cues,
out-of-range frequencies and missing values.

This data is NOT real norms data and must not be used to build an actual
stimulus set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

logger = logging.getLogger(__name__)

# Syllable components; no coda ends in "s" so plural forms only arise on purpose
ONSETS = [
    "b", "bl", "br", "ch", "cl", "cr", "d", "dr", "f", "fl", "fr", "g", "gl",
    "gr", "h", "j", "k", "l", "m", "n", "p", "pl", "pr", "r", "sh", "sl", "sn",
    "st", "t", "th", "tr", "v", "w", "z",
]
NUCLEI = ["a", "e", "i", "o", "u", "ai", "ea", "ee", "oo", "ou"]
CODAS = ["", "b", "d", "g", "k", "l", "m", "n", "nd", "ng", "nk", "nt", "p", "r", "rt", "t", "th"]


class _WordFactory:
    """Produces unique pronounceable lowercase words of 4-9 letters."""

    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.used = set()

    def __call__(self) -> str:
        while True:
            n_syllables = int(self.rng.integers(2, 4))
            word = "".join(
                self.rng.choice(ONSETS) + self.rng.choice(NUCLEI)
                for _ in range(n_syllables)
            ) + self.rng.choice(CODAS)
            if 4 <= len(word) <= 9 and not word.endswith("s") and word not in self.used:
                self.used.add(word)
                return word


def generate_synthetic_norms(
    n_targets: int = 60,
    seed: Optional[int] = 12345,
    show_progress: bool = False,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Generate a raw norms table and a raw frequency table.

    Parameters
    ----------
    n_targets : int
        Number of base target words
    seed : Optional[int]
        Random seed for reproducibility
    show_progress : bool
        Show a progress bar while generating targets

    Returns
    -------
    Tuple[pd.DataFrame, pd.DataFrame]
        (norms with cue, response, forward, backward columns;
        frequency table with Word, Occurences, Length, SUBTLWF, POS columns)
    """
    rng = np.random.default_rng(seed)
    new_word = _WordFactory(rng)

    norms: List[Dict[str, object]] = []
    frequency: Dict[str, Tuple[float, str]] = {}

    def associate(cue: str, response: str, strength: float) -> None:
        norms.append({
            "cue": cue,
            "response": response,
            "forward_association": round(float(strength), 3),
            "backward_association": round(float(rng.beta(1, 8)), 3),
        })

    targets = [new_word() for _ in range(n_targets)]
    all_cues: List[str] = []

    for target in tqdm(targets, desc="Generating targets", disable=not show_progress):
        frequency[target] = (float(rng.uniform(6, 180)), "NN")

        n_cues = int(rng.integers(2, 8))
        for _ in range(n_cues):
            cue = new_word()
            all_cues.append(cue)
            associate(cue, target, rng.uniform(0.12, 0.8))

        # Weak tail that the strength threshold removes
        associate(new_word(), target, rng.uniform(0.01, 0.09))

        # Plural form competing with the target
        if rng.random() < 0.15:
            plural = target + "s"
            frequency[plural] = (float(rng.uniform(6, 120)), "NN")
            for _ in range(int(rng.integers(3, 6))):
                associate(new_word(), plural, rng.uniform(0.12, 0.6))

    # Cues shared between targets and words used in both roles
    for cue in rng.choice(all_cues, size=max(1, len(all_cues) // 10), replace=False):
        associate(str(cue), str(rng.choice(targets)), rng.uniform(0.11, 0.5))
    for target in rng.choice(targets, size=max(1, n_targets // 10), replace=False):
        associate(str(target), str(rng.choice(targets)), rng.uniform(0.15, 0.7))

    for excluded in ("slave", "president"):
        associate(excluded, str(rng.choice(targets)), 0.9)

    # Weakly associated noun cues for the episodic condition
    for _ in range(3 * n_targets):
        cue = new_word()
        frequency[cue] = (float(rng.uniform(5, 150)), str(rng.choice(["NN", "NN", "NN", "VB", "JJ"])))
        for _ in range(int(rng.integers(1, 3))):
            associate(cue, new_word(), rng.uniform(0.005, 0.09))

    # Malformed tokens dropped by normalization
    associate("ice cream", str(targets[0]), 0.5)
    associate("x-ray", str(targets[0]), 0.5)

    norms_df = pd.DataFrame(norms)

    freq_rows = [
        {
            "Word": word.capitalize() if rng.random() < 0.1 else word,
            "Occurences": 1,
            "Length": len(word),
            "SUBTLWF": round(subtlwf, 2),
            "POS": pos,
        }
        for word, (subtlwf, pos) in frequency.items()
    ]
    freq_rows.append({"Word": "the", "Occurences": 1, "Length": 3, "SUBTLWF": 29449.18, "POS": "DT"})
    freq_rows.append({"Word": new_word(), "Occurences": 1, "Length": "NULL", "SUBTLWF": "NULL", "POS": "NN"})
    frequency_df = pd.DataFrame(freq_rows)

    logger.info(
        f"Generated {len(norms_df):,} synthetic association records and "
        f"{len(frequency_df):,} frequency records"
    )
    return norms_df, frequency_df


def write_synthetic_norms(
    output_dir: Union[str, Path],
    n_targets: int = 60,
    seed: Optional[int] = 12345,
    show_progress: bool = True,
) -> Tuple[Path, Path]:
    """
    Write synthetic inputs in the raw file layouts.

    Returns
    -------
    Tuple[Path, Path]
        (norms csv path, frequency csv path)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    norms, frequency = generate_synthetic_norms(n_targets, seed, show_progress)

    norms_path = output_dir / "association_norms.csv"
    frequency_path = output_dir / "word_frequencies.csv"
    norms.to_csv(norms_path, header=False, index=False)
    frequency.to_csv(frequency_path, index=False)

    logger.info(f"Saved synthetic inputs to {output_dir}")
    return norms_path, frequency_path
