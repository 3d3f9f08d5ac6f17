"""
Unit tests for episodic cue selection and pairing.
"""

import pytest
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from stimset.selection.episodic import pair_episodic_cues, select_episodic_cues, targets_in_order


@pytest.fixture
def semantic_set():
    return pd.DataFrame({
        "cue": ["fruit", "orchard", "cider", "stream", "canoe", "bank"],
        "response": ["apple"] * 3 + ["river"] * 3,
        "forward_association": [0.6, 0.5, 0.4, 0.55, 0.45, 0.35],
    })


@pytest.fixture
def norms():
    rows = [
        ("fruit", "apple", 0.6),
        ("garden", "flower", 0.02),
        ("garden", "house", 0.08),
        ("pencil", "paper", 0.03),
        ("window", "glass", 0.04),
        ("windows", "glass", 0.01),
        ("jacket", "coat", 0.01),
        ("running", "walk", 0.005),
        ("bank", "money", 0.001),
        ("apple", "tree", 0.002),
        ("ghost", "spook", 0.001),
    ]
    return pd.DataFrame(
        [(c, r, s, 0.0) for c, r, s in rows],
        columns=["cue", "response", "forward_association", "backward_association"],
    )


@pytest.fixture
def frequency():
    return pd.DataFrame({
        "word": ["garden", "pencil", "window", "windows", "jacket", "running", "bank", "apple"],
        "length": [6, 6, 6, 7, 6, 7, 4, 5],
        "subtlex_wf": [45.0, 8.0, 50.0, 30.0, 15.0, 70.0, 60.0, 20.5],
        "pos": ["nn", "nn", "nn", "nn", "nn", "vb", "nn", "nn"],
    })


class TestSelectEpisodicCues:
    """Tests for select_episodic_cues."""

    def test_weakest_noun_cues_in_ascending_order(self, norms, frequency, semantic_set):
        result = select_episodic_cues(norms, frequency, semantic_set, n_cues=3)

        assert list(result["cue"]) == ["jacket", "garden", "pencil"]
        assert result["forward_association"].is_monotonic_increasing

    def test_one_row_per_cue_at_its_weakest(self, norms, frequency, semantic_set):
        result = select_episodic_cues(norms, frequency, semantic_set, n_cues=4)

        garden = result[result["cue"] == "garden"]
        assert len(garden) == 1
        assert garden["forward_association"].iloc[0] == 0.02

    def test_exclusions(self, norms, frequency, semantic_set):
        """Semantic-set words, plural forms, non-nouns and unknown words are never chosen."""
        result = select_episodic_cues(norms, frequency, semantic_set, n_cues=4)

        cues = set(result["cue"])
        assert not cues & {"fruit", "bank", "apple"}
        assert "windows" not in cues
        assert "running" not in cues
        assert "ghost" not in cues
        assert cues == {"jacket", "garden", "pencil", "window"}

    def test_custom_noun_tags(self, norms, frequency, semantic_set):
        result = select_episodic_cues(
            norms, frequency, semantic_set, n_cues=1, noun_pos_tags=["vb"]
        )

        assert list(result["cue"]) == ["running"]

    def test_too_few_candidates(self, norms, frequency, semantic_set):
        with pytest.raises(ValueError, match="episodic cue candidates"):
            select_episodic_cues(norms, frequency, semantic_set, n_cues=10)

    def test_frequency_columns_attached(self, norms, frequency, semantic_set):
        result = select_episodic_cues(norms, frequency, semantic_set, n_cues=3)

        assert "subtlex_wf" in result.columns
        assert "word" not in result.columns


class TestPairing:
    """Tests for pair_episodic_cues."""

    def test_pairing_is_a_permutation(self):
        cues = ["jacket", "garden", "pencil"]
        targets = ["apple", "river", "chair"]

        result = pair_episodic_cues(cues, targets, seed=42)

        assert list(result["response"]) == targets
        assert sorted(result["episodic_cue"]) == sorted(cues)

    def test_same_seed_same_pairing(self):
        cues = [f"cue{i}" for i in range(12)]
        targets = [f"target{i}" for i in range(12)]

        first = pair_episodic_cues(cues, targets, seed=7)
        second = pair_episodic_cues(cues, targets, seed=7)

        pd.testing.assert_frame_equal(first, second)

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="Cannot pair"):
            pair_episodic_cues(["jacket"], ["apple", "river"], seed=1)

    def test_targets_in_order(self, semantic_set):
        assert targets_in_order(semantic_set) == ["apple", "river"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
