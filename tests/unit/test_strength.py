"""
Unit tests for strength-based selection.
"""

import pytest
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from stimset.selection.grouping import (
    filter_small_groups,
    first_extreme_per_group,
    top_k_mean,
    top_n_per_group,
    weaker,
)
from stimset.selection.invariants import InvariantViolationError, check_unique_cues
from stimset.selection.strength import join_response_frequency, select_strongest_associations


def _norms(rows):
    return pd.DataFrame(
        [(cue, response, strength, 0.0) for cue, response, strength in rows],
        columns=["cue", "response", "forward_association", "backward_association"],
    )


def _frequency(words):
    return pd.DataFrame({
        "word": list(words),
        "length": [len(w) for w in words],
        "subtlex_wf": [20.0] * len(words),
        "pos": ["nn"] * len(words),
    })


class TestGrouping:
    """Tests for the group-wise helpers."""

    def test_filter_small_groups(self):
        df = _norms([("a", "x", 0.5), ("b", "x", 0.4), ("c", "y", 0.3)])

        result = filter_small_groups(df, "response", 2)
        assert list(result["cue"]) == ["a", "b"]

    def test_first_extreme_keeps_first_tie(self):
        """Ties for the maximum keep the first row in table order."""
        df = _norms([("a", "x", 0.5), ("a", "y", 0.5), ("a", "z", 0.2)])

        result = first_extreme_per_group(df, "cue", largest=True)
        assert list(result["response"]) == ["x"]

        result = first_extreme_per_group(df, "cue", largest=False)
        assert list(result["response"]) == ["z"]

    def test_top_n_keeps_boundary_ties(self):
        """All rows tied with the n-th value are kept."""
        df = _norms([
            ("a", "x", 0.9), ("b", "x", 0.8), ("c", "x", 0.7),
            ("d", "x", 0.6), ("e", "x", 0.5), ("f", "x", 0.5),
        ])

        assert len(top_n_per_group(df, "response", 5)) == 6

    def test_top_n_without_ties(self):
        df = _norms([
            ("a", "x", 0.9), ("b", "x", 0.8), ("c", "x", 0.7),
            ("d", "x", 0.6), ("e", "x", 0.5), ("f", "x", 0.4),
        ])

        result = top_n_per_group(df, "response", 5)
        assert "f" not in set(result["cue"])

    def test_top_k_mean(self):
        df = _norms([("a", "x", 0.2), ("b", "x", 0.5), ("c", "x", 0.4), ("d", "x", 0.3)])

        assert top_k_mean(df, 3) == pytest.approx(0.4)

    def test_empty_group_always_loses(self):
        """An undefined mean loses against any defined mean."""
        empty = _norms([])
        assert pd.isna(top_k_mean(empty, 3))

        assert weaker(float("nan"), 0.1)
        assert not weaker(0.1, float("nan"))
        assert not weaker(float("nan"), float("nan"))
        assert weaker(0.2, 0.3)
        assert not weaker(0.3, 0.3)


class TestStrengthSelection:
    """Tests for select_strongest_associations."""

    def test_join_drops_responses_without_frequency(self):
        norms = _norms([("a", "apple", 0.5), ("b", "unknown", 0.5)])

        joined = join_response_frequency(norms, _frequency(["apple"]))

        assert list(joined["response"]) == ["apple"]
        assert "word" not in joined.columns
        assert "subtlex_wf" in joined.columns

    def test_excluded_cues_and_threshold(self):
        """Blacklisted cues and rows at or below 0.1 never survive."""
        norms = _norms([
            ("fruit", "apple", 0.6),
            ("orchard", "apple", 0.5),
            ("cider", "apple", 0.4),
            ("slave", "apple", 0.9),
            ("president", "apple", 0.8),
            ("pie", "apple", 0.1),
        ])

        result = select_strongest_associations(norms, _frequency(["apple"]))

        assert set(result["cue"]) == {"fruit", "orchard", "cider"}
        assert (result["forward_association"] > 0.1).all()

    def test_small_groups_dropped(self):
        norms = _norms([
            ("fruit", "apple", 0.6),
            ("orchard", "apple", 0.5),
            ("cider", "apple", 0.4),
            ("yellow", "banana", 0.5),
            ("monkey", "banana", 0.4),
        ])

        result = select_strongest_associations(norms, _frequency(["apple", "banana"]))
        assert set(result["response"]) == {"apple"}

    def test_each_cue_kept_once_at_its_strongest(self):
        """A cue shared by two targets stays with the stronger one."""
        norms = _norms([
            ("red", "apple", 0.5),
            ("fruit", "apple", 0.4),
            ("pie", "apple", 0.3),
            ("tree", "apple", 0.2),
            ("green", "pear", 0.5),
            ("shape", "pear", 0.4),
            ("tree", "pear", 0.6),
        ])

        result = select_strongest_associations(norms, _frequency(["apple", "pear"]))

        tree = result[result["cue"] == "tree"]
        assert len(tree) == 1
        assert tree["response"].iloc[0] == "pear"
        check_unique_cues(result)

    def test_group_size_rechecked_after_cue_selection(self):
        """A group falling below the minimum after cue selection is dropped."""
        norms = _norms([
            ("red", "apple", 0.5),
            ("fruit", "apple", 0.4),
            ("tree", "apple", 0.3),
            ("green", "pear", 0.5),
            ("shape", "pear", 0.4),
            ("tree", "pear", 0.6),
        ])

        result = select_strongest_associations(norms, _frequency(["apple", "pear"]))

        assert set(result["response"]) == {"pear"}
        assert len(result) == 3

    def test_tied_cue_keeps_first_row(self):
        norms = _norms([
            ("twin", "apple", 0.5),
            ("red", "apple", 0.4),
            ("fruit", "apple", 0.3),
            ("twin", "pear", 0.5),
            ("green", "pear", 0.4),
            ("shape", "pear", 0.3),
            ("juicy", "pear", 0.2),
        ])

        result = select_strongest_associations(norms, _frequency(["apple", "pear"]))

        assert result.loc[result["cue"] == "twin", "response"].tolist() == ["apple"]

    def test_top_five_per_response(self):
        norms = _norms([(f"cue{c}", "apple", s) for c, s in zip("abcdefg", [0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3])])

        result = select_strongest_associations(norms, _frequency(["apple"]))

        assert len(result) == 5
        assert result["forward_association"].min() == 0.5

    def test_relaxed_thresholds(self):
        norms = _norms([("a", "apple", 0.5), ("b", "apple", 0.05), ("c", "pear", 0.5)])

        result = select_strongest_associations(
            norms, _frequency(["apple", "pear"]),
            excluded_cues=None, min_forward_association=0.0, min_group_size=1,
        )
        assert len(result) == 3

    def test_unique_cue_check_raises(self):
        df = _norms([("a", "x", 0.5), ("a", "y", 0.4)])

        with pytest.raises(InvariantViolationError):
            check_unique_cues(df)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
