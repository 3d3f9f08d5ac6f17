"""
End-to-end integration tests for the stimulus selection pipeline.

Tests the complete workflow from raw csv files to exported stimulus tables
and figures.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest
import pandas as pd

from config.settings import AppConfig, get_config
from stimset.cli import main
from stimset.data.synthetic import write_synthetic_norms
from stimset.selection.invariants import (
    check_group_sizes,
    check_min_strength,
    check_no_cross_multiforms,
    check_no_multiforms,
    check_no_overlap,
    check_unique_cues,
)
from stimset.selection.pipeline import StimulusSelector
from stimset.utils.helpers import load_json
from stimset.visualization.figures import FigureGenerator

NORMS_CSV = """\
Fruit,Apple,.60,.10
orchard,apple,.50,.05
cider,apple,.40,.02
pie,apple,.05,.01
fruit,banana,.20,.03
stream,river,.55,.20
canoe,river,.45,.10
bank,river,.35,.05
brook,stream,.30,.10
creek,stream,.30,.08
flow,stream,.30,.02
seat,chair,.50,.30
seats,chair,.45,.10
stool,chair,.40,.08
table,chair,.30,.20
furniture,chairs,.30,.01
desk,chairs,.25,.01
bench,chairs,.20,.02
slave,chair,.90,.00
"ice cream",chair,.5,.1
garden,flower,.02,.01
garden,house,.08,.02
pencil,paper,.03,.01
window,glass,.04,.02
windows,glass,.05,.01
jacket,coat,.01,.00
running,walk,.01,.00
"""

FREQUENCY_CSV = """\
Word,Occurences,Length,SUBTLWF,POS
apple,1,5,20.5,NN
river,1,5,40.0,NN
chair,1,5,60.0,NN
chairs,1,6,12.0,NN
stream,1,6,25.0,NN
banana,1,6,9.0,NN
garden,1,6,45.0,NN
pencil,1,6,8.0,NN
window,1,6,50.0,NN
windows,1,7,30.0,NN
jacket,1,6,15.0,NN
running,1,7,70.0,VB
the,1,3,29449.18,DT
melon,1,NULL,NULL,NN
"""


def _check_semantic_set(semantic_set):
    check_unique_cues(semantic_set)
    check_no_overlap(semantic_set)
    check_no_multiforms(semantic_set, "cue")
    check_no_multiforms(semantic_set, "response")
    check_no_cross_multiforms(semantic_set)
    check_min_strength(semantic_set, 0.1)
    check_group_sizes(semantic_set, 3, exact=3)


class TestEndToEndPipeline:
    """Test the complete selection on a small hand-checked data set."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        """Set up test environment."""
        self.input_dir = tmp_path / "raw"
        self.input_dir.mkdir()
        self.norms_path = self.input_dir / "association_norms.csv"
        self.frequency_path = self.input_dir / "word_frequencies.csv"
        self.norms_path.write_text(NORMS_CSV)
        self.frequency_path.write_text(FREQUENCY_CSV)

        self.output_dir = tmp_path / "test_output"
        self.config = AppConfig()
        self.config.selection.excluded_responses = []
        self.config.episodic.random_seed = 42

    def _run(self, seed=None):
        selector = StimulusSelector(self.config)
        selector.load_data(self.norms_path, self.frequency_path)
        selector.run_full_pipeline(seed=seed)
        return selector

    def test_semantic_set(self):
        """Conflicts are resolved and three cues are kept per target."""
        results = self._run().results

        semantic = results.semantic_set
        groups = {
            target: list(rows["cue"])
            for target, rows in semantic.groupby("response", sort=False)
        }
        assert groups == {
            "apple": ["fruit", "orchard", "cider"],
            "river": ["stream", "canoe", "bank"],
            "chair": ["seat", "stool", "table"],
        }
        assert results.n_unique_targets == 3
        assert results.usable_target_count == 3
        _check_semantic_set(semantic)

    def test_intermediate_stages(self):
        results = self._run().results

        # banana has a single strong row and "slave" is excluded
        assert set(results.strongest["response"]) == {"apple", "river", "stream", "chair", "chairs"}
        assert "slave" not in set(results.strongest["cue"])

        # stream as a target is weaker than river
        assert "stream" not in set(results.non_overlapping["response"])
        assert "seats" not in set(results.collapsed["cue"])
        assert "chairs" not in set(results.collapsed["response"])

    def test_episodic_cues(self):
        results = self._run().results

        assert list(results.episodic_cues["cue"]) == ["jacket", "garden", "pencil"]
        assert sorted(results.pairing["episodic_cue"]) == ["garden", "jacket", "pencil"]
        assert list(results.pairing["response"]) == ["apple", "river", "chair"]

    def test_stimulus_table(self):
        table = self._run().results.stimulus_table

        assert list(table.columns) == [
            "response", "semantic_cue_1", "semantic_cue_2", "semantic_cue_3",
            "episodic_cue", "condition",
        ]
        assert list(table["response"]) == ["apple", "river", "chair"]
        assert table.loc[0, "semantic_cue_1"] == "fruit"
        assert sorted(table["condition"]) == ["episodic", "semantic", "uncued"]

    def test_same_seed_same_output(self):
        first = self._run(seed=7).results.stimulus_table
        second = self._run(seed=7).results.stimulus_table

        assert first.to_csv(index=False) == second.to_csv(index=False)

    def test_manual_exclusion(self):
        """Excluding a target leaves too few for a full block of conditions."""
        self.config.selection.excluded_responses = ["chair"]

        results = self._run().results

        assert results.n_unique_targets == 2
        assert results.usable_target_count == 0
        assert results.semantic_set.empty

    def test_export(self):
        selector = self._run()

        written = selector.export_results(self.output_dir, format="csv")

        for path in written.values():
            assert path.exists()

        exported = pd.read_csv(written["stimulus_table"])
        assert list(exported["response"]) == ["apple", "river", "chair"]

        summary = load_json(written["summary"])
        assert summary["usable_target_count"] == 3
        assert summary["n_episodic_cues"] == 3
        assert summary["seed"] == 42
        assert summary["stage_counts"]["semantic_set"] == 9

    def test_export_requires_results(self):
        selector = StimulusSelector(self.config)

        with pytest.raises(ValueError, match="No results"):
            selector.export_results(self.output_dir)

    def test_run_requires_data(self):
        selector = StimulusSelector(self.config)

        with pytest.raises(ValueError, match="Data not loaded"):
            selector.run_full_pipeline()

    def test_figures(self):
        results = self._run().results

        generator = FigureGenerator(output_dir=self.output_dir / "figures")
        generator.config.formats = ["png"]
        figures = generator.generate_all_figures(
            results.semantic_set, results.stimulus_table, results.episodic_cues
        )

        assert set(figures) == {"distributions", "semantic_preview", "episodic_preview"}
        for paths in figures.values():
            assert all(path.exists() for path in paths)


class TestSyntheticData:
    """Test the pipeline on generated data."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        """Set up test environment."""
        self.norms_path, self.frequency_path = write_synthetic_norms(
            tmp_path / "synthetic", n_targets=60, seed=12345, show_progress=False
        )
        self.output_dir = tmp_path / "exports"

    def test_synthetic_selection(self):
        config = AppConfig()
        config.selection.excluded_responses = []

        selector = StimulusSelector(config)
        selector.load_data(self.norms_path, self.frequency_path)
        results = selector.run_full_pipeline(seed=1)

        assert results.usable_target_count > 0
        assert results.usable_target_count % 3 == 0
        assert results.semantic_set["response"].nunique() == results.usable_target_count
        _check_semantic_set(results.semantic_set)

        assert len(results.episodic_cues) == results.usable_target_count
        assert not set(results.episodic_cues["cue"]) & set(results.semantic_set["cue"])
        assert (results.episodic_cues["pos"] == "nn").all()

        counts = results.conditions["condition"].value_counts()
        assert counts.nunique() == 1

    def test_cli_select(self):
        main([
            "select",
            "--norms", str(self.norms_path),
            "--frequency", str(self.frequency_path),
            "--seed", "3",
            "--output", str(self.output_dir),
        ])

        assert (self.output_dir / "stimulus_table.csv").exists()
        assert (self.output_dir / "selection_summary.json").exists()

    def test_cli_exclusions_do_not_leak_into_global_config(self, tmp_path):
        exclusions = tmp_path / "excluded.txt"
        exclusions.write_text("zzzz\nqqqq\n")
        before = list(get_config().selection.excluded_responses)

        main([
            "select",
            "--norms", str(self.norms_path),
            "--frequency", str(self.frequency_path),
            "--exclude-responses", str(exclusions),
            "--output", str(self.output_dir),
        ])

        assert (self.output_dir / "stimulus_table.csv").exists()
        assert get_config().selection.excluded_responses == before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
