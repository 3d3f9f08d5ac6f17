"""
Test suite for the stimulus selection project.

This package contains unit tests and integration tests for:
- Norms and frequency table preprocessing
- Strength selection
- Overlap resolution and plural collapsing
- Final set trimming and episodic cue selection
- Condition assignment
- The end-to-end pipeline, export and figures
"""
