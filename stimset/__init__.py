"""
Semantic/Episodic Cue Stimulus Selection

Selects a balanced stimulus set for a cued-recall memory experiment from
free-association norms cross-referenced with word frequency, length and
part-of-speech data.

Each target word receives three strongly associated semantic cues and one
unrelated episodic cue; targets are split evenly into the experimental
conditions.

Modules:
    - data: Loading and preprocessing of norms and frequency tables
    - selection: Filtering, conflict resolution and pairing stages
    - visualization: Histograms and preview tables
    - utils: Utility functions
"""

__version__ = "1.0.0"
__author__ = "Research Team"
__email__ = "research@example.com"

from config.settings import get_config, config

__all__ = [
    "__version__",
    "get_config",
    "config",
]
