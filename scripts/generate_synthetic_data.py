#!/usr/bin/env python3
"""
Generate DEMO/TEST input data for development and testing ONLY.

WARNING: This script generates SYNTHETIC association norms and frequency data
for testing the selection pipeline. The words are pronounceable nonwords and
the association strengths are random. It MUST NOT be used to build a real
stimulus set.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stimset.data.synthetic import write_synthetic_norms

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def main():
    parser = argparse.ArgumentParser(description="Generate synthetic norms for testing")
    parser.add_argument("--n-targets", type=int, default=60, help="Number of base targets")
    parser.add_argument("--seed", type=int, default=12345, help="Random seed")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(__file__).parent.parent / "data" / "demo",
        help="Output directory"
    )
    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("GENERATING DEMO DATA FOR TESTING ONLY")
    print("This is NOT real association norms data!")
    print("=" * 60 + "\n")

    norms_path, frequency_path = write_synthetic_norms(args.output, args.n_targets, args.seed)
    print(f"Saved: {norms_path}")
    print(f"Saved: {frequency_path}")


if __name__ == "__main__":
    main()
