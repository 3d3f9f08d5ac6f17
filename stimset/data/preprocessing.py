"""
Data loading and preprocessing for the stimulus selection.

This module provides functions for:
- Reading and normalizing raw cue-response association norms
- Reading and restricting the word frequency / length / POS table
- Exporting selection tables for external analysis tools
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

logger = logging.getLogger(__name__)

NORMS_COLUMNS = ["cue", "response", "forward_association", "backward_association"]
STRENGTH_COLUMNS = ["forward_association", "backward_association"]

# Raw frequency table header -> internal column name
FREQUENCY_COLUMN_MAPPING = {
    "Word": "word",
    "Length": "length",
    "SUBTLWF": "subtlex_wf",
    "POS": "pos",
}

ALPHABETIC_PATTERN = r"^[a-z]+$"


class MalformedRecordError(ValueError):
    """Raised when an input row does not have the expected number of fields."""


def read_association_norms(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read raw association norms and normalize them.

    The file has no header and four comma-separated fields per line:
    cue, response, forward association, backward association.

    Parameters
    ----------
    path : Union[str, Path]
        Path to the norms csv

    Returns
    -------
    pd.DataFrame
        Normalized association table

    Raises
    ------
    MalformedRecordError
        If any line does not carry exactly four fields
    """
    logger.info(f"Loading association norms from {path}")

    try:
        raw = pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except pd.errors.ParserError as exc:
        raise MalformedRecordError(f"Association norms in {path} have inconsistent arity: {exc}") from exc
    except pd.errors.EmptyDataError as exc:
        raise MalformedRecordError(f"Association norms in {path} contain no records") from exc

    return normalize_association_norms(raw)


def normalize_association_norms(raw_norms: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize a raw four-column association table.

    Lowercases the text fields, keeps only purely alphabetic cues and
    responses, and parses the strength columns. Rows whose strengths cannot be
    parsed or fall outside [0, 1] are dropped without raising.

    Parameters
    ----------
    raw_norms : pd.DataFrame
        Raw norms with exactly four columns in cue, response, forward,
        backward order

    Returns
    -------
    pd.DataFrame
        Normalized table with a fresh RangeIndex

    Raises
    ------
    MalformedRecordError
        If the table does not have four columns or a row is missing fields
    """
    if raw_norms.shape[1] != len(NORMS_COLUMNS):
        raise MalformedRecordError(
            f"Expected {len(NORMS_COLUMNS)} fields per association record, "
            f"got {raw_norms.shape[1]}"
        )

    df = raw_norms.copy()
    df.columns = NORMS_COLUMNS

    incomplete = df.isna().any(axis=1)
    if incomplete.any():
        rows = [int(i) + 1 for i in df.index[incomplete][:5]]
        raise MalformedRecordError(f"Association records with missing fields at rows {rows}")

    initial_n = len(df)

    for col in ["cue", "response"]:
        df[col] = df[col].astype(str).str.strip().str.lower()

    alphabetic = (
        df["cue"].str.fullmatch(ALPHABETIC_PATTERN)
        & df["response"].str.fullmatch(ALPHABETIC_PATTERN)
    )
    df = df[alphabetic].copy()
    logger.info(f"After alphabetic filter: {len(df):,} of {initial_n:,} records")

    for col in STRENGTH_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    in_range = df[STRENGTH_COLUMNS].apply(lambda s: s.between(0, 1)).all(axis=1)
    n_invalid = int((~in_range).sum())
    if n_invalid:
        logger.info(f"Dropped {n_invalid} records with unparseable or out-of-range strengths")
    df = df[in_range]

    return df.reset_index(drop=True)


def read_frequency_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read the raw word frequency table.

    Only the literal string ``NULL`` is treated as missing so that words such
    as "nan" or "null" survive.

    Parameters
    ----------
    path : Union[str, Path]
        Path to the frequency csv (Word, Occurences, Length, SUBTLWF, POS)

    Returns
    -------
    pd.DataFrame
        Raw frequency table
    """
    logger.info(f"Loading frequency table from {path}")
    raw = pd.read_csv(path, na_values=["NULL"], keep_default_na=False)
    logger.info(f"Loaded {len(raw):,} frequency records")
    return raw


def preprocess_frequency_table(
    raw_frequency: pd.DataFrame,
    min_length: int = 4,
    max_length: int = 10,
    min_frequency: float = 5.0,
    max_frequency: float = 200.0,
) -> pd.DataFrame:
    """
    Normalize and restrict the frequency table.

    Parameters
    ----------
    raw_frequency : pd.DataFrame
        Raw frequency table as read by ``read_frequency_table``
    min_length, max_length : int
        Inclusive bounds on word length in letters
    min_frequency, max_frequency : float
        Inclusive bounds on SUBTLEX frequency per million

    Returns
    -------
    pd.DataFrame
        One row per word with columns word, length, subtlex_wf, pos
    """
    missing = [c for c in FREQUENCY_COLUMN_MAPPING if c not in raw_frequency.columns]
    if missing:
        raise ValueError(f"Missing required frequency column(s): {missing}")

    df = raw_frequency.rename(columns=FREQUENCY_COLUMN_MAPPING)

    # Occurences is always 1 upstream
    df = df[list(FREQUENCY_COLUMN_MAPPING.values())].copy()

    df = df[df["word"].notna()].copy()
    df["word"] = df["word"].astype(str).str.strip().str.lower()
    df["pos"] = df["pos"].fillna("").astype(str).str.strip().str.lower()
    df["length"] = pd.to_numeric(df["length"], errors="coerce")
    df["subtlex_wf"] = pd.to_numeric(df["subtlex_wf"], errors="coerce")
    df = df.dropna(subset=["length", "subtlex_wf"])
    df["length"] = df["length"].astype(int)

    df = df.drop_duplicates(subset=["word"], keep="first")

    df = df[
        df["length"].between(min_length, max_length)
        & df["subtlex_wf"].between(min_frequency, max_frequency)
    ]
    logger.info(
        f"Frequency table restricted to {len(df):,} words "
        f"(length {min_length}-{max_length}, frequency {min_frequency:g}-{max_frequency:g})"
    )
    return df.reset_index(drop=True)


def export_for_analysis(
    data: pd.DataFrame,
    output_path: Path,
    format: str = "csv"
) -> None:
    """
    Export a table for external analysis tools.

    Parameters
    ----------
    data : pd.DataFrame
        Data to export
    output_path : Path
        Output file path
    format : str
        Output format ("csv", "parquet", "json", "excel")
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "csv":
        data.to_csv(output_path, index=False)
    elif format == "parquet":
        data.to_parquet(output_path, index=False)
    elif format == "json":
        data.to_json(output_path, orient="records", indent=2)
    elif format == "excel":
        data.to_excel(output_path, index=False)
    else:
        raise ValueError(f"Unknown format: {format}")

    logger.info(f"Exported {len(data)} records to {output_path}")
