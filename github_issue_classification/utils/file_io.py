"""File input/output helper functions."""

import csv
import logging
from pathlib import Path

import joblib
import pandas as pd


def read_tsv(path, has_header=True, names=None, chunksize=None):
    """Read a tab-separated file into a DataFrame of strings.

    Quotes carry no special meaning and empty cells stay empty strings.
    With ``chunksize`` an iterator of DataFrames is returned instead.
    """
    path = Path(path)
    try:
        return pd.read_csv(
            path,
            sep="\t",
            header=0 if has_header else None,
            names=names,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
            encoding="utf-8",
            chunksize=chunksize,
        )
    except Exception as exc:
        logging.error("Failed to read TSV file %s: %s", path, exc)
        raise


def find_short_rows(path, has_header=True, min_fields=None):
    """Return the 1-based line numbers of rows with fewer fields than expected.

    With a header the expected width is the header's; otherwise it is
    `min_fields`.  Blank lines are ignored, as pandas skips them too.
    """
    path = Path(path)
    short = []
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
            expected = min_fields
            header_pending = has_header
            for row in reader:
                if not row:
                    continue
                if header_pending:
                    header_pending = False
                    expected = max(len(row), min_fields or 0)
                    continue
                if expected is not None and len(row) < expected:
                    short.append(reader.line_num)
    except Exception as exc:
        logging.error("Failed to scan TSV file %s: %s", path, exc)
        raise
    return short


def write_tsv(df, path):
    """Write a DataFrame to a tab-separated file."""
    path = Path(path)
    try:
        df.to_csv(path, sep="\t", index=False, quoting=csv.QUOTE_NONE)
    except Exception as exc:
        logging.error("Failed to write TSV file %s: %s", path, exc)
        raise


def dump_artifact(obj, path):
    """Serialise a Python object to a joblib file, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(obj, path)
    except Exception as exc:
        logging.error("Failed to write artifact %s: %s", path, exc)
        raise


def load_artifact(path):
    """Load a Python object previously written with `dump_artifact`."""
    path = Path(path)
    try:
        return joblib.load(path)
    except Exception as exc:
        logging.error("Failed to read artifact %s: %s", path, exc)
        raise
