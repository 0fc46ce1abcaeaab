"""
Dataset loading for GitHub issue files.

Issues are stored as tab-separated text with one row per issue.  The
`Schema` describes which columns are read, what they are called inside
the program, and which of them carries the label.  Loading returns a
pandas DataFrame whose columns follow the schema order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

import pandas as pd

from ..utils.file_io import find_short_rows, read_tsv

FEATURE = "feature"
LABEL = "label"


@dataclass(frozen=True)
class Column:
    """One schema column: program name, source column name, value type and role."""
    name: str
    source: str
    dtype: str = "text"
    role: str = FEATURE


@dataclass(frozen=True)
class Schema:
    """Ordered, immutable collection of columns."""
    columns: Tuple[Column, ...]

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def feature_columns(self) -> list[str]:
        return [c.name for c in self.columns if c.role == FEATURE]

    @property
    def label_column(self) -> str:
        labels = [c.name for c in self.columns if c.role == LABEL]
        if len(labels) != 1:
            raise ValueError(f"Schema must define exactly one label column, found {labels}")
        return labels[0]

    def without_label(self) -> "Schema":
        return Schema(tuple(c for c in self.columns if c.role != LABEL))


ISSUE_SCHEMA = Schema(
    (
        Column("Title", "Title"),
        Column("Description", "Description"),
        Column("Area", "Area", dtype="category", role=LABEL),
    )
)


def _check_field_counts(path: Path, schema: Schema, has_header: bool) -> None:
    """Fail if any row has fewer fields than the header (or the schema, without one)."""
    short = find_short_rows(
        path, has_header=has_header, min_fields=None if has_header else len(schema.columns)
    )
    if short:
        raise ValueError(
            f"{path}: {len(short)} row(s) do not match the schema (first at line {short[0]})"
        )


def _conform(df: pd.DataFrame, schema: Schema, path: Path, has_header: bool) -> pd.DataFrame:
    """Select, rename and validate the schema columns of a raw frame."""
    sources = [c.source for c in schema.columns]
    if has_header:
        missing = [s for s in sources if s not in df.columns]
        if missing:
            raise ValueError(
                f"{path}: header is missing column(s) {missing}; found {list(df.columns)}"
            )
        view = df[sources].copy()
    else:
        if df.shape[1] < len(sources):
            raise ValueError(
                f"{path}: expected {len(sources)} columns, found {df.shape[1]}"
            )
        view = df.iloc[:, : len(sources)].copy()
        view.columns = sources
    view = view.rename(columns={c.source: c.name for c in schema.columns})

    # Older pandas pads short rows with NaN; field counts are checked up front.
    view = view.fillna("")

    for column in schema.columns:
        if column.dtype == "category":
            view[column.name] = view[column.name].str.strip()
    return view.reset_index(drop=True)


def load_issues(
    path: Path,
    schema: Schema = ISSUE_SCHEMA,
    has_header: bool = True,
) -> pd.DataFrame:
    """Load a tab-separated issue file into a DataFrame following `schema`.

    Parameters
    ----------
    path : Path
        Location of the TSV file.
    schema : Schema
        Columns to read, in order.  With a header, source names are
        matched against it; without one, columns are taken by position.
    has_header : bool
        Whether the first line of the file is a header row.

    Returns
    -------
    pandas.DataFrame
        One row per issue, one string column per schema column.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If a schema column is missing or a row has too few fields.
    """
    path = Path(path)
    if not path.exists():
        logging.error("Dataset not found at %s", path)
        raise FileNotFoundError(f"Dataset not found: {path}")

    _check_field_counts(path, schema, has_header)
    raw = read_tsv(path, has_header=has_header)
    view = _conform(raw, schema, path, has_header)
    logging.info("Loaded %d issues from %s", len(view), path.name)
    return view


def iter_issue_chunks(
    path: Path,
    schema: Schema = ISSUE_SCHEMA,
    has_header: bool = True,
    chunksize: int = 10000,
) -> Iterator[pd.DataFrame]:
    """Stream an issue file as schema-conformed DataFrame chunks."""
    path = Path(path)
    if not path.exists():
        logging.error("Dataset not found at %s", path)
        raise FileNotFoundError(f"Dataset not found: {path}")

    _check_field_counts(path, schema, has_header)
    with read_tsv(path, has_header=has_header, chunksize=chunksize) as reader:
        for chunk in reader:
            yield _conform(chunk, schema, path, has_header)
