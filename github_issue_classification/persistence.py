"""
Saving and loading trained models.

A saved model is a single joblib artifact holding the fitted pipeline,
the schema it was trained against, and the versions it was written
with.  Loading returns the model and its schema separately so callers
can read new data with the same columns.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import sklearn

from .classification.text_classifier import TrainedModel
from .data_loading.loader import Schema
from .utils.file_io import dump_artifact, load_artifact

FORMAT_VERSION = 1

_REQUIRED_KEYS = {"format_version", "pipeline", "schema"}


def save_model(model: TrainedModel, path: Path, schema: Optional[Schema] = None) -> Path:
    """Write `model` and its schema to `path`, replacing any existing file."""
    path = Path(path)
    artifact = {
        "format_version": FORMAT_VERSION,
        "sklearn_version": sklearn.__version__,
        "pipeline": model.pipeline,
        "schema": schema or model.schema,
    }
    dump_artifact(artifact, path)
    logging.info("Saved model to %s", path)
    return path


def load_model(path: Path) -> Tuple[TrainedModel, Schema]:
    """Read a model written by `save_model`.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    ValueError
        If the file is not a model artifact or was written in an
        incompatible format.
    """
    path = Path(path)
    if not path.exists():
        logging.error("Model not found at %s", path)
        raise FileNotFoundError(f"Model not found: {path}")

    try:
        artifact = load_artifact(path)
    except Exception as exc:
        raise ValueError(f"{path} is not a readable model artifact: {exc}") from exc

    if not isinstance(artifact, dict) or not _REQUIRED_KEYS <= artifact.keys():
        raise ValueError(f"{path} is not a model artifact")
    if artifact["format_version"] != FORMAT_VERSION:
        raise ValueError(
            f"{path} has format version {artifact['format_version']}, expected {FORMAT_VERSION}"
        )
    saved_with = artifact.get("sklearn_version")
    if saved_with != sklearn.__version__:
        logging.warning(
            "Model %s was saved with scikit-learn %s, running %s", path, saved_with, sklearn.__version__
        )

    schema = artifact["schema"]
    model = TrainedModel(pipeline=artifact["pipeline"], schema=schema)
    logging.info("Loaded model from %s (%d labels)", path, len(model.classes))
    return model, schema
