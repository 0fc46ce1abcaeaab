"""
Evaluation of a trained model on held-out issues.

`evaluate_model` loads a test file with the model's schema, scores every
row, and computes multiclass metrics: micro- and macro-averaged
accuracy, log-loss, and log-loss reduction against a predictor that
always answers with the label frequencies of the test set.  Per-class
log-loss, top-k accuracy and the confusion matrix are computed as well.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, balanced_accuracy_score, confusion_matrix

from ..classification.text_classifier import TrainedModel
from ..data_loading.loader import Schema, load_issues
from ..persistence import save_model

# Probabilities are clipped away from zero before taking the log.
EPSILON = 1e-15


@dataclass(frozen=True)
class MulticlassMetrics:
    micro_accuracy: float
    macro_accuracy: float
    log_loss: float
    log_loss_reduction: float
    top_k: int
    top_k_accuracy: float
    per_class_log_loss: Dict[str, float] = field(default_factory=dict)
    confusion_matrix: Tuple[Tuple[int, ...], ...] = ()
    classes: Tuple[str, ...] = ()
    rows_evaluated: int = 0
    rows_skipped: int = 0


def compute_metrics(
    labels: Sequence[str],
    scores: np.ndarray,
    classes: Sequence[str],
    top_k: int = 3,
) -> MulticlassMetrics:
    """Compute multiclass metrics from true labels and per-class scores.

    Parameters
    ----------
    labels : sequence of str
        True label of every row.
    scores : array of shape (n_rows, n_classes)
        Predicted probability of every class, columns in `classes` order.
    classes : sequence of str
        The label vocabulary the model was trained with.
    top_k : int
        Rank cut-off for top-k accuracy.

    Rows whose label is not in `classes` cannot be scored and are
    skipped with a warning.
    """
    classes = [str(c) for c in classes]
    labels = np.asarray([str(label) for label in labels], dtype=object)
    scores = np.asarray(scores, dtype=float)
    if scores.ndim != 2 or scores.shape != (len(labels), len(classes)):
        raise ValueError(
            f"Scores must have shape ({len(labels)}, {len(classes)}), got {scores.shape}"
        )

    index = {label: i for i, label in enumerate(classes)}
    known = np.array([label in index for label in labels], dtype=bool)
    skipped = int((~known).sum())
    if skipped:
        unseen = sorted(set(labels[~known]))
        logging.warning(
            "Skipping %d test rows with labels unseen in training: %s", skipped, ", ".join(unseen)
        )
    if not known.any():
        raise ValueError("No test rows carry a label known to the model")

    y_true = np.array([index[label] for label in labels[known]], dtype=int)
    proba = scores[known]
    y_pred = proba.argmax(axis=1)
    n_classes = len(classes)

    p_true = np.clip(proba[np.arange(len(y_true)), y_true], EPSILON, 1.0)
    row_loss = -np.log(p_true)
    log_loss = float(row_loss.mean())

    priors = np.bincount(y_true, minlength=n_classes) / len(y_true)
    present = priors > 0
    prior_log_loss = float(-(priors[present] * np.log(priors[present])).sum())
    if prior_log_loss > 0:
        reduction = (prior_log_loss - log_loss) / prior_log_loss
    else:
        reduction = 0.0

    k = max(1, min(top_k, n_classes))
    ranked = np.argsort(-proba, axis=1, kind="stable")[:, :k]
    top_k_accuracy = float((ranked == y_true[:, None]).any(axis=1).mean())

    per_class = {
        classes[c]: float(row_loss[y_true == c].mean()) for c in range(n_classes) if present[c]
    }
    matrix = confusion_matrix(y_true, y_pred, labels=list(range(n_classes)))

    return MulticlassMetrics(
        micro_accuracy=float(accuracy_score(y_true, y_pred)),
        macro_accuracy=float(balanced_accuracy_score(y_true, y_pred)),
        log_loss=log_loss,
        log_loss_reduction=float(reduction),
        top_k=k,
        top_k_accuracy=top_k_accuracy,
        per_class_log_loss=per_class,
        confusion_matrix=tuple(tuple(int(v) for v in row) for row in matrix),
        classes=tuple(classes),
        rows_evaluated=int(known.sum()),
        rows_skipped=skipped,
    )


def _format_number(value: float, leading_zero: bool = True) -> str:
    """Up to three decimals with trailing zeros removed.

    Without `leading_zero` the integer part is dropped when it is zero,
    and a value that rounds to zero renders as an empty string.
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    if not leading_zero:
        if text == "0":
            return ""
        text = re.sub(r"^(-?)0(?=\.)", r"\1", text)
    return text


def format_metrics(metrics: MulticlassMetrics) -> str:
    """Render the console report block for `metrics`."""
    rule = "*" + "*" * 108
    lines = [
        rule,
        "*       Metrics for Multi-class Classification model - Test Data     ",
        "*" + "-" * 108,
        f"*       MicroAccuracy:    {_format_number(metrics.micro_accuracy)}",
        f"*       MacroAccuracy:    {_format_number(metrics.macro_accuracy)}",
        f"*       LogLoss:          {_format_number(metrics.log_loss, leading_zero=False)}",
        f"*       LogLossReduction: {_format_number(metrics.log_loss_reduction, leading_zero=False)}",
        rule,
    ]
    return "\n".join(lines)


def evaluate_model(
    model: TrainedModel,
    test_path: Path,
    schema: Optional[Schema] = None,
    model_path: Optional[Path] = None,
) -> MulticlassMetrics:
    """Score the test file with `model`, report the metrics, then save the model.

    The test file is read with `schema` when given, otherwise with the
    schema the model was trained against.  The model is written to
    `model_path` after a successful evaluation.
    """
    schema = schema or model.schema
    test_view = load_issues(test_path, schema)
    if test_view.empty:
        raise ValueError(f"Test data at {test_path} is empty")
    logging.info("Evaluating model on %d test issues…", len(test_view))

    scored = model.transform(test_view)
    scores = np.vstack(scored["Score"].to_numpy())
    metrics = compute_metrics(scored[schema.label_column], scores, model.classes)
    print(format_metrics(metrics))

    if model_path is not None:
        save_model(model, model_path, schema=model.schema)
    return metrics


def confusion_frame(metrics: MulticlassMetrics) -> pd.DataFrame:
    """Return the confusion matrix as a labelled DataFrame (rows are true labels)."""
    return pd.DataFrame(
        list(metrics.confusion_matrix),
        index=pd.Index(metrics.classes, name="actual"),
        columns=pd.Index(metrics.classes, name="predicted"),
    )
