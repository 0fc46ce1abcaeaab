"""
High‑level pipeline orchestration functions.

Each function in this module coordinates the stages defined in
`data_loading`, `classification`, `evaluation`, `persistence` and
`prediction`.  Every step receives its inputs as arguments and returns
its outputs; failures propagate to the caller unchanged.  Use these
functions from the command line or import them into your own
scripts/notebooks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .classification.features import build_feature_pipeline
from .classification.text_classifier import TrainedModel, train_model
from .config import Settings, get_settings
from .data_loading.loader import ISSUE_SCHEMA, load_issues
from .evaluation.metrics import MulticlassMetrics, confusion_frame, evaluate_model
from .persistence import load_model
from .prediction import RELOADED_DEMO_ISSUE, IssuePrediction, IssueRecord, predict_issue


@dataclass(frozen=True)
class PipelineResult:
    model: TrainedModel
    metrics: MulticlassMetrics
    prediction: IssuePrediction


def run_training(settings: Settings) -> TrainedModel:
    """Load the training file, build the feature pipeline and fit the model."""
    print(settings.train_path)
    training_view = load_issues(settings.train_path, ISSUE_SCHEMA, has_header=True)

    logging.info("Building feature pipeline…")
    feature_pipeline = build_feature_pipeline(ISSUE_SCHEMA, settings)

    logging.info("Training model…")
    return train_model(training_view, feature_pipeline, settings)


def run_evaluation(model: TrainedModel, settings: Settings) -> MulticlassMetrics:
    """Evaluate `model` on the test file and save it to the configured path."""
    metrics = evaluate_model(model, settings.test_path, model_path=settings.model_path)
    logging.info("Confusion matrix:\n%s", confusion_frame(metrics).to_string())
    return metrics


def run_prediction(settings: Settings, issue: IssueRecord = RELOADED_DEMO_ISSUE) -> IssuePrediction:
    """Reload the saved model from disk and predict the Area of `issue`."""
    model, _schema = load_model(settings.model_path)
    return predict_issue(model, issue)


def run_training_pipeline(
    settings: Optional[Settings] = None,
    issue: IssueRecord = RELOADED_DEMO_ISSUE,
) -> PipelineResult:
    """Train, evaluate, save, reload and predict in one straight run.

    The final prediction deliberately uses the model read back from
    disk rather than the in-memory one.
    """
    settings = settings or get_settings()
    model = run_training(settings)
    metrics = run_evaluation(model, settings)
    prediction = run_prediction(settings, issue)
    return PipelineResult(model=model, metrics=metrics, prediction=prediction)
