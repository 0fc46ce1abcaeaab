"""
Training of the issue Area classifier.

This module appends a multiclass maximum-entropy classifier to the
feature pipeline, fits the composed pipeline on a training view, and
wraps the result in an immutable `TrainedModel`.  Labels are encoded to
dense integer keys before fitting and decoded back to their original
strings on prediction, so the label vocabulary is frozen at fit time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, ClassifierMixin, clone
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import LabelEncoder
from sklearn.utils.validation import check_is_fitted

from ..config import Settings, get_settings
from ..data_loading.loader import Schema
from ..prediction import TRAINING_DEMO_ISSUE, IssueRecord, PredictionEngine
from .features import FeaturePipeline


class LabelKeyClassifier(ClassifierMixin, BaseEstimator):
    """Fit `classifier` on integer label keys and decode its predictions.

    Parameters
    ----------
    classifier : estimator
        Probabilistic classifier trained on the encoded keys.
    label_encoder : LabelEncoder, optional
        Unfitted encoder used for the value-to-key mapping.  A fresh
        `LabelEncoder` is used when omitted.
    """

    def __init__(self, classifier=None, label_encoder=None):
        self.classifier = classifier
        self.label_encoder = label_encoder

    def fit(self, X, y):
        encoder = clone(self.label_encoder) if self.label_encoder is not None else LabelEncoder()
        keys = encoder.fit_transform(np.asarray(y))
        classifier = clone(self.classifier) if self.classifier is not None else LogisticRegression()
        self.label_encoder_ = encoder
        self.classifier_ = classifier.fit(X, keys)
        self.classes_ = encoder.classes_
        return self

    def predict_proba(self, X):
        check_is_fitted(self, "classifier_")
        return self.classifier_.predict_proba(X)

    def predict(self, X):
        check_is_fitted(self, "classifier_")
        keys = self.classifier_.predict(X)
        return self.label_encoder_.inverse_transform(keys)


@dataclass(frozen=True)
class TrainedModel:
    """A fitted pipeline together with the schema it was trained against."""
    pipeline: Pipeline
    schema: Schema

    @property
    def classes(self) -> list[str]:
        return [str(c) for c in self.pipeline[-1].classes_]

    def transform(self, view: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of `view` with `PredictedLabel` and `Score` columns added.

        `Score` holds one probability per known label, in `classes` order.
        """
        features = self.schema.feature_columns
        missing = [c for c in features if c not in view.columns]
        if missing:
            raise ValueError(f"Input is missing feature column(s) {missing}")

        proba = self.pipeline.predict_proba(view[features])
        classes = np.asarray(self.classes, dtype=object)

        scores = np.empty(len(proba), dtype=object)
        for i, row in enumerate(proba):
            scores[i] = row

        scored = view.copy()
        scored["PredictedLabel"] = classes[proba.argmax(axis=1)]
        scored["Score"] = scores
        return scored


def build_training_pipeline(
    feature_pipeline: FeaturePipeline, settings: Optional[Settings] = None
) -> Pipeline:
    """Append the classifier and key decoding to a copy of the feature pipeline."""
    settings = settings or get_settings()
    features = clone(feature_pipeline.features)
    trainer = LabelKeyClassifier(
        classifier=LogisticRegression(
            C=settings.regularization,
            max_iter=settings.max_iter,
            random_state=settings.seed,
        ),
        label_encoder=feature_pipeline.label_encoder,
    )
    return Pipeline(features.steps + [("classifier", trainer)], memory=features.memory)


def _validate_training_view(view: pd.DataFrame, feature_pipeline: FeaturePipeline) -> None:
    if view is None or len(view) == 0:
        raise ValueError("Training data is empty")
    required = list(feature_pipeline.feature_columns) + [feature_pipeline.label_column]
    missing = [c for c in required if c not in view.columns]
    if missing:
        raise ValueError(f"Training data is missing column(s) {missing}")
    labels = view[feature_pipeline.label_column].astype(str).str.strip()
    if (labels == "").all():
        raise ValueError(f"Label column '{feature_pipeline.label_column}' has no values")
    distinct = sorted(set(labels[labels != ""]))
    if len(distinct) < 2:
        raise ValueError(
            f"Label column '{feature_pipeline.label_column}' needs at least two distinct "
            f"values to train a classifier, found only '{distinct[0]}'"
        )


def train_model(
    training_view: pd.DataFrame,
    feature_pipeline: FeaturePipeline,
    settings: Optional[Settings] = None,
    demo_issue: Optional[IssueRecord] = TRAINING_DEMO_ISSUE,
) -> TrainedModel:
    """Fit the full training pipeline and return the trained model.

    After fitting, `demo_issue` (if given) is scored and the predicted
    Area is printed.  Rows with an empty label are dropped before
    fitting.
    """
    _validate_training_view(training_view, feature_pipeline)
    label = feature_pipeline.label_column
    view = training_view[training_view[label].astype(str).str.strip() != ""]
    dropped = len(training_view) - len(view)
    if dropped:
        logging.warning("Dropping %d training rows with an empty %s label", dropped, label)

    pipeline = build_training_pipeline(feature_pipeline, settings)
    logging.info("Fitting classifier on %d issues…", len(view))
    pipeline.fit(view[list(feature_pipeline.feature_columns)], view[label])

    model = TrainedModel(pipeline=pipeline, schema=feature_pipeline.schema)
    logging.info("Trained model knows %d labels: %s", len(model.classes), ", ".join(model.classes))

    if demo_issue is not None:
        prediction = PredictionEngine(model).predict(demo_issue)
        print(f"Single Prediction just-trained-model - Result: {prediction.area}")
    return model
