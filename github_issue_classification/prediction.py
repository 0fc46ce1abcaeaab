"""
Single-issue prediction.

A `PredictionEngine` wraps a trained model and scores one issue at a
time.  Engines hold no state besides the model, so building a fresh one
per call and reusing one across calls give the same answers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Union

import pandas as pd

from .data_loading.loader import ISSUE_SCHEMA, Schema

if TYPE_CHECKING:
    from .classification.text_classifier import TrainedModel


@dataclass(frozen=True)
class IssueRecord:
    """One GitHub issue.  `area` is only known for labelled data."""
    title: str
    description: str
    area: Optional[str] = None

    def as_row(self, schema: Schema = ISSUE_SCHEMA) -> Dict[str, str]:
        """Map title and description onto the schema's feature columns, in order."""
        row = dict(zip(schema.feature_columns, (self.title, self.description)))
        if self.area is not None:
            row[schema.label_column] = self.area
        return row


@dataclass(frozen=True)
class IssuePrediction:
    """Predicted Area label plus the probability assigned to every known label."""
    area: str
    scores: Dict[str, float] = field(default_factory=dict)

    @property
    def confidence(self) -> float:
        return self.scores.get(self.area, 0.0)


# Scored right after training to show the freshly fitted model at work.
TRAINING_DEMO_ISSUE = IssueRecord(
    title="WebSockets communication is slow in my machine",
    description=(
        "The WebSockets communication used under the covers by SignalR looks like "
        "is going slow in my development machine.."
    ),
)

# Scored with the model reloaded from disk at the end of a run.
RELOADED_DEMO_ISSUE = IssueRecord(
    title="Entity Framework crashes",
    description="When connecting to the database, EF is crashing",
)


class PredictionEngine:
    """Score single issues with a trained model."""

    def __init__(self, model: "TrainedModel"):
        self.model = model

    def predict(self, issue: Union[IssueRecord, Mapping[str, str]]) -> IssuePrediction:
        """Score one issue, given as an `IssueRecord` or a row keyed by column name."""
        if isinstance(issue, IssueRecord):
            row = issue.as_row(self.model.schema)
        else:
            row = dict(issue)
        view = pd.DataFrame([row])
        scored = self.model.transform(view)
        scores = scored.at[0, "Score"]
        return IssuePrediction(
            area=str(scored.at[0, "PredictedLabel"]),
            scores={label: float(p) for label, p in zip(self.model.classes, scores)},
        )


def predict_issue(model: "TrainedModel", issue: IssueRecord = RELOADED_DEMO_ISSUE) -> IssuePrediction:
    """Predict the Area of `issue` with a fresh engine and report the result."""
    prediction = PredictionEngine(model).predict(issue)
    print(f"=============== Single Prediction - Result: {prediction.area} ===============")
    return prediction
