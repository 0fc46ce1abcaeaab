import numpy as np
import pandas as pd
import pytest

from github_issue_classification.classification.features import build_feature_pipeline
from github_issue_classification.classification.text_classifier import (
    LabelKeyClassifier,
    TrainedModel,
    build_training_pipeline,
    train_model,
)
from github_issue_classification.config import get_settings
from github_issue_classification.data_loading.loader import ISSUE_SCHEMA, Column, Schema, load_issues
from github_issue_classification.persistence import load_model, save_model
from github_issue_classification.prediction import (
    RELOADED_DEMO_ISSUE,
    PredictionEngine,
)
from github_issue_classification.utils.file_io import write_tsv

from .conftest import TRAIN_ROWS, write_issues


def test_training_prints_demo_prediction(train_file, capsys):
    view = load_issues(train_file)
    model = train_model(view, build_feature_pipeline(ISSUE_SCHEMA), get_settings(seed=0))
    assert isinstance(model, TrainedModel)
    out = capsys.readouterr().out
    assert "Single Prediction just-trained-model - Result: Web Issues" in out


def test_entity_framework_issue_is_ef(trained_model):
    prediction = PredictionEngine(trained_model).predict(RELOADED_DEMO_ISSUE)
    assert prediction.area == "EF Issues"
    assert prediction.confidence == max(prediction.scores.values())
    assert prediction.scores["EF Issues"] > prediction.scores["Web Issues"]


def test_predictions_stay_in_training_vocabulary(trained_model, session_files):
    _, test_path = session_files
    gibberish = pd.DataFrame(
        [{"Title": "zzz qqq", "Description": "xyzzy plugh"}, {"Title": "", "Description": ""}]
    )
    test_view = load_issues(test_path)
    predicted = set(trained_model.transform(test_view)["PredictedLabel"])
    predicted |= set(trained_model.transform(gibberish)["PredictedLabel"])
    assert predicted <= {"EF Issues", "Web Issues"}
    assert trained_model.classes == ["EF Issues", "Web Issues"]


def test_transform_adds_columns_without_mutating_input(trained_model, session_files):
    _, test_path = session_files
    view = load_issues(test_path)
    before = view.copy()
    scored = trained_model.transform(view)
    pd.testing.assert_frame_equal(view, before)
    assert {"PredictedLabel", "Score"} <= set(scored.columns)
    assert np.allclose([s.sum() for s in scored["Score"]], 1.0)


def test_transform_requires_feature_columns(trained_model):
    with pytest.raises(ValueError, match="Description"):
        trained_model.transform(pd.DataFrame([{"Title": "EF crash"}]))


def test_training_is_deterministic(train_file):
    view = load_issues(train_file)
    settings = get_settings(seed=0)
    first = train_model(view, build_feature_pipeline(ISSUE_SCHEMA), settings, demo_issue=None)
    second = train_model(view, build_feature_pipeline(ISSUE_SCHEMA), settings, demo_issue=None)
    a = np.vstack(first.transform(view)["Score"].to_numpy())
    b = np.vstack(second.transform(view)["Score"].to_numpy())
    assert np.array_equal(a, b)


def test_feature_pipeline_is_not_fitted_in_place(train_file):
    view = load_issues(train_file)
    feature_pipeline = build_feature_pipeline(ISSUE_SCHEMA)
    train_model(view, feature_pipeline, get_settings(seed=0), demo_issue=None)
    assert not hasattr(feature_pipeline.label_encoder, "classes_")
    assert not hasattr(feature_pipeline.features.named_steps["features"], "transformers_")


def test_training_pipeline_appends_classifier():
    pipeline = build_training_pipeline(build_feature_pipeline(ISSUE_SCHEMA), get_settings(seed=3))
    assert [name for name, _ in pipeline.steps] == ["features", "classifier"]
    classifier = pipeline.named_steps["classifier"]
    assert isinstance(classifier, LabelKeyClassifier)
    assert classifier.classifier.random_state == 3


def test_label_key_classifier_decodes_keys():
    X = np.array([[0.0], [1.0], [10.0], [11.0]])
    y = np.array(["low", "low", "high", "high"])
    classifier = LabelKeyClassifier().fit(X, y)
    assert list(classifier.classes_) == ["high", "low"]
    assert list(classifier.predict(np.array([[0.5], [10.5]]))) == ["low", "high"]
    assert classifier.predict_proba(X).shape == (4, 2)


def test_empty_training_view_raises():
    empty = pd.DataFrame(columns=["Title", "Description", "Area"])
    with pytest.raises(ValueError, match="empty"):
        train_model(empty, build_feature_pipeline(ISSUE_SCHEMA), demo_issue=None)


def test_missing_label_column_raises(train_file):
    view = load_issues(train_file).drop(columns=["Area"])
    with pytest.raises(ValueError, match="Area"):
        train_model(view, build_feature_pipeline(ISSUE_SCHEMA), demo_issue=None)


def test_blank_labels_raise(train_file):
    view = load_issues(train_file)
    view["Area"] = ""
    with pytest.raises(ValueError, match="no values"):
        train_model(view, build_feature_pipeline(ISSUE_SCHEMA), demo_issue=None)


def test_single_label_training_names_the_label(tmp_path):
    path = write_issues(tmp_path / "issues.tsv", [r for r in TRAIN_ROWS if r[0] == "EF Issues"])
    with pytest.raises(ValueError, match="EF Issues"):
        train_model(load_issues(path), build_feature_pipeline(ISSUE_SCHEMA), get_settings(seed=0))


def test_custom_schema_model_predicts_from_issue_records(tmp_path):
    frame = pd.DataFrame(
        [{"Subject": title, "Body": body, "Team": area} for area, title, body in TRAIN_ROWS]
    )
    path = tmp_path / "issues.tsv"
    write_tsv(frame, path)
    schema = Schema(
        (
            Column("Summary", "Subject"),
            Column("Details", "Body"),
            Column("Owner", "Team", dtype="category", role="label"),
        )
    )
    model = train_model(load_issues(path, schema), build_feature_pipeline(schema), demo_issue=None)
    engine = PredictionEngine(model)

    assert RELOADED_DEMO_ISSUE.as_row(schema) == {
        "Summary": RELOADED_DEMO_ISSUE.title,
        "Details": RELOADED_DEMO_ISSUE.description,
    }
    assert engine.predict(RELOADED_DEMO_ISSUE).area == "EF Issues"
    assert engine.predict({"Summary": "SignalR hub", "Details": "WebSockets are slow"}).area == "Web Issues"


def test_cached_training_matches_uncached_and_reloads(train_file, trained_model, tmp_path):
    cache_dir = tmp_path / "cache"
    view = load_issues(train_file)
    settings = get_settings(seed=0, cache_dir=cache_dir)
    model = train_model(view, build_feature_pipeline(ISSUE_SCHEMA, settings), settings, demo_issue=None)

    assert any(p.is_file() for p in cache_dir.rglob("*"))
    cached = np.vstack(model.transform(view)["Score"].to_numpy())
    uncached = np.vstack(trained_model.transform(view)["Score"].to_numpy())
    assert np.allclose(cached, uncached)

    reloaded, schema = load_model(save_model(model, tmp_path / "model.joblib"))
    assert schema == ISSUE_SCHEMA
    expected = PredictionEngine(model).predict(RELOADED_DEMO_ISSUE)
    assert PredictionEngine(reloaded).predict(RELOADED_DEMO_ISSUE) == expected
