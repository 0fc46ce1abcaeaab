"""Shared fixtures: small labelled issue files and a model trained on them."""

import pandas as pd
import pytest

from github_issue_classification.classification.features import build_feature_pipeline
from github_issue_classification.classification.text_classifier import train_model
from github_issue_classification.config import get_settings
from github_issue_classification.data_loading.loader import ISSUE_SCHEMA, load_issues
from github_issue_classification.utils.file_io import write_tsv

TRAIN_ROWS = [
    ("EF Issues", "EF crashes on SaveChanges", "The database connection drops and EF crashes when calling SaveChanges"),
    ("EF Issues", "Database migration crash", "Running the EF migration against the database makes the app crash"),
    ("EF Issues", "EF query is slow", "EF generates a slow SQL query against the database"),
    ("EF Issues", "DbContext crash", "Creating the DbContext crashes when the database file is locked"),
    ("EF Issues", "Crash when connecting to database", "The EF provider crashes while opening a connection to the database"),
    ("EF Issues", "Database timeout in EF", "Long running EF database commands crash with a timeout"),
    ("Web Issues", "WebSockets disconnect randomly", "SignalR WebSockets connections disconnect after a few minutes"),
    ("Web Issues", "SignalR hub is slow", "Messages sent through the SignalR hub over WebSockets arrive late"),
    ("Web Issues", "WebSockets behind proxy", "The WebSockets transport fails behind the proxy so SignalR falls back"),
    ("Web Issues", "SignalR client reconnect loop", "The SignalR client keeps reconnecting when the WebSockets handshake fails"),
    ("Web Issues", "Slow WebSockets on localhost", "WebSockets communication used by SignalR is slow on my machine"),
    ("Web Issues", "Kestrel rejects WebSockets upgrade", "Kestrel returns 400 for the WebSockets upgrade sent by SignalR"),
]

TEST_ROWS = [
    ("EF Issues", "EF crash on database update", "Updating the database with EF crashes"),
    ("EF Issues", "Database connection crash", "EF crashes when the database connection string is invalid"),
    ("Web Issues", "SignalR WebSockets timeout", "SignalR over WebSockets times out after idle periods"),
    ("Web Issues", "WebSockets handshake fails", "The WebSockets handshake for the SignalR hub fails"),
]


def _frame(rows):
    return pd.DataFrame(
        [
            {"ID": str(i), "Area": area, "Title": title, "Description": description}
            for i, (area, title, description) in enumerate(rows, start=1)
        ]
    )


def write_issues(path, rows):
    write_tsv(_frame(rows), path)
    return path


@pytest.fixture
def train_file(tmp_path):
    return write_issues(tmp_path / "issues_train.tsv", TRAIN_ROWS)


@pytest.fixture
def test_file(tmp_path):
    return write_issues(tmp_path / "issues_test.tsv", TEST_ROWS)


@pytest.fixture
def settings(train_file, test_file, tmp_path):
    return get_settings(
        train_path=train_file,
        test_path=test_file,
        model_path=tmp_path / "models" / "model.joblib",
        seed=0,
    )


@pytest.fixture(scope="session")
def session_files(tmp_path_factory):
    base = tmp_path_factory.mktemp("issues")
    return (
        write_issues(base / "issues_train.tsv", TRAIN_ROWS),
        write_issues(base / "issues_test.tsv", TEST_ROWS),
    )


@pytest.fixture(scope="session")
def trained_model(session_files):
    train_path, _ = session_files
    view = load_issues(train_path, ISSUE_SCHEMA)
    return train_model(view, build_feature_pipeline(ISSUE_SCHEMA), get_settings(seed=0), demo_issue=None)
