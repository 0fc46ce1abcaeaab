"""Command line entry point for training and querying the issue classifier.

Usage examples:
# Train on data/issues_train.tsv, evaluate on data/issues_test.tsv, save and predict
# python -m github_issue_classification

# Use other files and a different seed
# python -m github_issue_classification --train my_train.tsv --test my_test.tsv --seed 7

# Predict with an already saved model
# python -m github_issue_classification --predict-only --title "EF crash" --description "Crash on SaveChanges"
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import get_settings
from .pipelines import run_prediction, run_training_pipeline
from .prediction import RELOADED_DEMO_ISSUE, IssueRecord


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train and evaluate the GitHub issue Area classifier.")
    parser.add_argument("--train", type=Path, help="Training TSV file (Title, Description, Area)")
    parser.add_argument("--test", type=Path, help="Test TSV file with the same columns")
    parser.add_argument("--model", type=Path, help="Where to save / load the trained model")
    parser.add_argument("--seed", type=int, help="Random seed for training")
    parser.add_argument("--cache-dir", type=Path, help="Cache fitted featurization in this directory")
    parser.add_argument("--title", default=RELOADED_DEMO_ISSUE.title, help="Title of the issue to predict")
    parser.add_argument(
        "--description",
        default=RELOADED_DEMO_ISSUE.description,
        help="Description of the issue to predict",
    )
    parser.add_argument(
        "--predict-only",
        action="store_true",
        help="Skip training and predict with the saved model",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    settings = get_settings(
        train_path=args.train,
        test_path=args.test,
        model_path=args.model,
        seed=args.seed,
        cache_dir=args.cache_dir,
    )
    issue = IssueRecord(title=args.title, description=args.description)

    if args.predict_only:
        run_prediction(settings, issue)
    else:
        run_training_pipeline(settings, issue)
    return 0
