"""
Project configuration settings.

Edit the variables in this module to point to your data directories, or
override them through environment variables (a `.env` file in the
project root is loaded automatically).  Keeping configuration in one
place makes it easy to override default behaviour without modifying
individual modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

# Base directory of the repository (parent of the package directory).
BASE_DIR: Path = Path(__file__).resolve().parents[1]

load_dotenv(BASE_DIR / ".env")

###############################################################################
# Directory paths
###############################################################################

# Tab-separated training and test datasets live here
DATA_DIR: Path = Path(os.getenv("ISSUES_DATA_DIR", BASE_DIR / "data"))

# Trained model artefacts are written here
MODELS_DIR: Path = BASE_DIR / "models"

TRAIN_DATA_PATH: Path = DATA_DIR / os.getenv("ISSUES_TRAIN_FILE", "issues_train.tsv")
TEST_DATA_PATH: Path = DATA_DIR / os.getenv("ISSUES_TEST_FILE", "issues_test.tsv")
MODEL_PATH: Path = Path(os.getenv("ISSUES_MODEL_PATH", MODELS_DIR / "model.joblib"))

###############################################################################
# Training parameters
###############################################################################

# Fixed seed so that repeated runs produce identical models and metrics
SEED: int = int(os.getenv("ISSUES_SEED", "0"))

# Optional joblib cache directory for the featurization checkpoint
CACHE_DIR: Path | None = (
    Path(os.environ["ISSUES_CACHE_DIR"]) if os.getenv("ISSUES_CACHE_DIR") else None
)

MAX_ITER: int = int(os.getenv("ISSUES_MAX_ITER", "1000"))
REGULARIZATION: float = float(os.getenv("ISSUES_REGULARIZATION", "1.0"))


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one run of the training pipeline."""
    train_path: Path = TRAIN_DATA_PATH
    test_path: Path = TEST_DATA_PATH
    model_path: Path = MODEL_PATH
    seed: int = SEED
    cache_dir: Path | None = CACHE_DIR
    max_iter: int = MAX_ITER
    regularization: float = REGULARIZATION


def get_settings(**overrides) -> Settings:
    """Return the configured settings, with any non-None overrides applied."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return replace(Settings(), **values)
