"""
GitHub Issue Classification Package

This package trains a multiclass text classifier that assigns an Area
label to GitHub issues from their title and description.  Modules are
organised by stage (loading, classification, evaluation, persistence,
prediction) and can be used independently or orchestrated together
through the high‑level pipeline functions.
"""

from . import config  # noqa: F401
from . import pipelines  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "config",
    "pipelines",
]
