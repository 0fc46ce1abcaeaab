"""
Subpackage for model evaluation.

The `metrics` module scores a held-out test file with a trained model
and reports multiclass classification metrics.
"""

__all__ = ["metrics"]
