"""
Subpackage for supervised issue classification.

The `features` module describes the featurization stage declaratively;
the `text_classifier` module appends the classifier, fits the composed
pipeline and wraps the result in an immutable trained model.
"""

__all__ = ["features", "text_classifier"]
