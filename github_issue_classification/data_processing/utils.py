"""
General utility functions for text processing.

This module provides helper functions used by the featurization stage,
such as text normalisation and tokenisation.  They are referenced by
the fitted vectorisers, so they must stay importable at module level
for saved models to load.
"""

from __future__ import annotations

import re

from nltk.tokenize import wordpunct_tokenize


def normalise_text(text: str) -> str:
    """Lowercase and remove non‑alphanumeric characters from a string."""
    if not isinstance(text, str):
        return ""
    lower = text.lower()
    # Replace non‑alphanumeric characters with spaces
    cleaned = re.sub(r"[^a-z0-9]+", " ", lower)
    # Collapse multiple spaces and strip
    return re.sub(r"\s+", " ", cleaned).strip()


def tokenize(text: str) -> list[str]:
    """Split normalised text into word tokens."""
    return wordpunct_tokenize(text)
