"""
Declarative feature pipeline for issue text.

Nothing in this module touches data.  `build_feature_pipeline` returns
an unfitted description of the featurization stage: a label encoder for
the Area column, one text featurizer per free-text column, the
concatenation of their outputs, and an optional caching checkpoint.
Fitting happens later, in the trainer.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from joblib import Memory
from sklearn.compose import ColumnTransformer
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.pipeline import FeatureUnion, Pipeline
from sklearn.preprocessing import LabelEncoder, Normalizer

from ..config import Settings
from ..data_loading.loader import ISSUE_SCHEMA, Schema
from ..data_processing.utils import normalise_text, tokenize


@dataclass(frozen=True)
class FeaturePipeline:
    """Unfitted label encoding plus feature transforms for one schema."""
    schema: Schema
    label_encoder: LabelEncoder
    features: Pipeline

    @property
    def label_column(self) -> str:
        return self.schema.label_column

    @property
    def feature_columns(self) -> list[str]:
        return self.schema.feature_columns


def text_featurizer() -> Pipeline:
    """Return a text-to-vector transform combining word and character n-grams.

    Word unigrams and bigrams are taken from normalised text, character
    trigrams from the raw lowercased text.  The concatenated vector is
    L2-normalised.
    """
    ngrams = FeatureUnion(
        [
            (
                "words",
                TfidfVectorizer(
                    preprocessor=normalise_text,
                    tokenizer=tokenize,
                    token_pattern=None,
                    ngram_range=(1, 2),
                    sublinear_tf=True,
                ),
            ),
            (
                "chars",
                TfidfVectorizer(
                    analyzer="char_wb",
                    ngram_range=(3, 3),
                    lowercase=True,
                    sublinear_tf=True,
                ),
            ),
        ]
    )
    return Pipeline([("ngrams", ngrams), ("normalize", Normalizer(norm="l2"))])


def build_feature_pipeline(
    schema: Schema = ISSUE_SCHEMA,
    settings: Optional[Settings] = None,
) -> FeaturePipeline:
    """Describe the featurization stage for `schema`.

    Each feature column gets its own featurizer named
    ``<column>Featurized``; the `ColumnTransformer` stacks their outputs
    side by side into a single feature matrix.  When the settings name a
    cache directory, fitted transforms are memoised there so repeated
    fits over the same data skip featurization.
    """
    cache_dir: Optional[Path] = settings.cache_dir if settings is not None else None

    concatenate = ColumnTransformer(
        [(f"{column}Featurized", text_featurizer(), column) for column in schema.feature_columns],
        remainder="drop",
    )
    memory = Memory(location=str(cache_dir), verbose=0) if cache_dir else None
    features = Pipeline([("features", concatenate)], memory=memory)

    return FeaturePipeline(
        schema=schema,
        label_encoder=LabelEncoder(),
        features=features,
    )
