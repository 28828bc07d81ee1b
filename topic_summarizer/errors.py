from __future__ import annotations


class SummarizerError(Exception):
    """Base class for every error raised by the summarization pipeline."""


class VocabularyMismatch(SummarizerError):
    """The document shares no term at all with the embedding vocabulary."""

    def __init__(self, n_terms: int, vocabulary_size: int):
        self.n_terms = n_terms
        self.vocabulary_size = vocabulary_size
        super().__init__(
            f"none of the {n_terms} document terms appear in the "
            f"embedding vocabulary ({vocabulary_size} terms)"
        )


class MalformedEmbeddingMatrix(SummarizerError, ValueError):
    pass


class ConfigError(SummarizerError, ValueError):
    pass
