"""
Exception classes for the LDA topic pipeline.

Every fatal condition raised by the pipeline derives from LDATopicsError so the
CLI can abort a run with a single handler. CompletionMiss is local and
recoverable, so it derives from Exception directly and never leaves the stem
completion layer.
"""


class LDATopicsError(Exception):
    """Base exception for pipeline errors."""
    pass


class ConfigurationError(LDATopicsError):
    """Raised when run parameters are invalid (checked before any work starts)."""
    pass


class DataError(LDATopicsError):
    """Raised when the corpus has no usable documents or the vocabulary is empty."""
    pass


class TrainingError(LDATopicsError):
    """Raised by a TopicModelEngine when a model cannot be fit."""
    pass


class EvaluationError(LDATopicsError):
    """Raised by a TopicModelEngine when held-out perplexity cannot be computed."""
    pass


class CompletionMiss(Exception):
    """Raised when no dictionary word completes a stem."""

    def __init__(self, stem: str):
        self.stem = stem
        super().__init__(f"No completion found for stem '{stem}'")
