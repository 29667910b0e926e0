"""
Abstract interfaces for the LDA topic pipeline.

These interfaces enable:
    - InputProvider: Swappable text sources (local file, S3)
    - TopicModelEngine: Swappable LDA inference backends
    - Stemmer: Swappable, language-specific stemming
    - StopwordProvider / DictionaryProvider: Swappable word lists

Design Philosophy:
    - Clean contracts that hide implementation complexity
    - Dependency injection for testing and flexibility
    - Engines must be picklable: cross-validation ships them to worker processes
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from lda_topics.models import DocumentTermMatrix, TopicModelFit


class InputProvider(ABC):
    """
    Abstract interface for raw text sources.

    Implementations:
        - LocalTextConnector: Reads a local file
        - S3TextConnector: Reads an object from an S3 bucket
    """

    @abstractmethod
    def read(self, source: str) -> List[str]:
        """
        Read raw text records from a source.

        Args:
            source: Location of the input (path or s3:// URL)

        Returns:
            List of text lines; never contains None or blank entries
        """
        pass

    def close(self) -> None:
        """
        Clean up resources.

        Default implementation is a no-op.
        """
        pass


class TopicModelEngine(ABC):
    """
    Abstract interface for LDA inference.

    Contract: fit a model with k topics on a document-term matrix, and score
    a held-out matrix built over the same vocabulary.

    Implementations:
        - SklearnLDAEngine: scikit-learn LatentDirichletAllocation
    """

    @abstractmethod
    def train(self, matrix: DocumentTermMatrix, k: int, hyperparameters) -> TopicModelFit:
        """
        Fit a topic model.

        Args:
            matrix: Training document-term matrix
            k: Number of topics
            hyperparameters: LDAHyperparameters for this fit

        Returns:
            TopicModelFit with beta of shape (k, matrix.n_terms)

        Raises:
            TrainingError: On degenerate or empty input
        """
        pass

    @abstractmethod
    def perplexity(self, model: TopicModelFit, matrix: DocumentTermMatrix) -> float:
        """
        Compute perplexity of a held-out matrix under a fitted model.

        Raises:
            EvaluationError: If the matrix vocabulary does not match the model's
        """
        pass


class Stemmer(ABC):
    """Reduces a token to its stem. Must be deterministic."""

    @abstractmethod
    def stem(self, token: str) -> str:
        pass


class StopwordProvider(ABC):
    """Supplies stopword sets by name."""

    @abstractmethod
    def stopwords(self, kind: str) -> Set[str]:
        pass


class DictionaryProvider(ABC):
    """Looks up a representative whole word for a stem."""

    @abstractmethod
    def lookup(self, stem: str) -> Optional[str]:
        """
        Return a dictionary word completing `stem`, or None if there is none.
        """
        pass
