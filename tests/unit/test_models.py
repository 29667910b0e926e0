"""
Unit tests for data models and the exception hierarchy.
"""

import numpy as np
import pytest


class TestNormalizedCorpus:
    """Tests for NormalizedCorpus."""

    def test_subset_keeps_corpus_order(self):
        from lda_topics.models import NormalizedCorpus, TokenSequence

        corpus = NormalizedCorpus(
            sequences=[TokenSequence(i, ("tok",)) for i in range(5)],
            n_documents=5,
        )

        subset = corpus.subset([4, 1, 99])

        assert [s.doc_id for s in subset] == [1, 4]
        assert corpus.doc_ids == [0, 1, 2, 3, 4]


class TestFoldAssignment:
    """Tests for FoldAssignment."""

    def test_split_and_sizes(self):
        from lda_topics.models import FoldAssignment

        folds = FoldAssignment(
            doc_ids=np.array([10, 11, 12, 13]),
            labels=np.array([0, 2, 0, 1]),
            n_folds=3,
        )

        assert folds.split(0) == ([11, 13], [10, 12])
        assert folds.fold_sizes() == {0: 2, 1: 1, 2: 1}

    def test_empty_fold_allowed(self):
        """Uniform sampling can leave a fold empty; sizes still list it."""
        from lda_topics.models import FoldAssignment

        folds = FoldAssignment(doc_ids=np.array([0, 1]), labels=np.array([0, 0]), n_folds=3)

        assert folds.fold_sizes()[2] == 0
        assert folds.split(2) == ([0, 1], [])


class TestErrors:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "name", ["ConfigurationError", "DataError", "TrainingError", "EvaluationError"]
    )
    def test_fatal_errors_share_base(self, name):
        import lda_topics.errors as errors

        assert issubclass(getattr(errors, name), errors.LDATopicsError)

    def test_completion_miss_keeps_stem(self):
        from lda_topics.errors import CompletionMiss

        err = CompletionMiss("quickli")

        assert err.stem == "quickli"
        assert "quickli" in str(err)

    def test_completion_miss_is_not_fatal(self):
        """A completion miss is recovered locally, outside the fatal hierarchy."""
        from lda_topics.errors import CompletionMiss, LDATopicsError

        assert issubclass(CompletionMiss, Exception)
        assert not issubclass(CompletionMiss, LDATopicsError)
