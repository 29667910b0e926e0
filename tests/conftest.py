"""
Pytest configuration and shared fixtures for the LDA topic pipeline tests.

FakeEngine stands in for the real LDA backend wherever a test is about
orchestration (cross-validation, pipeline wiring) rather than inference.
"""

import threading
from typing import List

import numpy as np
import pytest


# =============================================================================
# Test Helpers
# =============================================================================

SYNTHETIC_TERMS = [
    "market", "revenue", "growth", "profit", "cloud",
    "network", "server", "storage", "supply", "chain",
]


def make_sequences(n_docs: int, tokens_per_doc: int = 6):
    """
    Deterministic token sequences cycling through SYNTHETIC_TERMS.

    Every term lands in a large share of documents, so nothing is pruned at
    the default sparsity and every validation fold has known terms.
    """
    from lda_topics.models import TokenSequence

    sequences = []
    for doc_id in range(n_docs):
        tokens = tuple(
            SYNTHETIC_TERMS[(doc_id + j * 3) % len(SYNTHETIC_TERMS)]
            for j in range(tokens_per_doc)
        )
        sequences.append(TokenSequence(doc_id, tokens))
    return sequences


class FakeEngine:
    """
    Deterministic TopicModelEngine.

    Perplexity is 100 + |k - best_k|, so the search should always select
    best_k. Calls are recorded (thread-safe) so tests can count units.
    """

    def __init__(self, best_k: int = 5, fail_k=None):
        self.best_k = best_k
        self.fail_k = fail_k
        self.train_calls: List[tuple] = []
        self.perplexity_calls: List[tuple] = []
        self._lock = threading.Lock()

    def train(self, matrix, k, hyperparameters):
        from lda_topics.errors import TrainingError
        from lda_topics.models import TopicModelFit

        with self._lock:
            self.train_calls.append((k, matrix.n_documents))
        if self.fail_k is not None and k == self.fail_k:
            raise TrainingError(f"Injected failure for k={k}")

        totals = np.asarray(matrix.counts.sum(axis=0)).ravel().astype(float) + 1.0
        weights = totals / totals.sum()
        beta = np.vstack([np.roll(weights, t) for t in range(k)])
        return TopicModelFit(k=k, beta=beta, vocabulary=matrix.vocabulary, metadata={"engine": "fake"})

    def perplexity(self, model, matrix):
        with self._lock:
            self.perplexity_calls.append((model.k, matrix.n_documents))
        return 100.0 + abs(model.k - self.best_k)


def _register_fake_engine():
    from lda_topics.interfaces import TopicModelEngine

    TopicModelEngine.register(FakeEngine)


_register_fake_engine()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def scenario_lines() -> List[str]:
    """Three tiny documents over the terms cat, dog, bird and fish."""
    return ["cat dog bird", "dog bird fish", "fish cat bird"]


@pytest.fixture
def synthetic_corpus():
    """NormalizedCorpus of 500 synthetic documents."""
    from lda_topics.models import NormalizedCorpus

    sequences = make_sequences(500)
    return NormalizedCorpus(sequences=sequences, dropped_ids=[], n_documents=500)


@pytest.fixture
def small_corpus():
    """NormalizedCorpus of 60 synthetic documents plus two dropped ids."""
    from lda_topics.models import NormalizedCorpus

    sequences = make_sequences(60)
    return NormalizedCorpus(sequences=sequences, dropped_ids=[60, 61], n_documents=62)


@pytest.fixture
def fake_engine():
    return FakeEngine(best_k=5)


@pytest.fixture
def fast_hyperparameters():
    """LDA settings small enough for real sklearn fits in tests."""
    from lda_topics.config import LDAHyperparameters

    return LDAHyperparameters(iterations=30, evaluate_every=-1)


@pytest.fixture
def thread_cv_config():
    """5-fold cross-validation on a thread pool (FakeEngine is not picklable)."""
    from lda_topics.config import CrossValidationConfig

    return CrossValidationConfig(n_folds=5, executor="thread", workers=4)


@pytest.fixture
def no_stemming_config():
    from lda_topics.config import NormalizerConfig

    return NormalizerConfig(stemming=False)


@pytest.fixture
def temp_text_file(tmp_path):
    """Factory writing lines to a text file and returning its path."""

    def _write(lines, name="input.csv"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def dictionary_file(tmp_path):
    """Word list for stem completion; 'running' appears twice."""
    path = tmp_path / "words.dic"
    path.write_text(
        "\n".join(["run", "running", "runner", "running", "compute", "computer", "computing"]) + "\n",
        encoding="utf-8",
    )
    return str(path)
