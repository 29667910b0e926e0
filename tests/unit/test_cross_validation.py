"""
Unit tests for the cross-validation search.

FakeEngine (conftest) scores 100 + |k - best_k|, so the expected selection
is known up front and the tests exercise only the orchestration.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest


class TestAggregate:
    """Tests for aggregate()."""

    def test_mean_and_best(self):
        from lda_topics.cross_validation import aggregate
        from lda_topics.models import CandidateResult

        results = [
            CandidateResult(2, 0, 10.0), CandidateResult(2, 1, 20.0),
            CandidateResult(3, 0, 5.0), CandidateResult(3, 1, 7.0),
        ]

        best_k, means = aggregate(results)

        assert best_k == 3
        assert means == {2: 15.0, 3: 6.0}

    def test_order_independent(self):
        """Completion order does not change the aggregate."""
        from lda_topics.cross_validation import aggregate
        from lda_topics.models import CandidateResult

        results = [CandidateResult(k, f, 0.1 * k + 0.7 * f) for k in (2, 3, 4) for f in range(5)]

        assert aggregate(results) == aggregate(list(reversed(results)))

    def test_tie_prefers_smallest_k(self):
        from lda_topics.cross_validation import aggregate
        from lda_topics.models import CandidateResult

        results = [CandidateResult(10, 0, 50.0), CandidateResult(4, 0, 50.0), CandidateResult(20, 0, 60.0)]

        best_k, _ = aggregate(results)

        assert best_k == 4

    def test_empty_raises(self):
        from lda_topics.cross_validation import aggregate

        with pytest.raises(ValueError):
            aggregate([])


class TestCrossValidationSearch:
    """Tests for CrossValidationSearch.run()."""

    def _search(self, engine, cv_config, **kwargs):
        from lda_topics.config import LDAHyperparameters
        from lda_topics.cross_validation import CrossValidationSearch

        return CrossValidationSearch(engine, LDAHyperparameters(), cv_config, **kwargs)

    def test_evaluates_every_k_fold_unit(self, fake_engine, thread_cv_config, synthetic_corpus):
        """5 folds x 11 default candidates = 55 units, one selected k."""
        from lda_topics.config import DEFAULT_CANDIDATE_TOPICS

        result = self._search(fake_engine, thread_cv_config).run(synthetic_corpus)

        assert len(fake_engine.train_calls) == 55
        assert len(fake_engine.perplexity_calls) == 55
        assert len(result.results) == 55
        assert result.best_k in DEFAULT_CANDIDATE_TOPICS
        assert result.best_k == 5
        assert set(result.mean_perplexity) == set(DEFAULT_CANDIDATE_TOPICS)

    def test_results_sorted_by_k_and_fold(self, fake_engine, thread_cv_config, small_corpus):
        result = self._search(fake_engine, thread_cv_config).run(small_corpus)

        keys = [(r.k, r.fold) for r in result.results]
        assert keys == sorted(keys)

    def test_failure_aborts_search(self, thread_cv_config, small_corpus):
        """A single failed unit aborts the whole search with its error."""
        from conftest import FakeEngine
        from lda_topics.errors import TrainingError

        engine = FakeEngine(best_k=5, fail_k=30)

        with pytest.raises(TrainingError, match="k=30"):
            self._search(engine, thread_cv_config).run(small_corpus)

    def test_pool_shut_down_after_failure(self, thread_cv_config, small_corpus):
        """The executor is shut down even when a unit fails."""
        from conftest import FakeEngine
        from lda_topics.errors import TrainingError

        created = []

        def factory(max_workers):
            executor = ThreadPoolExecutor(max_workers=max_workers)
            created.append(executor)
            return executor

        engine = FakeEngine(best_k=5, fail_k=2)
        search = self._search(engine, thread_cv_config, executor_factory=factory)

        with pytest.raises(TrainingError):
            search.run(small_corpus)

        assert len(created) == 1
        with pytest.raises(RuntimeError):
            created[0].submit(print)

    def test_worker_count_from_config(self, fake_engine, thread_cv_config):
        search = self._search(fake_engine, thread_cv_config)

        assert search.workers == 4

    def test_same_seed_same_outcome(self, thread_cv_config, small_corpus):
        from conftest import FakeEngine

        first = self._search(FakeEngine(best_k=10), thread_cv_config).run(small_corpus)
        second = self._search(FakeEngine(best_k=10), thread_cv_config).run(small_corpus)

        assert first.results == second.results
        assert first.best_k == second.best_k == 10


class TestBuildTasks:
    """Tests for fold matrix construction."""

    def test_per_fold_vocabulary(self, fake_engine, thread_cv_config, small_corpus):
        """Validation matrices use their fold's training vocabulary."""
        from lda_topics.config import LDAHyperparameters
        from lda_topics.cross_validation import CrossValidationSearch
        from lda_topics.folds import assign_folds

        search = CrossValidationSearch(fake_engine, LDAHyperparameters(), thread_cv_config)
        folds = assign_folds(range(62), 5, seed=42)

        tasks = search.build_tasks(small_corpus, folds)

        assert len(tasks) == 5 * len(thread_cv_config.candidate_topics)
        for task in tasks:
            assert task.valid.vocabulary == task.train.vocabulary
            assert set(task.train.doc_ids).isdisjoint(task.valid.doc_ids)

    def test_global_vocabulary(self, fake_engine, small_corpus):
        """In global mode every fold shares the full-corpus vocabulary."""
        from lda_topics.config import CrossValidationConfig, LDAHyperparameters
        from lda_topics.cross_validation import CrossValidationSearch
        from lda_topics.folds import assign_folds
        from lda_topics.vocabulary import build_document_term_matrix

        config = CrossValidationConfig(
            n_folds=3, candidate_topics=(2, 3), executor="thread", workers=2, fold_vocabulary="global"
        )
        search = CrossValidationSearch(fake_engine, LDAHyperparameters(), config)
        global_matrix = build_document_term_matrix(small_corpus.sequences)

        tasks = search.build_tasks(small_corpus, assign_folds(range(62), 3), global_matrix)

        assert len(tasks) == 6
        for task in tasks:
            assert task.train.vocabulary == global_matrix.vocabulary
            assert task.valid.vocabulary == global_matrix.vocabulary

    def test_fold_task_carries_hyperparameters(self, fake_engine, thread_cv_config, small_corpus):
        from lda_topics.config import LDAHyperparameters
        from lda_topics.cross_validation import CrossValidationSearch
        from lda_topics.folds import assign_folds

        hyper = LDAHyperparameters(seed=7)
        search = CrossValidationSearch(fake_engine, hyper, thread_cv_config)

        tasks = search.build_tasks(small_corpus, assign_folds(range(62), 5))

        assert all(t.hyperparameters is hyper for t in tasks)
