"""
CrossValidationSearch - Select the number of topics by held-out perplexity.

For every candidate k and every fold i:
    train = documents not labelled i, valid = documents labelled i
    fit LDA(k) on train, score perplexity on valid
then average perplexity per k and keep the k with the lowest mean (smallest k
wins ties).

Design:
    - Fold matrices are built once in the parent; each (k, fold) pair becomes a
      self-contained FoldTask so workers share no state
    - Tasks run over the full k x fold product on a fixed-size pool
    - Any failed unit aborts the search; a missing point would bias the mean
    - The pool is shut down whether the sweep succeeds or fails
"""

import logging
import os
from concurrent.futures import FIRST_EXCEPTION, Executor, ProcessPoolExecutor, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from lda_topics.config import CrossValidationConfig, LDAHyperparameters
from lda_topics.errors import EvaluationError
from lda_topics.folds import assign_folds
from lda_topics.interfaces import TopicModelEngine
from lda_topics.models import (
    CandidateResult,
    DocumentTermMatrix,
    FoldAssignment,
    NormalizedCorpus,
    SearchResult,
)
from lda_topics.vocabulary import build_document_term_matrix, project_onto_vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoldTask:
    """Everything one worker needs to score one (k, fold) pair."""

    k: int
    fold: int
    train: DocumentTermMatrix
    valid: DocumentTermMatrix
    hyperparameters: LDAHyperparameters


def evaluate_fold(engine: TopicModelEngine, task: FoldTask) -> CandidateResult:
    """Train on the task's training split and score its validation split."""
    model = engine.train(task.train, task.k, task.hyperparameters)
    value = engine.perplexity(model, task.valid)
    logger.info(f"k={task.k} fold={task.fold}: perplexity={value:.3f}")
    return CandidateResult(k=task.k, fold=task.fold, perplexity=value)


def aggregate(results: Iterable[CandidateResult]) -> Tuple[int, Dict[int, float]]:
    """
    Mean perplexity per k and the best k.

    Results are ordered by (k, fold) before summing so the outcome does not
    depend on completion order.

    Returns:
        (best_k, {k: mean_perplexity})
    """
    ordered = sorted(results, key=lambda r: (r.k, r.fold))
    if not ordered:
        raise ValueError("No cross-validation results to aggregate")

    grouped: Dict[int, List[float]] = {}
    for r in ordered:
        grouped.setdefault(r.k, []).append(r.perplexity)

    means = {k: sum(values) / len(values) for k, values in grouped.items()}
    best_k = min(means, key=lambda k: (means[k], k))
    return best_k, means


class CrossValidationSearch:
    """
    Parallel k x fold perplexity search.

    Args:
        engine: TopicModelEngine (must be picklable for the process executor)
        hyperparameters: LDAHyperparameters shared by all fits
        config: CrossValidationConfig (folds, candidates, workers, executor)
        sparsity: Sparsity threshold for per-fold matrices
        executor_factory: Optional callable(max_workers) -> Executor, overrides config.executor
    """

    def __init__(
        self,
        engine: TopicModelEngine,
        hyperparameters: LDAHyperparameters,
        config: CrossValidationConfig,
        sparsity: float = 0.95,
        executor_factory: Optional[Callable[[int], Executor]] = None,
    ):
        self.engine = engine
        self.hyperparameters = hyperparameters
        self.config = config
        self.sparsity = sparsity
        self.workers = config.workers or os.cpu_count() or 1
        self._executor_factory = executor_factory or self._default_executor_factory

    def _default_executor_factory(self, max_workers: int) -> Executor:
        if self.config.executor == "thread":
            return ThreadPoolExecutor(max_workers=max_workers)
        return ProcessPoolExecutor(max_workers=max_workers)

    def build_tasks(
        self,
        corpus: NormalizedCorpus,
        folds: FoldAssignment,
        global_matrix: Optional[DocumentTermMatrix] = None,
    ) -> List[FoldTask]:
        """
        Build one FoldTask per (candidate k, fold).

        In "per_fold" mode each fold's training vocabulary comes from its
        training split only; in "global" mode rows of the full-corpus matrix
        are sliced.
        """
        fold_matrices = []
        for fold in range(folds.n_folds):
            train_ids, valid_ids = folds.split(fold)
            if self.config.fold_vocabulary == "global":
                if global_matrix is None:
                    global_matrix = build_document_term_matrix(corpus.sequences, self.sparsity)
                train = global_matrix.select(train_ids)
                valid = global_matrix.select(valid_ids)
            else:
                train = build_document_term_matrix(corpus.subset(train_ids), self.sparsity)
                valid = project_onto_vocabulary(corpus.subset(valid_ids), train.vocabulary)

            if valid.n_documents == 0:
                raise EvaluationError(
                    f"Fold {fold} has no validation documents with terms in the training vocabulary"
                )
            logger.debug(
                f"Fold {fold}: train {train.n_documents}x{train.n_terms}, "
                f"valid {valid.n_documents}x{valid.n_terms}"
            )
            fold_matrices.append((train, valid))

        return [
            FoldTask(k=k, fold=fold, train=train, valid=valid, hyperparameters=self.hyperparameters)
            for k in self.config.candidate_topics
            for fold, (train, valid) in enumerate(fold_matrices)
        ]

    def run(
        self,
        corpus: NormalizedCorpus,
        global_matrix: Optional[DocumentTermMatrix] = None,
    ) -> SearchResult:
        """
        Execute the full search and return the selected k.

        Raises:
            TrainingError / EvaluationError: If any unit fails
        """
        all_ids = [s.doc_id for s in corpus.sequences] + list(corpus.dropped_ids)
        folds = assign_folds(sorted(all_ids), self.config.n_folds, seed=self.config.seed)
        tasks = self.build_tasks(corpus, folds, global_matrix)

        logger.info(
            f"Cross-validation: {len(self.config.candidate_topics)} candidates x "
            f"{folds.n_folds} folds = {len(tasks)} units on {self.workers} workers"
        )

        results = self._execute(tasks)
        best_k, means = aggregate(results)

        for k in sorted(means):
            logger.info(f"k={k}: mean perplexity {means[k]:.3f}")
        logger.info(f"Selected k={best_k}")

        return SearchResult(
            best_k=best_k,
            results=sorted(results, key=lambda r: (r.k, r.fold)),
            mean_perplexity=means,
        )

    def _execute(self, tasks: List[FoldTask]) -> List[CandidateResult]:
        results: List[CandidateResult] = []
        with self._executor_factory(self.workers) as executor:
            futures = [executor.submit(evaluate_fold, self.engine, task) for task in tasks]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                if future.exception() is not None:
                    for p in pending:
                        p.cancel()
                    raise future.exception()
                results.append(future.result())

        return results
