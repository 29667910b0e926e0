"""
SklearnLDAEngine - TopicModelEngine backed by scikit-learn.

Design:
    - Batch variational Bayes (LatentDirichletAllocation, learning_method="batch")
    - Symmetric document-topic prior alpha (50/k + 1 unless overridden) and
      topic-word prior delta from LDAHyperparameters
    - beta is components_ normalized to rows summing to 1
    - Held-out perplexity requires the exact training vocabulary
"""

import logging

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation

from lda_topics.errors import EvaluationError, TrainingError
from lda_topics.interfaces import TopicModelEngine
from lda_topics.models import DocumentTermMatrix, TopicModelFit

logger = logging.getLogger(__name__)


class SklearnLDAEngine(TopicModelEngine):
    """
    LDA via scikit-learn's LatentDirichletAllocation.

    Args:
        n_jobs: Parallelism inside a single fit (leave at 1 when the
                cross-validation search already runs one fit per worker)
    """

    def __init__(self, n_jobs: int = 1):
        self.n_jobs = n_jobs

    def train(self, matrix: DocumentTermMatrix, k: int, hyperparameters) -> TopicModelFit:
        if k < 1:
            raise TrainingError(f"Number of topics must be positive, got {k}")
        if matrix.n_documents == 0 or matrix.n_terms == 0 or matrix.counts.nnz == 0:
            raise TrainingError(
                f"Cannot train on an empty matrix ({matrix.n_documents} docs x {matrix.n_terms} terms)"
            )

        alpha = hyperparameters.alpha_for(k)
        estimator = LatentDirichletAllocation(
            n_components=k,
            doc_topic_prior=alpha,
            topic_word_prior=hyperparameters.delta,
            learning_method="batch",
            max_iter=hyperparameters.iterations,
            evaluate_every=hyperparameters.evaluate_every,
            perp_tol=hyperparameters.perp_tol,
            random_state=hyperparameters.seed,
            n_jobs=self.n_jobs,
        )

        logger.debug(
            f"Fitting LDA: k={k}, alpha={alpha:.3f}, delta={hyperparameters.delta}, "
            f"{matrix.n_documents} docs x {matrix.n_terms} terms"
        )
        try:
            estimator.fit(matrix.counts)
        except (ValueError, FloatingPointError) as e:
            raise TrainingError(f"LDA training failed for k={k}: {e}") from e

        components = estimator.components_
        beta = components / components.sum(axis=1, keepdims=True)

        return TopicModelFit(
            k=k,
            beta=beta,
            vocabulary=matrix.vocabulary,
            estimator=estimator,
            metadata={
                "engine": "sklearn",
                "alpha": alpha,
                "delta": hyperparameters.delta,
                "n_iter": int(estimator.n_iter_),
                "burnin": hyperparameters.burnin,
                "thin": hyperparameters.thin,
                "seed": hyperparameters.seed,
            },
        )

    def perplexity(self, model: TopicModelFit, matrix: DocumentTermMatrix) -> float:
        if matrix.vocabulary != model.vocabulary or matrix.n_terms != model.beta.shape[1]:
            raise EvaluationError(
                f"Held-out vocabulary ({matrix.n_terms} terms) does not match "
                f"the model vocabulary ({model.beta.shape[1]} terms)"
            )
        if matrix.n_documents == 0 or matrix.counts.nnz == 0:
            raise EvaluationError("Held-out matrix has no documents with known terms")

        try:
            value = float(model.estimator.perplexity(matrix.counts))
        except ValueError as e:
            raise EvaluationError(f"Perplexity computation failed: {e}") from e

        if not np.isfinite(value):
            raise EvaluationError(f"Perplexity is not finite: {value}")
        return value
