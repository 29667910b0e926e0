"""
ModelTrainer - Fits the final topic model on the full corpus.

A single blocking engine call with fixed hyperparameters. Failures propagate
unchanged; there are no retries.
"""

import logging
import time

from lda_topics.config import LDAHyperparameters
from lda_topics.interfaces import TopicModelEngine
from lda_topics.models import DocumentTermMatrix, TopicModelFit

logger = logging.getLogger(__name__)


class ModelTrainer:
    """
    Args:
        engine: Injected TopicModelEngine implementation
        hyperparameters: Fixed LDAHyperparameters for the final fit
    """

    def __init__(self, engine: TopicModelEngine, hyperparameters: LDAHyperparameters):
        self.engine = engine
        self.hyperparameters = hyperparameters

    def train(self, matrix: DocumentTermMatrix, k: int) -> TopicModelFit:
        logger.info(
            f"Training final model: k={k}, alpha={self.hyperparameters.alpha_for(k):.3f}, "
            f"{matrix.n_documents} docs x {matrix.n_terms} terms"
        )
        t_start = time.perf_counter()
        model = self.engine.train(matrix, k, self.hyperparameters)
        logger.info(f"Final model trained in {time.perf_counter() - t_start:.1f}s")
        return model
