"""
Fold assignment for cross-validation.

Each document independently draws a fold label uniformly from [0, K). Folds
are therefore not guaranteed to be equal in size (or non-empty).
"""

import logging
from typing import Sequence

import numpy as np

from lda_topics.errors import ConfigurationError
from lda_topics.models import FoldAssignment

logger = logging.getLogger(__name__)


def cross_validation_enabled(n_folds: int) -> bool:
    """Cross-validation needs at least 3 folds; anything less means a fixed k."""
    return n_folds > 2


def assign_folds(doc_ids: Sequence[int], n_folds: int, seed: int = 42) -> FoldAssignment:
    """
    Assign each document a uniform random fold label.

    Args:
        doc_ids: Documents to assign
        n_folds: Number of folds (must be > 2)
        seed: RNG seed; the same seed gives the same labels

    Raises:
        ConfigurationError: If n_folds does not enable cross-validation
    """
    if not cross_validation_enabled(n_folds):
        raise ConfigurationError(f"Fold assignment needs more than 2 folds, got {n_folds}")

    rng = np.random.default_rng(seed)
    ids = np.asarray(list(doc_ids), dtype=np.int64)
    labels = rng.integers(0, n_folds, size=len(ids))

    assignment = FoldAssignment(doc_ids=ids, labels=labels, n_folds=n_folds)
    logger.info(f"Assigned {len(ids)} documents to {n_folds} folds: {assignment.fold_sizes()}")
    return assignment
