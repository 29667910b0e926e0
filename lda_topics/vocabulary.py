"""
Vocabulary & document-term matrix construction.

Design:
    - Vocabulary indices are assigned in first-seen order across the corpus
    - Sparse terms are pruned with the removeSparseTerms rule: a term is dropped
      when the fraction of documents lacking it, (n_docs - df) / n_docs, is
      >= sparsity. The ratio is computed directly so thresholds such as 0.9
      are not shifted by rounding in 1 - sparsity
    - Surviving terms are re-indexed densely, still in first-seen order
    - Rows emptied by pruning are dropped and their doc_ids recorded
"""

import logging
from collections import Counter
from typing import Dict, List, Sequence

import numpy as np
from scipy import sparse

from lda_topics.errors import DataError
from lda_topics.models import DocumentTermMatrix, TokenSequence, Vocabulary

logger = logging.getLogger(__name__)


def build_document_term_matrix(
    sequences: Sequence[TokenSequence],
    sparsity: float = 0.95,
) -> DocumentTermMatrix:
    """
    Build vocabulary and count matrix from token sequences, then prune sparse terms.

    Args:
        sequences: Non-empty token sequences
        sparsity: Pruning threshold in (0, 1)

    Returns:
        DocumentTermMatrix whose vocabulary only holds surviving terms

    Raises:
        DataError: If there are no sequences or the vocabulary is empty after pruning
    """
    if not sequences:
        raise DataError("No documents to build a document-term matrix from")

    first_seen: Dict[str, int] = {}
    doc_freq: Counter = Counter()
    row_counts: List[Counter] = []

    for seq in sequences:
        counts = Counter(seq.tokens)
        row_counts.append(counts)
        for term in seq.tokens:
            if term not in first_seen:
                first_seen[term] = len(first_seen)
        doc_freq.update(counts.keys())

    n_docs = len(sequences)
    kept_terms = [t for t in first_seen if (n_docs - doc_freq[t]) / n_docs < sparsity]

    logger.info(
        f"Vocabulary: {len(first_seen)} terms, {len(kept_terms)} kept after "
        f"sparsity pruning at {sparsity} ({n_docs} documents)"
    )

    if not kept_terms:
        raise DataError(
            f"Vocabulary is empty after pruning with sparsity={sparsity}; "
            f"every term is missing from a fraction >= {sparsity} of the {n_docs} documents"
        )

    vocabulary = Vocabulary(tuple(kept_terms))
    return _assemble(sequences, row_counts, vocabulary)


def project_onto_vocabulary(
    sequences: Sequence[TokenSequence],
    vocabulary: Vocabulary,
) -> DocumentTermMatrix:
    """
    Build a count matrix whose columns are a fixed vocabulary.

    Terms outside the vocabulary are ignored; documents with no known term
    are dropped and reported in dropped_ids.
    """
    row_counts = [Counter(seq.tokens) for seq in sequences]
    return _assemble(sequences, row_counts, vocabulary)


def _assemble(
    sequences: Sequence[TokenSequence],
    row_counts: Sequence[Counter],
    vocabulary: Vocabulary,
) -> DocumentTermMatrix:
    rows: List[int] = []
    cols: List[int] = []
    values: List[int] = []
    doc_ids: List[int] = []
    dropped: List[int] = []

    for seq, counts in zip(sequences, row_counts):
        entries = [(vocabulary.index_of(t), c) for t, c in counts.items() if t in vocabulary]
        if not entries:
            dropped.append(seq.doc_id)
            continue
        row = len(doc_ids)
        doc_ids.append(seq.doc_id)
        for col, count in entries:
            rows.append(row)
            cols.append(col)
            values.append(count)

    counts_matrix = sparse.csr_matrix(
        (np.asarray(values, dtype=np.int64), (rows, cols)),
        shape=(len(doc_ids), len(vocabulary)),
    )

    if dropped:
        logger.debug(f"{len(dropped)} documents have no terms in the vocabulary")

    return DocumentTermMatrix(
        counts=counts_matrix,
        vocabulary=vocabulary,
        doc_ids=tuple(doc_ids),
        dropped_ids=tuple(dropped),
    )
