"""
Data models for the LDA topic pipeline.

These dataclasses define the contract between pipeline components.

Design Philosophy:
    - Text lines in -> (topic, term, weight) rows out
    - Documents keep their input position as doc_id for the whole run, so
      rows dropped by normalization or pruning can always be traced back
    - Matrices carry their own vocabulary; a matrix never borrows column
      meaning from somewhere else
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse


@dataclass(frozen=True)
class Document:
    """
    Single input text line.

    Attributes:
        doc_id: Zero-based position of the line in the input
        text: Raw, unprocessed text
    """

    doc_id: int
    text: str


@dataclass(frozen=True)
class TokenSequence:
    """Normalized tokens for one document, in original order."""

    doc_id: int
    tokens: Tuple[str, ...]


@dataclass
class NormalizedCorpus:
    """
    Output of the TextNormalizer for a whole corpus.

    Attributes:
        sequences: Non-empty token sequences, in input order
        dropped_ids: doc_ids of documents that normalized to zero tokens
        n_documents: Number of documents read from the input
    """

    sequences: List[TokenSequence]
    dropped_ids: List[int] = field(default_factory=list)
    n_documents: int = 0

    @property
    def doc_ids(self) -> List[int]:
        return [s.doc_id for s in self.sequences]

    def subset(self, doc_ids: Sequence[int]) -> List[TokenSequence]:
        """Return the sequences whose doc_id is in doc_ids, keeping corpus order."""
        wanted = set(int(i) for i in doc_ids)
        return [s for s in self.sequences if s.doc_id in wanted]


@dataclass(frozen=True)
class Vocabulary:
    """
    Term <-> column index mapping.

    Index i is the position of the term in `terms`, so indices are always
    dense (0..|V|-1) and unique.
    """

    terms: Tuple[str, ...]

    def __post_init__(self):
        if len(set(self.terms)) != len(self.terms):
            raise ValueError("Vocabulary terms must be unique")
        object.__setattr__(self, "_index", {t: i for i, t in enumerate(self.terms)})

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: str) -> bool:
        return term in self._index

    def index_of(self, term: str) -> int:
        return self._index[term]

    def term_at(self, index: int) -> str:
        return self.terms[index]


@dataclass
class DocumentTermMatrix:
    """
    Sparse document-term count matrix.

    Attributes:
        counts: CSR matrix of shape (len(doc_ids), len(vocabulary))
        vocabulary: Column meaning
        doc_ids: doc_id of each row
        dropped_ids: doc_ids that were given to the builder but have no row
    """

    counts: sparse.csr_matrix
    vocabulary: Vocabulary
    doc_ids: Tuple[int, ...]
    dropped_ids: Tuple[int, ...] = ()

    @property
    def n_documents(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    def select(self, doc_ids: Sequence[int]) -> "DocumentTermMatrix":
        """
        Row subset sharing this matrix's vocabulary.

        Requested doc_ids without a row here are reported as dropped. Rows
        keep the order they have in this matrix.
        """
        wanted = set(int(i) for i in doc_ids)
        rows = [r for r, d in enumerate(self.doc_ids) if d in wanted]
        kept = tuple(self.doc_ids[r] for r in rows)
        missing = tuple(sorted(wanted - set(kept)))
        return DocumentTermMatrix(
            counts=self.counts[np.asarray(rows, dtype=np.intp), :].tocsr(),
            vocabulary=self.vocabulary,
            doc_ids=kept,
            dropped_ids=missing,
        )


@dataclass
class FoldAssignment:
    """
    Fold label per document for cross-validation.

    Attributes:
        doc_ids: Documents that were assigned, in input order
        labels: Fold label in [0, n_folds) for each doc_id
        n_folds: Number of folds
    """

    doc_ids: np.ndarray
    labels: np.ndarray
    n_folds: int

    def fold_sizes(self) -> Dict[int, int]:
        return {i: int((self.labels == i).sum()) for i in range(self.n_folds)}

    def split(self, fold: int) -> Tuple[List[int], List[int]]:
        """Return (train_ids, valid_ids): train is every doc not labelled `fold`."""
        mask = self.labels == fold
        return self.doc_ids[~mask].tolist(), self.doc_ids[mask].tolist()


@dataclass(frozen=True)
class CandidateResult:
    """Held-out perplexity for one (topic count, fold) unit of work."""

    k: int
    fold: int
    perplexity: float


@dataclass
class SearchResult:
    """
    Outcome of the cross-validation search.

    Attributes:
        best_k: Candidate topic count with the lowest mean perplexity
        results: Every (k, fold) result, sorted by (k, fold)
        mean_perplexity: Mean perplexity per candidate k
    """

    best_k: int
    results: List[CandidateResult]
    mean_perplexity: Dict[int, float]


@dataclass
class TopicModelFit:
    """
    Fitted topic model returned by a TopicModelEngine.

    Attributes:
        k: Number of topics
        beta: Topic-term weights, shape (k, len(vocabulary)); rows sum to 1
        vocabulary: Vocabulary of the training matrix
        estimator: Engine-specific fitted object (opaque to the pipeline)
        metadata: Engine-specific debugging/audit info
    """

    k: int
    beta: np.ndarray
    vocabulary: Vocabulary
    estimator: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TopicDescription:
    """
    Externally supplied top terms for one topic (as returned by Spark's
    describeTopics): term column indices with their weights.
    """

    topic: int
    term_indices: Tuple[int, ...]
    term_weights: Tuple[float, ...]


@dataclass(frozen=True)
class ResultRow:
    """One row of the final table."""

    topic: str
    term: str
    weight: float


@dataclass
class RunResult:
    """
    Everything a pipeline run produces.

    Attributes:
        rows: Final (topic, term, weight) table
        k: Topic count used for the final model
        search: Cross-validation outcome, None if CV was skipped
        n_documents: Documents read from the input
        dropped_ids: Documents without a row in the final matrix
    """

    rows: List[ResultRow]
    k: int
    search: Optional[SearchResult] = None
    n_documents: int = 0
    dropped_ids: List[int] = field(default_factory=list)
