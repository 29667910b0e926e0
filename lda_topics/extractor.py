"""
TopicTermExtractor - Builds the final (topic, term, weight) table.

Per topic, the top-N terms by descending weight are emitted. Equal weights
keep the engine's term order (stable sort). Topics are labelled "Topic1",
"Topic2", ... and terms optionally pass through stem completion.

Example output:
    topic  |  term  |  weight
    Topic1 |   foo  |    0.12
    Topic1 |   bar  |    0.03
    Topic2 |   jaz  |    0.4
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from lda_topics.completion import StemCompleter
from lda_topics.models import ResultRow, TopicDescription, TopicModelFit, Vocabulary

logger = logging.getLogger(__name__)


def topic_label(topic_index: int) -> str:
    """Label for a zero-based topic index."""
    return f"Topic{topic_index + 1}"


class TopicTermExtractor:
    """
    Args:
        n_terms: Terms per topic
        completer: Optional StemCompleter for stemmed vocabularies
    """

    def __init__(self, n_terms: int = 3, completer: Optional[StemCompleter] = None):
        self.n_terms = n_terms
        self.completer = completer

    def _surface(self, term: str) -> str:
        if self.completer is None:
            return term
        return self.completer.complete(term)

    def extract(self, model: TopicModelFit) -> List[ResultRow]:
        """Top terms per topic from the model's beta matrix."""
        rows: List[ResultRow] = []
        for topic in range(model.beta.shape[0]):
            weights = model.beta[topic]
            order = np.argsort(-weights, kind="stable")[: self.n_terms]
            for idx in order:
                term = model.vocabulary.term_at(int(idx))
                rows.append(ResultRow(topic_label(topic), self._surface(term), float(weights[idx])))

        logger.info(f"Extracted {len(rows)} rows for {model.beta.shape[0]} topics")
        return rows

    def extract_descriptions(
        self,
        descriptions: Sequence[TopicDescription],
        vocabulary: Vocabulary,
    ) -> List[ResultRow]:
        """
        Top terms from externally described topics (term indices + weights).

        Descriptions are emitted in topic order; topic indices are zero-based.
        """
        rows: List[ResultRow] = []
        for desc in sorted(descriptions, key=lambda d: d.topic):
            weights = np.asarray(desc.term_weights, dtype=float)
            order = np.argsort(-weights, kind="stable")[: self.n_terms]
            for pos in order:
                term = vocabulary.term_at(int(desc.term_indices[pos]))
                rows.append(ResultRow(topic_label(desc.topic), self._surface(term), float(weights[pos])))
        return rows
