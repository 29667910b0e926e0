"""
TextNormalizer - Turns raw text lines into token sequences.

Stages (fixed order, each a standalone function):
1. Lowercase
2. Replace punctuation characters with a single space
3. Remove digit runs
4. Tokenize on non-letter boundaries, dropping tokens shorter than min length
5. Remove stopwords
6. Stem to a fixed point (optional)
7. After stemming, drop stems shorter than min length or equal to a stopword

Documents that end up with zero tokens are kept out of the corpus and their
doc_id is recorded so downstream row mapping stays consistent.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from lda_topics.config import NormalizerConfig
from lda_topics.interfaces import Stemmer
from lda_topics.models import Document, NormalizedCorpus, TokenSequence

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")
# Letters only: any word character that is not a digit or underscore
_LETTER_RUN = re.compile(r"[^\W\d_]+")


def lowercase(text: str) -> str:
    return text.lower()


def replace_punctuation(text: str, punctuation: str) -> str:
    """Replace each punctuation character with a space so words are not fused."""
    if not punctuation:
        return text
    return text.translate({ord(ch): " " for ch in punctuation})


def remove_numbers(text: str) -> str:
    return _DIGITS.sub("", text)


def tokenize(text: str, min_length: int = 3) -> List[str]:
    """
    Split text on non-letter boundaries.

    Examples:
        >>> tokenize("the cat_sat on 2 mats", 3)
        ['the', 'cat', 'sat', 'mats']
    """
    return [t for t in _LETTER_RUN.findall(text) if len(t) >= min_length]


def remove_stopwords(tokens: Sequence[str], stopwords: Set[str]) -> List[str]:
    return [t for t in tokens if t not in stopwords]


def stem_tokens(tokens: Sequence[str], stemmer: Stemmer) -> List[str]:
    """
    Stem each token until the stemmer leaves it unchanged.

    Porter is not idempotent on its own output: "databases" -> "databas" ->
    "databa".
    """
    stemmed = []
    for token in tokens:
        seen = {token}
        current = stemmer.stem(token)
        while current not in seen:
            seen.add(current)
            current = stemmer.stem(current)
        stemmed.append(current)
    return stemmed


class TextNormalizer:
    """
    Deterministic per-document normalization chain.

    Args:
        config: NormalizerConfig with stage switches and parameters
        stopwords: Stopword set (already lowercased)
        stemmer: Stemmer used when config.stemming is True
    """

    def __init__(
        self,
        config: NormalizerConfig,
        stopwords: Optional[Set[str]] = None,
        stemmer: Optional[Stemmer] = None,
    ):
        self.config = config
        self.stopwords = set(stopwords or ())
        self.stemmer = stemmer

        if config.stemming and stemmer is None:
            raise ValueError("Stemming is enabled but no stemmer was provided")

        logger.info(
            f"TextNormalizer initialized: min_word_length={config.min_word_length}, "
            f"{len(self.stopwords)} stopwords, stemming={config.stemming}"
        )

    def normalize(self, text: str) -> Tuple[str, ...]:
        """Run every stage on one text string."""
        if not text:
            return ()

        if self.config.lowercase:
            text = lowercase(text)
        text = replace_punctuation(text, self.config.punctuation)
        if self.config.remove_numbers:
            text = remove_numbers(text)

        tokens = tokenize(text, self.config.min_word_length)
        tokens = remove_stopwords(tokens, self.stopwords)
        if self.config.stemming:
            tokens = stem_tokens(tokens, self.stemmer)
            tokens = [t for t in tokens if len(t) >= self.config.min_word_length]
            tokens = remove_stopwords(tokens, self.stopwords)

        return tuple(tokens)

    def normalize_corpus(self, documents: Iterable[Document]) -> NormalizedCorpus:
        """
        Normalize every document.

        Returns:
            NormalizedCorpus with non-empty sequences and the dropped doc_ids
        """
        sequences: List[TokenSequence] = []
        dropped: List[int] = []
        n_documents = 0

        for doc in documents:
            n_documents += 1
            tokens = self.normalize(doc.text)
            if tokens:
                sequences.append(TokenSequence(doc.doc_id, tokens))
            else:
                dropped.append(doc.doc_id)

        if dropped:
            logger.info(f"Dropped {len(dropped)} documents that normalized to zero tokens")
        logger.info(f"Normalized {n_documents} documents, {len(sequences)} non-empty")

        return NormalizedCorpus(sequences=sequences, dropped_ids=dropped, n_documents=n_documents)


def to_documents(lines: Iterable[str]) -> List[Document]:
    """Wrap raw lines as Documents, assigning position-based ids."""
    return [Document(doc_id=i, text=line) for i, line in enumerate(lines)]
