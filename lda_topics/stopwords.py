"""
Stopword sets for the Text Normalizer.

Available kinds:
    - smart: The SMART information retrieval stopword list (bundled data file)
    - english: scikit-learn's built-in English stopword list
    - none: Empty set (stopword removal disabled)
"""

import logging
from functools import lru_cache
from importlib import resources
from typing import FrozenSet, Iterable, Set

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from lda_topics.errors import ConfigurationError
from lda_topics.interfaces import StopwordProvider

logger = logging.getLogger(__name__)

STOPWORD_KINDS = ("smart", "english", "none")


@lru_cache(maxsize=None)
def _load_smart() -> FrozenSet[str]:
    text = resources.files("lda_topics.data").joinpath("smart_stopwords.txt").read_text(encoding="utf-8")
    words = frozenset(line.strip() for line in text.splitlines() if line.strip())
    logger.debug(f"Loaded {len(words)} SMART stopwords")
    return words


class BuiltinStopwords(StopwordProvider):
    """
    Stopword provider backed by bundled lists.

    Args:
        extra: Additional words added to every returned set (lowercased)
    """

    def __init__(self, extra: Iterable[str] = ()):
        self._extra = {w.lower() for w in extra}

    def stopwords(self, kind: str) -> Set[str]:
        kind = kind.lower()
        if kind == "smart":
            words = set(_load_smart())
        elif kind == "english":
            words = set(ENGLISH_STOP_WORDS)
        elif kind == "none":
            words = set()
        else:
            raise ConfigurationError(
                f"Unknown stopword kind '{kind}'. Options: {', '.join(STOPWORD_KINDS)}"
            )
        return words | self._extra
