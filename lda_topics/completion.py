"""
Stem completion - maps word stems back to readable dictionary words.

A dictionary word completes a stem when it starts with the stem. Among the
candidates one is chosen by strategy:
    - prevalent: most frequent word in the dictionary (ties: alphabetical)
    - first: first candidate in dictionary order
    - shortest / longest: by length (ties: dictionary order)

A miss is never an error for the caller: StemCompleter returns the stem.
"""

import bisect
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Union

from lda_topics.errors import CompletionMiss, ConfigurationError
from lda_topics.interfaces import DictionaryProvider

logger = logging.getLogger(__name__)


class WordListDictionary(DictionaryProvider):
    """
    Dictionary backed by an in-memory word list.

    Args:
        words: Dictionary words; repeats count towards prevalence
        completion_type: prevalent | first | shortest | longest
    """

    def __init__(self, words: Iterable[str], completion_type: str = "prevalent"):
        if completion_type not in ("prevalent", "first", "shortest", "longest"):
            raise ConfigurationError(f"Unknown completion type '{completion_type}'")
        self.completion_type = completion_type

        self._ordered: List[str] = []
        self._frequency: Counter = Counter()
        for word in words:
            word = word.strip().lower()
            if not word:
                continue
            if word not in self._frequency:
                self._ordered.append(word)
            self._frequency[word] += 1

        self._sorted = sorted(self._ordered)
        self._position = {w: i for i, w in enumerate(self._ordered)}

    @classmethod
    def from_file(cls, path: Union[str, Path], completion_type: str = "prevalent") -> "WordListDictionary":
        """Load a dictionary with one word per line."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Dictionary file not found: {path}")
        with open(path, encoding="utf-8") as f:
            dictionary = cls(f, completion_type=completion_type)
        logger.info(f"Loaded {len(dictionary)} dictionary words from {path}")
        return dictionary

    def __len__(self) -> int:
        return len(self._ordered)

    def _candidates(self, stem: str) -> List[str]:
        start = bisect.bisect_left(self._sorted, stem)
        matches = []
        for word in self._sorted[start:]:
            if not word.startswith(stem):
                break
            matches.append(word)
        return matches

    def lookup(self, stem: str) -> Optional[str]:
        if not stem:
            return None
        candidates = self._candidates(stem.lower())
        if not candidates:
            return None

        if self.completion_type == "prevalent":
            # candidates are alphabetical, so max() keeps the first on ties
            return max(candidates, key=lambda w: self._frequency[w])

        by_position = sorted(candidates, key=lambda w: self._position[w])
        if self.completion_type == "first":
            return by_position[0]
        if self.completion_type == "shortest":
            return min(by_position, key=len)
        return max(by_position, key=len)


class StemCompleter:
    """
    Completes stems using a DictionaryProvider, falling back to the stem.

    Args:
        dictionary: Injected DictionaryProvider
    """

    def __init__(self, dictionary: DictionaryProvider):
        self.dictionary = dictionary

    def _resolve(self, stem: str) -> str:
        word = self.dictionary.lookup(stem)
        if not word:
            raise CompletionMiss(stem)
        return word

    def complete(self, stem: str) -> str:
        try:
            return self._resolve(stem)
        except CompletionMiss:
            logger.debug(f"No dictionary completion for '{stem}', keeping stem")
            return stem
