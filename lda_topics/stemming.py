"""
Stemmer implementations.

The Porter algorithm is the default, matching the English stemming used for
the document-term matrix. Snowball stemmers cover other languages.
"""

from nltk.stem import PorterStemmer as _NltkPorter
from nltk.stem.snowball import SnowballStemmer as _NltkSnowball

from lda_topics.errors import ConfigurationError
from lda_topics.interfaces import Stemmer


class PorterStemmer(Stemmer):
    """English Porter stemmer (nltk, original algorithm mode)."""

    def __init__(self):
        self._stemmer = _NltkPorter(mode=_NltkPorter.ORIGINAL_ALGORITHM)

    def stem(self, token: str) -> str:
        return self._stemmer.stem(token)


class SnowballStemmer(Stemmer):
    """Snowball stemmer for any language nltk supports."""

    def __init__(self, language: str = "english"):
        if language not in _NltkSnowball.languages:
            raise ConfigurationError(f"No Snowball stemmer for language '{language}'")
        self.language = language
        self._stemmer = _NltkSnowball(language)

    def stem(self, token: str) -> str:
        return self._stemmer.stem(token)


def stemmer_for(language: str) -> Stemmer:
    """Porter for English, Snowball otherwise."""
    if language == "english":
        return PorterStemmer()
    return SnowballStemmer(language)
