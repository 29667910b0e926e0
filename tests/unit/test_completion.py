"""
Unit tests for stem completion.
"""

import pytest


class TestWordListDictionary:
    """Tests for WordListDictionary lookups."""

    def test_prevalent_picks_most_frequent(self, dictionary_file):
        from lda_topics.completion import WordListDictionary

        dictionary = WordListDictionary.from_file(dictionary_file)

        assert dictionary.lookup("run") == "running"

    def test_prevalent_tie_is_alphabetical(self, dictionary_file):
        from lda_topics.completion import WordListDictionary

        dictionary = WordListDictionary.from_file(dictionary_file)

        assert dictionary.lookup("comput") == "compute"

    @pytest.mark.parametrize(
        "completion_type,expected",
        [("first", "run"), ("shortest", "run"), ("longest", "running")],
    )
    def test_positional_strategies(self, dictionary_file, completion_type, expected):
        from lda_topics.completion import WordListDictionary

        dictionary = WordListDictionary.from_file(dictionary_file, completion_type=completion_type)

        assert dictionary.lookup("run") == expected

    def test_miss_returns_none(self, dictionary_file):
        from lda_topics.completion import WordListDictionary

        dictionary = WordListDictionary.from_file(dictionary_file)

        assert dictionary.lookup("zebra") is None
        assert dictionary.lookup("") is None

    def test_unique_word_count(self, dictionary_file):
        from lda_topics.completion import WordListDictionary

        assert len(WordListDictionary.from_file(dictionary_file)) == 6

    def test_unknown_type_rejected(self):
        from lda_topics.completion import WordListDictionary
        from lda_topics.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            WordListDictionary(["run"], completion_type="random")

    def test_missing_file(self, tmp_path):
        from lda_topics.completion import WordListDictionary

        with pytest.raises(FileNotFoundError):
            WordListDictionary.from_file(tmp_path / "missing.dic")


class TestStemCompleter:
    """Tests for StemCompleter."""

    def test_completes_known_stem(self):
        from lda_topics.completion import StemCompleter, WordListDictionary

        completer = StemCompleter(WordListDictionary(["business", "busy"]))

        assert completer.complete("busi") == "business"

    def test_miss_falls_back_to_stem(self):
        """No dictionary match is not an error: the stem itself is used."""
        from lda_topics.completion import StemCompleter, WordListDictionary

        completer = StemCompleter(WordListDictionary(["business"]))

        assert completer.complete("quickli") == "quickli"

    def test_resolve_raises_completion_miss(self):
        from lda_topics.completion import StemCompleter, WordListDictionary
        from lda_topics.errors import CompletionMiss

        completer = StemCompleter(WordListDictionary([]))

        with pytest.raises(CompletionMiss) as exc_info:
            completer._resolve("cat")

        assert exc_info.value.stem == "cat"
