"""Tests for dictionary loading and word scoring."""

import pytest

from blockbreaker.services.validation.dictionary import (
    Dictionary,
    DictionaryValidator,
    ScoreStatus,
    load_dictionary,
)


class TestDictionary:
    """Test suite for dictionary loading."""

    def test_from_lines_cleans_words(self):
        dictionary = Dictionary.from_lines(["  Hello\n", "don't", "", "123", "WORLD"])

        assert dictionary.words == frozenset({"hello", "dont", "world"})
        assert dictionary.available

    def test_from_file(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("Had\nconfidential\n\n", encoding="utf-8")

        dictionary = Dictionary.from_file(path)

        assert "had" in dictionary
        assert len(dictionary) == 2
        assert dictionary.source == str(path)

    def test_missing_file_disables_validation(self, tmp_path):
        dictionary = load_dictionary(tmp_path / "missing.txt")

        assert not dictionary.available
        assert len(dictionary) == 0

    def test_bundled_word_list(self):
        dictionary = load_dictionary()

        assert dictionary.available
        assert "attack" in dictionary
        assert "dawn" in dictionary


class TestDictionaryValidator:
    """Test suite for the dictionary validator."""

    @pytest.fixture
    def validator(self):
        return DictionaryValidator(Dictionary.from_lines(["had", "confidential"]))

    def test_unknown_letters_break_words(self, validator):
        result = validator.score("___e?a?an")

        assert result.status == ScoreStatus.NO_MATCHES
        assert result.score == 0
        assert result.summary == "Word score: 0. No dictionary words found."

    def test_fragment_match_scores_double(self, validator):
        result = validator.score("___ehadan")

        assert result.status == ScoreStatus.MATCHED
        assert result.score == 6
        assert result.words == ["had"]

    def test_word_across_blocks(self, validator):
        """Words spanning a block boundary are found by the whole-text pass."""
        result = validator.score("___??con ___fidential ")

        assert result.score == len("confidential")
        assert result.words == ["confidential"]

    def test_short_fragments_are_skipped(self, validator):
        result = validator.score("had ___h ")

        assert result.score == 3

    def test_unavailable_dictionary(self):
        validator = DictionaryValidator(Dictionary.unavailable("missing.txt"))

        result = validator.score("___ehadan")

        assert result.status == ScoreStatus.DICTIONARY_UNAVAILABLE
        assert result.summary == "Dictionary not loaded. Skipping validation."

    def test_top_n_and_show_all(self):
        dictionary = Dictionary.from_lines(["had", "cat", "dog", "sun", "at"])
        validator = DictionaryValidator(dictionary, top_n=2)
        text = "___hadcat ___dogsun "

        top = validator.score(text)
        everything = validator.score(text, show_all=True)

        assert top.words == ["cat", "dog"]
        assert top.truncated
        assert "(top 2)" in top.summary
        assert everything.words == ["cat", "dog", "had", "sun", "at"]
        assert everything.total_found == 5
        assert top.score == everything.score == 2 * (3 + 3 + 2 + 3 + 3)

    def test_uppercase_text_is_matched(self, validator):
        assert validator.score("ATTACK HAD").words == ["had"]
        assert validator.score("___EHADAN").score == 6
