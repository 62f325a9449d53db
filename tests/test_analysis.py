"""Tests for frequency analysis, the guess map and partial reconstruction."""

import pytest

from blockbreaker.core.exceptions import InvalidSegmentError, ValidationError
from blockbreaker.services.analysis.decryptor import Decryptor, Resolution
from blockbreaker.services.analysis.frequency import FrequencyTable
from blockbreaker.services.analysis.guess_map import GuessMap
from blockbreaker.services.analysis.statistics import (
    FrequencyAnalyzer,
    SegmentVerdict,
)
from blockbreaker.services.cipher.alphabet import CipherProfile
from blockbreaker.services.cipher.block_cipher import BlockCipher

ENGLISH_TEXT = (
    "It was the best of times, it was the worst of times, it was the age of "
    "wisdom, it was the age of foolishness, it was the epoch of belief, it was "
    "the epoch of incredulity, it was the season of Light, it was the season of "
    "Darkness, it was the spring of hope, it was the winter of despair, we had "
    "everything before us, we had nothing before us, we were all going direct "
    "to Heaven, we were all going direct the other way. In short, the period "
    "was so far like the present period, that some of its noisiest authorities "
    "insisted on its being received, for good or for evil, in the superlative "
    "degree of comparison only. There were a king with a large jaw and a queen "
    "with a plain face, on the throne of England; there were a king with a "
    "large jaw and a queen with a fair face, on the throne of France. In both "
    "countries it was clearer than crystal to the lords of the State preserves "
    "of loaves and fishes, that things in general were settled for ever."
)


def _full_guess_map(profile: CipherProfile) -> GuessMap:
    guess_map = GuessMap(profile.alphabet)
    for cipher_letter, plain_letter in profile.inverse.items():
        guess_map.guess(cipher_letter, plain_letter)
    return guess_map


class TestFrequencyTable:
    """Test suite for frequency tables."""

    def test_sorted_by_count_then_insertion_order(self):
        table = FrequencyTable("abc")
        table.increment("c", 2)
        table.increment("a")
        table.increment("b")

        entries = table.sorted_entries()
        assert [e.symbol for e in entries] == ["c", "a", "b"]
        assert entries[0].frequency == pytest.approx(2 / 4)

    def test_top_n(self):
        table = FrequencyTable("abcdef")
        table.increment("f", 3)

        assert [e.symbol for e in table.sorted_entries(2)] == ["f", "a"]

    def test_merge_adds_counts(self):
        left = FrequencyTable("ab")
        left.increment("a", 2)
        right = FrequencyTable()
        right.increment("a")
        right.increment("c", 4)

        merged = left + right
        assert merged.to_dict() == {"a": 3, "b": 0, "c": 4}
        assert left["c"] == 0

    def test_empty_table_frequencies(self):
        entries = FrequencyTable("ab").sorted_entries()
        assert all(e.frequency == 0.0 for e in entries)


class TestFrequencyAnalyzer:
    """Test suite for the frequency analyzer."""

    @pytest.fixture
    def analyzer(self):
        return FrequencyAnalyzer()

    @pytest.fixture
    def ciphertext(self):
        return BlockCipher().encrypt(ENGLISH_TEXT)

    def test_unigrams_report_absent_letters(self, analyzer):
        table = analyzer.count_unigrams("aab")

        assert len(table) == 26
        assert table["a"] == 2
        assert table["z"] == 0
        assert "z" in table

    def test_digrams_and_trigrams_overlap(self, analyzer):
        assert analyzer.count_digrams("aaaa").to_dict() == {"aa": 3}
        assert analyzer.count_trigrams("abcab").to_dict() == {"abc": 1, "bca": 1, "cab": 1}

    def test_ngrams_need_enough_text(self, analyzer):
        assert len(analyzer.count_trigrams("ab")) == 0
        assert len(analyzer.count_digrams("a")) == 0

    def test_segments_partition_unigrams(self, analyzer, ciphertext):
        assert len(ciphertext) % 9 == 0

        caesar = analyzer.count_segmented(ciphertext, 9, 0, 3)
        substitution = analyzer.count_segmented(ciphertext, 9, 3, 6)

        assert caesar + substitution == analyzer.count_unigrams(ciphertext)
        assert caesar.total == len(ciphertext) // 3
        assert substitution.total == 2 * len(ciphertext) // 3

    def test_segment_clipped_at_text_end(self, analyzer):
        text = "abcdefghi" + "jklm"

        table = analyzer.count_segmented(text, 9, 3, 6)
        assert table.total == 6 + 1
        assert table["m"] == 1
        assert table["j"] == 0

    def test_segment_clipped_at_block_boundary(self, analyzer):
        table = analyzer.count_segmented("abcdefghi", 9, 6, 10)

        assert table.total == 3
        assert [s for s in "ghi" if table[s] == 1] == ["g", "h", "i"]

    def test_segmented_digrams_stay_inside_window(self, analyzer):
        table = analyzer.count_segmented("abcdefghiabcdefghi", 9, 0, 3, n=2)

        assert table.to_dict() == {"ab": 2, "bc": 2}

    def test_chunked_counting_matches_single_pass(self, analyzer, ciphertext):
        whole = analyzer.count_segmented(ciphertext, 9, 3, 6, n=2)
        chunked = analyzer.count_segmented(ciphertext, 9, 3, 6, n=2, blocks_per_chunk=4)

        assert whole == chunked

    def test_invalid_segment(self, analyzer):
        with pytest.raises(InvalidSegmentError):
            analyzer.count_segmented("abc", 0, 0, 3)
        with pytest.raises(InvalidSegmentError):
            analyzer.count_segmented("abc", 9, -1, 3)
        with pytest.raises(InvalidSegmentError):
            analyzer.count_segmented("abc", 9, 0, 3, n=0)

    def test_invalid_ngram_size(self, analyzer):
        with pytest.raises(ValidationError) as exc_info:
            analyzer.count_ngrams("abcdef", 0)

        assert not isinstance(exc_info.value, InvalidSegmentError)
        assert exc_info.value.details == {"n": 0}

    def test_index_of_coincidence(self, analyzer):
        assert analyzer.index_of_coincidence("") == 0.0
        assert analyzer.index_of_coincidence("aaaa") == pytest.approx(1.0)
        assert analyzer.index_of_coincidence("abcdefghijklmnopqrstuvwxyz" * 10) < 0.05

    def test_english_scores_lower_chi_squared(self, analyzer, ciphertext):
        plain = BlockCipher().decrypt(ciphertext)

        assert analyzer.chi_squared(plain) < analyzer.chi_squared(ciphertext)
        assert analyzer.chi_squared("") == 0.0

    def test_entropy(self, analyzer):
        assert analyzer.entropy("aaaa") == 0.0
        assert analyzer.entropy("ab" * 4) == pytest.approx(1.0)

    def test_diagnosis_finds_substitution_segment(self, analyzer, ciphertext):
        diagnosis = analyzer.diagnose_segments(ciphertext)

        assert diagnosis.monoalphabetic_segment == "substitution"
        assert (
            diagnosis.substitution.index_of_coincidence
            > diagnosis.caesar.index_of_coincidence
        )
        assert diagnosis.substitution.verdict == SegmentVerdict.SKEWED

    def test_diagnosis_needs_data(self, analyzer):
        diagnosis = analyzer.diagnose_segments("abcdefghi")

        assert diagnosis.monoalphabetic_segment is None
        assert diagnosis.caesar.verdict == SegmentVerdict.INSUFFICIENT_DATA

    def test_suggestions_skip_guessed_letters(self, analyzer):
        table = analyzer.count_unigrams("qqqqwwwe")
        guess_map = GuessMap()
        guess_map.guess("q", "e")

        suggestions = analyzer.suggest_guesses(table, guess_map)

        assert [s.cipher for s in suggestions] == ["w", "e"]
        assert [s.plain for s in suggestions] == ["t", "a"]
        assert suggestions[0].cipher_count == 3


class TestGuessMap:
    """Test suite for the guess map."""

    @pytest.fixture
    def guess_map(self):
        return GuessMap()

    def test_starts_unknown(self, guess_map):
        assert len(guess_map) == 0
        assert all(plain == "?" for _, plain in guess_map.render())
        assert [c for c, _ in guess_map.render()] == list("abcdefghijklmnopqrstuvwxyz")

    def test_guess(self, guess_map):
        guess_map.guess("h", "e")

        assert guess_map["h"] == "e"
        assert ("h", "e") in guess_map.render()

    def test_plain_letter_claimed_once(self, guess_map):
        guess_map.guess("h", "e")
        guess_map.guess("x", "e")

        assert guess_map["h"] is None
        assert guess_map["x"] == "e"

    def test_reguessing_same_letter_keeps_it(self, guess_map):
        guess_map.guess("h", "e")
        guess_map.guess("h", "e")

        assert guess_map["h"] == "e"
        assert len(guess_map) == 1

    def test_undo_only_touches_one_letter(self, guess_map):
        guess_map.guess("h", "e")
        guess_map.guess("q", "t")
        before = dict(guess_map.render())

        guess_map.undo("h")

        after = dict(guess_map.render())
        assert after["h"] == "?"
        assert {k: v for k, v in after.items() if k != "h"} == {
            k: v for k, v in before.items() if k != "h"
        }

    def test_invalid_input_is_ignored(self, guess_map):
        guess_map.guess("h", "e")
        before = guess_map.render()

        guess_map.guess("1", "e")
        guess_map.guess("h", "?")
        guess_map.guess("H", "t")
        guess_map.undo("!")

        assert guess_map.render() == before

    def test_inverse_and_reset(self, guess_map):
        guess_map.guess("h", "e")
        assert guess_map.inverse() == {"e": "h"}

        guess_map.reset()
        assert guess_map.known() == {}


class TestDecryptor:
    """Test suite for context view and full attempt."""

    @pytest.fixture
    def profile(self):
        return CipherProfile()

    @pytest.fixture
    def decryptor(self, profile):
        return Decryptor(profile.codec)

    @pytest.fixture
    def ciphertext(self):
        return BlockCipher().encrypt("attackatdawn")

    def test_context_view_masks_caesar(self, decryptor, ciphertext):
        guess_map = GuessMap()
        guess_map.guess("h", "a")

        view = decryptor.context_view(ciphertext, guess_map)

        assert view == "___a??a?? ___?????? "

    def test_context_view_truncates(self, decryptor):
        view = decryptor.context_view("abcdefghi" + "jklm", GuessMap())

        assert view == "___?????? ___? "

    def test_full_attempt_with_every_guess(self, decryptor, profile, ciphertext):
        text = decryptor.full_attempt(ciphertext, _full_guess_map(profile))

        assert text == "attackatd awnxyzxyz "

    def test_unguessed_block_hides_caesar(self, decryptor, ciphertext):
        guess_map = GuessMap()
        # First block substitution segment "hlvhqw" fully guessed
        for cipher_letter, plain_letter in zip("hlvqw", "ackt" + "d"):
            guess_map.guess(cipher_letter, plain_letter)

        blocks = decryptor.reconstruct(ciphertext, guess_map)

        assert blocks[0].shift == 0
        assert blocks[0].render() == "attackatd"
        assert blocks[1].shift is None
        assert [l.resolution for l in blocks[1].caesar] == [Resolution.UNKNOWN] * 3
        assert decryptor.full_attempt(ciphertext, guess_map).split(" ")[1].startswith("???")

    def test_partial_final_block_is_not_attempted(self, decryptor, profile):
        blocks = decryptor.reconstruct("atthlvhqw" + "abcd", _full_guess_map(profile))

        assert blocks[1].shift is None
        assert [l.resolution for l in blocks[1].caesar] == [Resolution.NOT_ATTEMPTED] * 3
        assert blocks[1].render() == "???" + profile.inverse["d"]

    def test_attempt_tracks_guess_changes(self, decryptor, profile, ciphertext):
        guess_map = _full_guess_map(profile)
        first = decryptor.full_attempt(ciphertext, guess_map)

        guess_map.undo("h")
        second = decryptor.full_attempt(ciphertext, guess_map)

        assert first != second
        assert second.startswith("???")
