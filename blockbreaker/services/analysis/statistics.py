import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from scipy import stats

from blockbreaker.core.exceptions import InvalidSegmentError, ValidationError
from blockbreaker.services.analysis.frequency import FrequencyTable
from blockbreaker.services.analysis.guess_map import GuessMap
from blockbreaker.services.cipher.alphabet import (
    BLOCK_SIZE,
    CAESAR_LENGTH,
    DEFAULT_ALPHABET,
    SUBSTITUTION_LENGTH,
)


class NgramKind(str, Enum):
    """Sliding window sizes supported by the analyzer."""

    UNIGRAM = "unigram"
    DIGRAM = "digram"
    TRIGRAM = "trigram"

    @property
    def size(self) -> int:
        return {"unigram": 1, "digram": 2, "trigram": 3}[self.value]


@dataclass(frozen=True)
class Segment:
    """A positional window [start, start + length) inside every block."""

    block_size: int
    start: int
    length: int


CAESAR_SEGMENT = Segment(BLOCK_SIZE, 0, CAESAR_LENGTH)
SUBSTITUTION_SEGMENT = Segment(BLOCK_SIZE, CAESAR_LENGTH, SUBSTITUTION_LENGTH)


class SegmentVerdict(str, Enum):
    FLAT = "flat"
    SKEWED = "skewed"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass
class SegmentProfile:
    """Letter statistics of one segment across all blocks."""

    name: str
    segment: Segment
    letters: int
    index_of_coincidence: float
    flatness_statistic: float | None
    flatness_p_value: float | None
    english_correlation: float
    verdict: SegmentVerdict


@dataclass
class SegmentDiagnosis:
    """Side-by-side comparison of the Caesar and substitution segments."""

    caesar: SegmentProfile
    substitution: SegmentProfile
    monoalphabetic_segment: str | None


@dataclass(frozen=True)
class GuessSuggestion:
    """A frequency-rank pairing of a cipher letter with an English letter."""

    cipher: str
    plain: str
    cipher_count: int


class FrequencyAnalyzer:
    """
    Frequency statistics over clean text.

    Computes:
    - Unigram/digram/trigram counts over the whole text
    - The same counts restricted to one positional segment of every block
    - Index of Coincidence, entropy and chi-squared against English
    - A diagnosis of which block segment is monoalphabetic
    """

    # English letter frequencies (percentage)
    ENGLISH_FREQ: ClassVar[dict[str, float]] = {
        "e": 12.70, "t": 9.06, "a": 8.17, "o": 7.51, "i": 6.97,
        "n": 6.75, "s": 6.33, "h": 6.09, "r": 5.99, "d": 4.25,
        "l": 4.03, "c": 2.78, "u": 2.76, "m": 2.41, "w": 2.36,
        "f": 2.23, "g": 2.02, "y": 1.97, "p": 1.93, "b": 1.29,
        "v": 0.98, "k": 0.77, "j": 0.15, "x": 0.15, "q": 0.10,
        "z": 0.07,
    }

    # Segments with fewer letters than this are not diagnosed
    MIN_DIAGNOSIS_LETTERS: ClassVar[int] = 52
    # IoC above which a segment reads as natural-language skewed
    IOC_SKEW_THRESHOLD: ClassVar[float] = 0.055
    FLATNESS_ALPHA: ClassVar[float] = 0.05

    def __init__(self, alphabet: str = DEFAULT_ALPHABET):
        self.alphabet = alphabet

    def count_unigrams(self, text: str) -> FrequencyTable:
        return self.count_ngrams(text, 1)

    def count_digrams(self, text: str) -> FrequencyTable:
        return self.count_ngrams(text, 2)

    def count_trigrams(self, text: str) -> FrequencyTable:
        return self.count_ngrams(text, 3)

    def count_ngrams(self, text: str, n: int) -> FrequencyTable:
        """Count every overlapping n-gram of the text."""
        if n < 1:
            raise ValidationError(f"N-gram size must be at least 1, got {n}", {"n": n})

        table = self._empty_table(n)
        for i in range(len(text) - n + 1):
            table.increment(text[i:i + n])
        return table

    def count_segmented(
        self,
        text: str,
        block_size: int,
        segment_start: int,
        segment_length: int,
        n: int = 1,
        blocks_per_chunk: int | None = None,
    ) -> FrequencyTable:
        """
        Count n-grams lying wholly inside one window of every block.

        Args:
            text: Clean text
            block_size: Size of a block
            segment_start: Offset of the window inside a block
            segment_length: Length of the window
            n: N-gram size
            blocks_per_chunk: Count this many blocks at a time and merge the
                partial tables (all blocks at once when None)

        Returns:
            FrequencyTable of the segment
        """
        if block_size <= 0 or segment_start < 0 or segment_length < 0 or n < 1:
            raise InvalidSegmentError(block_size, segment_start, segment_length, n)
        if blocks_per_chunk is not None and blocks_per_chunk <= 0:
            raise InvalidSegmentError(block_size, segment_start, segment_length, n)

        block_count = math.ceil(len(text) / block_size)
        chunk = blocks_per_chunk or max(block_count, 1)
        segment = Segment(block_size, segment_start, segment_length)

        table = self._empty_table(n)
        for first in range(0, block_count, chunk):
            last = min(first + chunk, block_count)
            table = table.merge(self._count_block_range(text, segment, n, first, last))
        return table

    def count_segment(self, text: str, segment: Segment, n: int = 1) -> FrequencyTable:
        return self.count_segmented(text, segment.block_size, segment.start, segment.length, n)

    def _count_block_range(
        self,
        text: str,
        segment: Segment,
        n: int,
        first_block: int,
        last_block: int,
    ) -> FrequencyTable:
        """Count the segment's n-grams in blocks [first_block, last_block)."""
        table = self._empty_table(n)

        for block in range(first_block, last_block):
            block_start = block * segment.block_size
            window_start = block_start + segment.start
            window_end = min(
                window_start + segment.length,
                block_start + segment.block_size,
                len(text),
            )
            for i in range(window_start, window_end - n + 1):
                table.increment(text[i:i + n])

        return table

    def _empty_table(self, n: int) -> FrequencyTable:
        # Unigram tables report absent letters with a zero count.
        return FrequencyTable(self.alphabet if n == 1 else ())

    def index_of_coincidence(self, text: str) -> float:
        """
        Calculate Index of Coincidence.

        - English text: ~0.0667
        - Random text: ~0.0385 (1/26)
        """
        n = len(text)
        if n <= 1:
            return 0.0

        counter = Counter(text)
        numerator = sum(f * (f - 1) for f in counter.values())
        return numerator / (n * (n - 1))

    def entropy(self, text: str) -> float:
        """Shannon entropy in bits per letter."""
        n = len(text)
        if n == 0:
            return 0.0

        result = 0.0
        for count in Counter(text).values():
            p = count / n
            result -= p * math.log2(p)
        return result

    def chi_squared(self, text: str) -> float:
        """
        Chi-squared statistic against English letter frequencies.

        Lower values indicate closer match to English.
        """
        n = len(text)
        if n == 0:
            return 0.0

        counter = Counter(text)
        chi_squared = 0.0
        for letter in self.alphabet:
            expected = (self.ENGLISH_FREQ[letter] / 100) * n
            chi_squared += ((counter.get(letter, 0) - expected) ** 2) / expected
        return chi_squared

    def diagnose_segments(self, text: str) -> SegmentDiagnosis:
        """
        Compare the Caesar and substitution segments.

        A flat segment points at keyed, shifting encryption; a skewed one at
        a fixed monoalphabetic mapping that frequency matching can recover.
        """
        caesar = self._profile_segment(text, "caesar", CAESAR_SEGMENT)
        substitution = self._profile_segment(text, "substitution", SUBSTITUTION_SEGMENT)

        monoalphabetic = None
        diagnosable = SegmentVerdict.INSUFFICIENT_DATA not in (caesar.verdict, substitution.verdict)
        if diagnosable:
            if substitution.index_of_coincidence >= caesar.index_of_coincidence:
                monoalphabetic = substitution.name
            else:
                monoalphabetic = caesar.name

        return SegmentDiagnosis(
            caesar=caesar,
            substitution=substitution,
            monoalphabetic_segment=monoalphabetic,
        )

    def _profile_segment(self, text: str, name: str, segment: Segment) -> SegmentProfile:
        table = self.count_segment(text, segment)
        observed = [table[letter] for letter in self.alphabet]
        letters = sum(observed)
        letters_text = "".join(letter * table[letter] for letter in self.alphabet)
        ioc = self.index_of_coincidence(letters_text)

        if letters < self.MIN_DIAGNOSIS_LETTERS:
            return SegmentProfile(
                name=name,
                segment=segment,
                letters=letters,
                index_of_coincidence=ioc,
                flatness_statistic=None,
                flatness_p_value=None,
                english_correlation=0.0,
                verdict=SegmentVerdict.INSUFFICIENT_DATA,
            )

        statistic, p_value = stats.chisquare(observed)
        correlation = self._english_shape_correlation(observed)

        skewed = ioc >= self.IOC_SKEW_THRESHOLD and p_value < self.FLATNESS_ALPHA
        return SegmentProfile(
            name=name,
            segment=segment,
            letters=letters,
            index_of_coincidence=ioc,
            flatness_statistic=float(statistic),
            flatness_p_value=float(p_value),
            english_correlation=correlation,
            verdict=SegmentVerdict.SKEWED if skewed else SegmentVerdict.FLAT,
        )

    def _english_shape_correlation(self, observed: list[int]) -> float:
        """
        Spearman correlation between sorted observed and English frequencies.

        Only the shape of the curve is compared, so a permuted alphabet
        still correlates with English.
        """
        observed_sorted = sorted(observed, reverse=True)
        expected_sorted = sorted(self.ENGLISH_FREQ.values(), reverse=True)
        if len(set(observed_sorted)) < 2:
            return 0.0

        corr, _ = stats.spearmanr(observed_sorted, expected_sorted)
        if math.isnan(corr):
            return 0.0
        return float(corr)

    def suggest_guesses(self, table: FrequencyTable, guess_map: GuessMap) -> list[GuessSuggestion]:
        """
        Pair unguessed cipher letters with unclaimed English letters by rank.

        Cipher letters that never occur are not suggested.
        """
        claimed = set(guess_map.inverse())
        english = [
            letter
            for letter, _ in sorted(self.ENGLISH_FREQ.items(), key=lambda item: -item[1])
            if letter not in claimed
        ]
        cipher = [
            entry
            for entry in table.sorted_entries()
            if entry.count > 0 and guess_map.get(entry.symbol) is None
        ]

        return [
            GuessSuggestion(cipher=entry.symbol, plain=plain, cipher_count=entry.count)
            for entry, plain in zip(cipher, english)
        ]
