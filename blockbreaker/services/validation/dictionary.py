import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import ClassVar

from blockbreaker.core.exceptions import DictionaryLoadError
from blockbreaker.services.analysis.decryptor import BLOCK_SEPARATOR
from blockbreaker.services.analysis.guess_map import UNKNOWN
from blockbreaker.services.cipher.alphabet import CAESAR_LENGTH

logger = logging.getLogger(__name__)

_NON_LETTERS_RE = re.compile(r"[^a-z]")

BUNDLED_DICTIONARY = "dictionary.txt"


@dataclass(frozen=True)
class Dictionary:
    """Immutable set of lowercase letter-only words."""

    words: frozenset[str] = frozenset()
    available: bool = True
    source: str | None = None

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self.words

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: str | None = None) -> "Dictionary":
        """Lowercase, trim and strip non-letters from every line; drop empties."""
        words = set()
        for line in lines:
            word = _NON_LETTERS_RE.sub("", line.strip().lower())
            if word:
                words.add(word)
        return cls(words=frozenset(words), available=True, source=source)

    @classmethod
    def from_file(cls, path: str | Path) -> "Dictionary":
        """Load a newline-delimited word list; raises DictionaryLoadError."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DictionaryLoadError(str(path), str(e)) from e
        return cls.from_lines(text.splitlines(), source=str(path))

    @classmethod
    def bundled(cls) -> "Dictionary":
        """The English word list shipped with the package."""
        text = resources.files("blockbreaker.data").joinpath(BUNDLED_DICTIONARY).read_text(encoding="utf-8")
        return cls.from_lines(text.splitlines(), source=f"package:{BUNDLED_DICTIONARY}")

    @classmethod
    def unavailable(cls, source: str | None = None) -> "Dictionary":
        return cls(words=frozenset(), available=False, source=source)


def load_dictionary(path: str | Path | None = None) -> Dictionary:
    """
    Load a dictionary without failing.

    A missing or unreadable file yields an unavailable dictionary, and
    validation then reports that instead of raising.
    """
    if path is None:
        dictionary = Dictionary.bundled()
    else:
        try:
            dictionary = Dictionary.from_file(path)
        except DictionaryLoadError as e:
            logger.warning("%s; word validation is disabled", e.message)
            return Dictionary.unavailable(source=str(path))

    logger.info("Dictionary loaded with %d words from %s", len(dictionary), dictionary.source)
    return dictionary


class ScoreStatus(str, Enum):
    MATCHED = "matched"
    NO_MATCHES = "no_matches"
    DICTIONARY_UNAVAILABLE = "dictionary_unavailable"


@dataclass
class ScoreResult:
    """Outcome of validating a text against the dictionary."""

    status: ScoreStatus
    score: int = 0
    total_found: int = 0
    words: list[str] = field(default_factory=list)

    @property
    def truncated(self) -> bool:
        return len(self.words) < self.total_found

    @property
    def summary(self) -> str:
        if self.status is ScoreStatus.DICTIONARY_UNAVAILABLE:
            return "Dictionary not loaded. Skipping validation."
        if self.status is ScoreStatus.NO_MATCHES:
            return "Word score: 0. No dictionary words found."
        shown = f" (top {len(self.words)})" if self.truncated else ""
        return (
            f"Word score: {self.score}. Found {self.total_found} words{shown}: "
            f"{', '.join(self.words)}"
        )


class DictionaryValidator:
    """
    Scores candidate or partial plaintext by dictionary substring matches.

    Two passes contribute to one set of found words:
    - Fragment pass: each block's substitution fragment with unknown
      letters squeezed out. Matches here score twice the word length.
    - Whole-text pass: all letters of the text joined, which finds words
      spanning blocks. New matches score the word length.
    """

    FRAGMENT_WEIGHT: ClassVar[int] = 2
    MIN_FRAGMENT_LETTERS: ClassVar[int] = 2
    DEFAULT_TOP_N: ClassVar[int] = 10

    def __init__(
        self,
        dictionary: Dictionary,
        top_n: int = DEFAULT_TOP_N,
        unknown: str = UNKNOWN,
        separator: str = BLOCK_SEPARATOR,
    ):
        self.dictionary = dictionary
        self.top_n = top_n
        self.unknown = unknown
        self.separator = separator

    def score(self, text: str, show_all: bool = False) -> ScoreResult:
        """
        Score text against the dictionary.

        Args:
            text: Context view, full attempt, or any candidate text
            show_all: Keep every found word instead of the top N

        Returns:
            ScoreResult
        """
        if not self.dictionary.available:
            return ScoreResult(status=ScoreStatus.DICTIONARY_UNAVAILABLE)

        text = text.lower()
        found: set[str] = set()
        total = 0

        for block in text.split(self.separator):
            if len(block) <= CAESAR_LENGTH:
                continue
            fragment = block[CAESAR_LENGTH:].replace(self.unknown, "")
            if len(fragment) < self.MIN_FRAGMENT_LETTERS:
                continue
            total += self._match(fragment, found, self.FRAGMENT_WEIGHT)

        combined = _NON_LETTERS_RE.sub("", text)
        total += self._match(combined, found, 1)

        if not found:
            return ScoreResult(status=ScoreStatus.NO_MATCHES)

        ranked = sorted(found, key=lambda word: (-len(word), word))
        return ScoreResult(
            status=ScoreStatus.MATCHED,
            score=total,
            total_found=len(ranked),
            words=ranked if show_all else ranked[:self.top_n],
        )

    def _match(self, haystack: str, found: set[str], weight: int) -> int:
        """Add newly found words to `found` and return their score."""
        gained = 0
        for word in self.dictionary.words:
            if word not in found and word in haystack:
                found.add(word)
                gained += weight * len(word)
        return gained
