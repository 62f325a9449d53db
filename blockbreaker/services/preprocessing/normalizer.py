import string
from dataclasses import dataclass


@dataclass
class NormalizedText:
    """Result of text normalization."""

    text: str
    original: str
    removed_chars: dict[str, int]

    @property
    def removed_count(self) -> int:
        return sum(self.removed_chars.values())


class TextNormalizer:
    """
    Produces the canonical clean text every analysis routine operates on.

    Handles:
    - Case conversion (lowercase)
    - Removal of everything that is not one of the 26 Latin letters
    - Bookkeeping of the removed characters
    """

    LETTERS = frozenset(string.ascii_lowercase)

    def normalize(self, text: str) -> str:
        """
        Lowercase text and strip all non-letter characters.

        Args:
            text: Raw input text

        Returns:
            Letters-only lowercase string
        """
        return self.normalize_full(text).text

    def normalize_full(self, text: str) -> NormalizedText:
        """
        Normalize text and return detailed result.

        Args:
            text: Raw input text

        Returns:
            NormalizedText with details about the normalization
        """
        removed_chars: dict[str, int] = {}
        result = []

        for char in text:
            lowered = char.lower()
            # Some characters lowercase to more than one code point.
            kept = [c for c in lowered if c in self.LETTERS]
            if kept:
                result.append(kept[0])
            else:
                removed_chars[char] = removed_chars.get(char, 0) + 1

        return NormalizedText(
            text="".join(result),
            original=text,
            removed_chars=removed_chars,
        )
