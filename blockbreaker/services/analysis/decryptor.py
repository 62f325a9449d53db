"""
Partial-knowledge reconstruction of block cipher text.

Every block is resolved in three phases: the substitution segment through
the analyst's guess map, then the Caesar shift from the first recovered
substitution letter, then the Caesar segment from that shift. A Caesar
segment is only resolved when its whole substitution segment is known.
"""

from dataclasses import dataclass, field
from enum import Enum

from blockbreaker.services.analysis.guess_map import UNKNOWN, GuessMap
from blockbreaker.services.cipher.alphabet import (
    BLOCK_SIZE,
    CAESAR_LENGTH,
    AlphabetCodec,
)

CAESAR_MASK = "_"
BLOCK_SEPARATOR = " "


class Resolution(str, Enum):
    KNOWN = "known"
    UNKNOWN = "unknown"
    NOT_ATTEMPTED = "not_attempted"


@dataclass(frozen=True)
class ResolvedLetter:
    resolution: Resolution
    letter: str | None = None

    @classmethod
    def known(cls, letter: str) -> "ResolvedLetter":
        return cls(Resolution.KNOWN, letter)

    @property
    def is_known(self) -> bool:
        return self.resolution is Resolution.KNOWN

    def render(self, unknown: str = UNKNOWN) -> str:
        return self.letter if self.letter is not None else unknown


LETTER_UNKNOWN = ResolvedLetter(Resolution.UNKNOWN)
LETTER_NOT_ATTEMPTED = ResolvedLetter(Resolution.NOT_ATTEMPTED)


@dataclass
class BlockReconstruction:
    """Outcome of reconstructing a single block."""

    index: int
    cipher_block: str
    caesar: list[ResolvedLetter] = field(default_factory=list)
    substitution: list[ResolvedLetter] = field(default_factory=list)
    shift: int | None = None

    @property
    def substitution_resolved(self) -> bool:
        return bool(self.substitution) and all(l.is_known for l in self.substitution)

    @property
    def fully_resolved(self) -> bool:
        return self.substitution_resolved and all(l.is_known for l in self.caesar)

    def render(self, unknown: str = UNKNOWN) -> str:
        return "".join(l.render(unknown) for l in self.caesar + self.substitution)


class Decryptor:
    """
    Renders views of the ciphertext under the current guess map.

    Holds no state of its own: every call recomputes from the clean text and
    the guess map it is given.
    """

    def __init__(
        self,
        codec: AlphabetCodec | None = None,
        unknown: str = UNKNOWN,
        mask: str = CAESAR_MASK,
        separator: str = BLOCK_SEPARATOR,
    ):
        self.codec = codec or AlphabetCodec()
        self.unknown = unknown
        self.mask = mask
        self.separator = separator

    def context_view(self, clean_text: str, guess_map: GuessMap) -> str:
        """
        Substitution segments under the guess map, Caesar segments masked.

        Returns:
            A string like "___???t?? ___??t???"
        """
        parts = []
        for start in range(0, len(clean_text), BLOCK_SIZE):
            block = clean_text[start:start + BLOCK_SIZE]
            parts.append(self.mask * CAESAR_LENGTH)
            for cipher_letter in block[CAESAR_LENGTH:]:
                plain = guess_map.get(cipher_letter)
                parts.append(plain if plain is not None else self.unknown)
            parts.append(self.separator)
        return "".join(parts)

    def full_attempt(self, clean_text: str, guess_map: GuessMap) -> str:
        """Decrypt everything the guess map allows, block by block."""
        return "".join(
            block.render(self.unknown) + self.separator
            for block in self.reconstruct(clean_text, guess_map)
        )

    def reconstruct(self, clean_text: str, guess_map: GuessMap) -> list[BlockReconstruction]:
        """Per-block structured form of the full attempt."""
        blocks = []
        for index, start in enumerate(range(0, len(clean_text), BLOCK_SIZE)):
            block = clean_text[start:start + BLOCK_SIZE]
            blocks.append(self._reconstruct_block(index, block, guess_map))
        return blocks

    def _reconstruct_block(self, index: int, block: str, guess_map: GuessMap) -> BlockReconstruction:
        result = BlockReconstruction(index=index, cipher_block=block)

        # Phase 1: substitution segment
        for cipher_letter in block[CAESAR_LENGTH:]:
            plain = guess_map.get(cipher_letter)
            result.substitution.append(
                ResolvedLetter.known(plain) if plain is not None else LETTER_UNKNOWN
            )

        # Phase 2: the shift exists only for a complete, fully guessed segment
        complete = len(block) == BLOCK_SIZE
        if complete and result.substitution_resolved:
            result.shift = self.codec.index_of(result.substitution[0].letter)

        # Phase 3: Caesar segment. A truncated final block never gets a shift.
        pending = LETTER_UNKNOWN if complete else LETTER_NOT_ATTEMPTED
        for cipher_letter in block[:CAESAR_LENGTH]:
            if result.shift is None:
                result.caesar.append(pending)
            else:
                result.caesar.append(
                    ResolvedLetter.known(self.codec.shift(cipher_letter, -result.shift))
                )

        return result
