import logging
from dataclasses import dataclass, field

from blockbreaker.services.cipher.alphabet import (
    BLOCK_SIZE,
    CAESAR_LENGTH,
    CipherProfile,
)
from blockbreaker.services.preprocessing.normalizer import TextNormalizer

logger = logging.getLogger(__name__)


@dataclass
class BlockTrace:
    """How a single block was transformed."""

    index: int
    block: str
    caesar_in: str
    caesar_out: str
    shift_letter: str | None
    shift: int | None
    substitution_in: str
    substitution_out: str
    partial: bool = False


@dataclass
class CipherResult:
    """Result of an encryption or decryption pass."""

    text: str
    # Padded plaintext for encryption, unstripped plaintext for decryption.
    intermediate: str
    blocks: list[BlockTrace] = field(default_factory=list)


class BlockCipher:
    """
    Composite block cipher.

    The text is processed in blocks of 9 letters. The first 3 letters of a
    block are Caesar-shifted by the alphabet index of the block's own 4th
    plaintext letter; the remaining 6 letters go through a fixed
    monoalphabetic substitution table. Encryption pads the text with a
    repeating "xyz" cycle up to a multiple of 9.
    """

    def __init__(self, profile: CipherProfile | None = None):
        self.profile = profile or CipherProfile()
        self.codec = self.profile.codec
        self.normalizer = TextNormalizer()
        self._forward = self.profile.forward
        self._inverse = self.profile.inverse

    def encrypt(self, plaintext: str) -> str:
        """Encrypt raw plaintext."""
        return self.encrypt_with_trace(plaintext).text

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt raw ciphertext and strip trailing padding."""
        return self.decrypt_with_trace(ciphertext).text

    def pad(self, text: str) -> str:
        """Right-pad with the padding cycle until the length is a multiple of 9."""
        padding = self.profile.padding
        missing = -len(text) % BLOCK_SIZE
        return text + "".join(padding[i % len(padding)] for i in range(missing))

    def strip_padding(self, text: str) -> str:
        """
        Remove any trailing run of padding letters.

        Lossy: genuine plaintext ending in a padding letter is stripped too.
        """
        return text.rstrip(self.profile.padding)

    def encrypt_with_trace(self, plaintext: str) -> CipherResult:
        """Encrypt and record how every block was transformed."""
        padded = self.pad(self.normalizer.normalize(plaintext))
        output = []
        traces = []

        for index, start in enumerate(range(0, len(padded), BLOCK_SIZE)):
            block = padded[start:start + BLOCK_SIZE]
            caesar_part = block[:CAESAR_LENGTH]
            subst_part = block[CAESAR_LENGTH:]

            shift_letter = subst_part[0]
            shift = self.codec.index_of(shift_letter)

            caesar_out = "".join(self.codec.shift(p, shift) for p in caesar_part)
            subst_out = "".join(self._forward[p] for p in subst_part)

            output.append(caesar_out)
            output.append(subst_out)
            traces.append(BlockTrace(
                index=index,
                block=block,
                caesar_in=caesar_part,
                caesar_out=caesar_out,
                shift_letter=shift_letter,
                shift=shift,
                substitution_in=subst_part,
                substitution_out=subst_out,
            ))

        return CipherResult(text="".join(output), intermediate=padded, blocks=traces)

    def decrypt_with_trace(self, ciphertext: str) -> CipherResult:
        """Decrypt and record how every block was transformed."""
        letters = self.normalizer.normalize(ciphertext)
        output = []
        traces = []

        for index, start in enumerate(range(0, len(letters), BLOCK_SIZE)):
            block = letters[start:start + BLOCK_SIZE]

            if len(block) < BLOCK_SIZE:
                logger.debug(
                    "Passing through incomplete final block %d (%d letters)",
                    index,
                    len(block),
                )
                output.append(block)
                traces.append(BlockTrace(
                    index=index,
                    block=block,
                    caesar_in=block[:CAESAR_LENGTH],
                    caesar_out=block[:CAESAR_LENGTH],
                    shift_letter=None,
                    shift=None,
                    substitution_in=block[CAESAR_LENGTH:],
                    substitution_out=block[CAESAR_LENGTH:],
                    partial=True,
                ))
                continue

            caesar_part = block[:CAESAR_LENGTH]
            subst_part = block[CAESAR_LENGTH:]

            # The substitution segment needs no key, and its first plaintext
            # letter is the Caesar key for this block.
            subst_plain = "".join(self._inverse[c] for c in subst_part)
            shift_letter = subst_plain[0]
            shift = self.codec.index_of(shift_letter)
            caesar_plain = "".join(self.codec.shift(c, -shift) for c in caesar_part)

            output.append(caesar_plain)
            output.append(subst_plain)
            traces.append(BlockTrace(
                index=index,
                block=block,
                caesar_in=caesar_part,
                caesar_out=caesar_plain,
                shift_letter=shift_letter,
                shift=shift,
                substitution_in=subst_part,
                substitution_out=subst_plain,
            ))

        recovered = "".join(output)
        return CipherResult(
            text=self.strip_padding(recovered),
            intermediate=recovered,
            blocks=traces,
        )
