import string
from dataclasses import dataclass, field

from blockbreaker.core.exceptions import InvalidProfileError

DEFAULT_ALPHABET = string.ascii_lowercase
DEFAULT_SUBSTITUTION_TABLE = "hilwmkbdpcvazusjgrnqyxfote"
DEFAULT_PADDING = "xyz"

# Block geometry is fixed: 3 Caesar letters followed by 6 substitution letters.
BLOCK_SIZE = 9
CAESAR_LENGTH = 3
SUBSTITUTION_LENGTH = BLOCK_SIZE - CAESAR_LENGTH


class AlphabetCodec:
    """
    Maps the letters of a 26-letter alphabet to dense indices and back.

    The ordering of the alphabet is configurable; the letter set is always
    the lowercase Latin alphabet.
    """

    def __init__(self, alphabet: str = DEFAULT_ALPHABET):
        if len(alphabet) != 26 or set(alphabet) != set(string.ascii_lowercase):
            raise InvalidProfileError(
                "Alphabet must be an ordering of the 26 lowercase Latin letters",
                {"alphabet": alphabet},
            )
        self.alphabet = alphabet
        self._index = {letter: i for i, letter in enumerate(alphabet)}

    def __len__(self) -> int:
        return len(self.alphabet)

    def __contains__(self, letter: object) -> bool:
        return letter in self._index

    def index_of(self, letter: str) -> int:
        """Return the index of a letter; raises KeyError for non-letters."""
        return self._index[letter]

    def letter_at(self, index: int) -> str:
        """Return the letter at an index, wrapping modulo 26."""
        return self.alphabet[index % 26]

    def shift(self, letter: str, amount: int) -> str:
        """Shift a letter forward (or backward for negative amounts)."""
        return self.letter_at(self._index[letter] + amount)


@dataclass(frozen=True)
class CipherProfile:
    """
    Fixed parameters of the block cipher.

    Index i of the alphabet maps to the character at index i of the
    substitution table.
    """

    alphabet: str = DEFAULT_ALPHABET
    substitution_table: str = DEFAULT_SUBSTITUTION_TABLE
    padding: str = DEFAULT_PADDING
    codec: AlphabetCodec = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "codec", AlphabetCodec(self.alphabet))

        table = self.substitution_table
        if len(table) != 26 or set(table) != set(self.alphabet):
            raise InvalidProfileError(
                "Substitution table must be a permutation of the alphabet",
                {"substitution_table": table},
            )

        if not self.padding or any(ch not in self.codec for ch in self.padding):
            raise InvalidProfileError(
                "Padding must be a non-empty sequence of alphabet letters",
                {"padding": self.padding},
            )

    @property
    def forward(self) -> dict[str, str]:
        """Plain letter -> cipher letter for the substitution segment."""
        return dict(zip(self.alphabet, self.substitution_table))

    @property
    def inverse(self) -> dict[str, str]:
        """Cipher letter -> plain letter for the substitution segment."""
        return dict(zip(self.substitution_table, self.alphabet))
