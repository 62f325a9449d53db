import logging

from blockbreaker.services.cipher.alphabet import DEFAULT_ALPHABET

logger = logging.getLogger(__name__)

UNKNOWN = "?"


class GuessMap:
    """
    The analyst's working hypothesis for the substitution segment.

    Maps every cipher letter to a plain letter or to unknown (None). No two
    cipher letters map to the same plain letter: a new claim on a plain
    letter clears the previous one.
    """

    def __init__(self, alphabet: str = DEFAULT_ALPHABET):
        self.alphabet = alphabet
        self._guesses: dict[str, str | None] = {letter: None for letter in alphabet}

    def __getitem__(self, cipher_letter: str) -> str | None:
        return self._guesses[cipher_letter]

    def __len__(self) -> int:
        return sum(1 for plain in self._guesses.values() if plain is not None)

    def get(self, cipher_letter: str) -> str | None:
        return self._guesses.get(cipher_letter)

    def guess(self, cipher_letter: str, plain_letter: str) -> None:
        """Record cipher_letter -> plain_letter; ignored for non-alphabet input."""
        if cipher_letter not in self._guesses or plain_letter not in self._guesses:
            logger.debug("Ignoring guess %r -> %r", cipher_letter, plain_letter)
            return

        for other, plain in self._guesses.items():
            if plain == plain_letter and other != cipher_letter:
                logger.debug(
                    "Plain letter %r was claimed by %r, clearing it",
                    plain_letter,
                    other,
                )
                self._guesses[other] = None

        self._guesses[cipher_letter] = plain_letter

    def undo(self, cipher_letter: str) -> None:
        """Reset one cipher letter to unknown; ignored for non-alphabet input."""
        if cipher_letter in self._guesses:
            self._guesses[cipher_letter] = None

    def reset(self) -> None:
        for letter in self._guesses:
            self._guesses[letter] = None

    def render(self, unknown: str = UNKNOWN) -> list[tuple[str, str]]:
        """(cipher letter, guess or unknown marker) for every letter in alphabet order."""
        return [
            (letter, plain if plain is not None else unknown)
            for letter, plain in self._guesses.items()
        ]

    def known(self) -> dict[str, str]:
        """Only the cipher letters that currently have a guess."""
        return {c: p for c, p in self._guesses.items() if p is not None}

    def inverse(self) -> dict[str, str]:
        """Plain letter -> cipher letter for every current guess."""
        return {p: c for c, p in self._guesses.items() if p is not None}
