from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class FrequencyEntry:
    """One row of a frequency table."""

    symbol: str
    count: int
    frequency: float


class FrequencyTable:
    """
    Mapping from symbol (letter, digram or trigram) to occurrence count.

    Insertion order is kept so that equal counts sort in the order the
    symbols were first seen (alphabet order for unigram tables).
    """

    def __init__(self, symbols: Iterable[str] = ()):
        self._counts: dict[str, int] = {symbol: 0 for symbol in symbols}

    def __getitem__(self, symbol: str) -> int:
        return self._counts.get(symbol, 0)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self._counts == other._counts

    def __add__(self, other: "FrequencyTable") -> "FrequencyTable":
        return self.merge(other)

    def __repr__(self) -> str:
        return f"FrequencyTable({self._counts!r})"

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def items(self) -> list[tuple[str, int]]:
        return list(self._counts.items())

    def increment(self, symbol: str, amount: int = 1) -> None:
        self._counts[symbol] = self._counts.get(symbol, 0) + amount

    def merge(self, other: "FrequencyTable") -> "FrequencyTable":
        """Combine two tables by adding counts; neither input is modified."""
        merged = FrequencyTable()
        for table in (self, other):
            for symbol, count in table.items():
                merged.increment(symbol, count)
        return merged

    def sorted_entries(self, top: int | None = None) -> list[FrequencyEntry]:
        """
        Entries by descending count, ties in insertion order.

        Args:
            top: Keep only the first `top` entries (all when None)

        Returns:
            List of FrequencyEntry
        """
        total = self.total
        ranked = sorted(self._counts.items(), key=lambda item: -item[1])
        if top is not None:
            ranked = ranked[:top]

        return [
            FrequencyEntry(
                symbol=symbol,
                count=count,
                frequency=count / total if total > 0 else 0.0,
            )
            for symbol, count in ranked
        ]

    def to_dict(self) -> dict[str, int]:
        return dict(self._counts)
