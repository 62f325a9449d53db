"""Dictionary-based validation of candidate plaintext."""

from blockbreaker.services.validation.dictionary import (
    Dictionary,
    DictionaryValidator,
    ScoreResult,
    ScoreStatus,
    load_dictionary,
)

__all__ = [
    "Dictionary",
    "DictionaryValidator",
    "ScoreResult",
    "ScoreStatus",
    "load_dictionary",
]
