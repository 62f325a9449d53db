import logging
from pathlib import Path

from blockbreaker.core.exceptions import CiphertextLoadError
from blockbreaker.services.analysis.decryptor import BlockReconstruction, Decryptor
from blockbreaker.services.analysis.frequency import FrequencyTable
from blockbreaker.services.analysis.guess_map import GuessMap
from blockbreaker.services.analysis.statistics import (
    SUBSTITUTION_SEGMENT,
    FrequencyAnalyzer,
    GuessSuggestion,
    NgramKind,
    Segment,
    SegmentDiagnosis,
)
from blockbreaker.services.cipher.alphabet import CipherProfile
from blockbreaker.services.preprocessing.normalizer import TextNormalizer
from blockbreaker.services.validation.dictionary import (
    Dictionary,
    DictionaryValidator,
    ScoreResult,
)

logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    One ciphertext under analysis.

    The clean text and dictionary are fixed when the session is created;
    only the guess map changes, through guess, undo and reset.
    """

    def __init__(
        self,
        ciphertext: str,
        dictionary: Dictionary,
        profile: CipherProfile | None = None,
        top_n: int = DictionaryValidator.DEFAULT_TOP_N,
    ):
        self.profile = profile or CipherProfile()
        normalized = TextNormalizer().normalize_full(ciphertext)

        self.raw_length = len(ciphertext)
        self.clean_text = normalized.text
        self.removed_chars = normalized.removed_chars
        self.dictionary = dictionary

        self.guess_map = GuessMap(self.profile.alphabet)
        self.analyzer = FrequencyAnalyzer(self.profile.alphabet)
        self.decryptor = Decryptor(self.profile.codec)
        self.validator = DictionaryValidator(dictionary, top_n=top_n)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        dictionary: Dictionary,
        profile: CipherProfile | None = None,
    ) -> "AnalysisSession":
        """Load a ciphertext file; raises CiphertextLoadError if it cannot be read."""
        try:
            ciphertext = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CiphertextLoadError(str(path), str(e)) from e
        return cls(ciphertext, dictionary, profile)

    @property
    def clean_length(self) -> int:
        return len(self.clean_text)

    def guess(self, cipher_letter: str, plain_letter: str) -> None:
        self.guess_map.guess(cipher_letter, plain_letter)

    def undo(self, cipher_letter: str) -> None:
        self.guess_map.undo(cipher_letter)

    def reset_guesses(self) -> None:
        self.guess_map.reset()

    def render_guess_map(self) -> list[tuple[str, str]]:
        return self.guess_map.render()

    def context_view(self) -> str:
        return self.decryptor.context_view(self.clean_text, self.guess_map)

    def full_attempt(self) -> str:
        return self.decryptor.full_attempt(self.clean_text, self.guess_map)

    def reconstruct(self) -> list[BlockReconstruction]:
        return self.decryptor.reconstruct(self.clean_text, self.guess_map)

    def validate(self, text: str | None = None, show_all: bool = False) -> ScoreResult:
        """Score text against the dictionary, the context view by default."""
        if text is None:
            text = self.context_view()
        return self.validator.score(text, show_all=show_all)

    def frequency(self, kind: NgramKind, segment: Segment | None = None) -> FrequencyTable:
        """Overall n-gram counts, or counts restricted to one block segment."""
        if segment is None:
            return self.analyzer.count_ngrams(self.clean_text, kind.size)
        return self.analyzer.count_segment(self.clean_text, segment, kind.size)

    def diagnose_segments(self) -> SegmentDiagnosis:
        return self.analyzer.diagnose_segments(self.clean_text)

    def suggest_guesses(self) -> list[GuessSuggestion]:
        """Frequency-rank suggestions for the substitution segment."""
        table = self.frequency(NgramKind.UNIGRAM, SUBSTITUTION_SEGMENT)
        return self.analyzer.suggest_guesses(table, self.guess_map)
