"""Frequency analysis, guess tracking and partial reconstruction."""

from blockbreaker.services.analysis.decryptor import BlockReconstruction, Decryptor, Resolution
from blockbreaker.services.analysis.frequency import FrequencyEntry, FrequencyTable
from blockbreaker.services.analysis.guess_map import GuessMap
from blockbreaker.services.analysis.statistics import FrequencyAnalyzer, NgramKind, Segment

__all__ = [
    "BlockReconstruction",
    "Decryptor",
    "Resolution",
    "FrequencyEntry",
    "FrequencyTable",
    "GuessMap",
    "FrequencyAnalyzer",
    "NgramKind",
    "Segment",
]
