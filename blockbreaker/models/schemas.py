from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from blockbreaker.services.analysis.decryptor import BlockReconstruction, Resolution
from blockbreaker.services.analysis.frequency import FrequencyTable
from blockbreaker.services.analysis.statistics import (
    NgramKind,
    Segment,
    SegmentDiagnosis,
    SegmentProfile,
    SegmentVerdict,
)
from blockbreaker.services.cipher.block_cipher import CipherResult
from blockbreaker.services.validation.dictionary import ScoreResult, ScoreStatus

LETTER_PATTERN = r"^[A-Za-z]$"


# ============================================================================
# Frequency Schemas
# ============================================================================


class FrequencyData(BaseModel):
    """One symbol of a frequency table."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    count: int = Field(ge=0)
    frequency: float = Field(ge=0.0, le=1.0)


class SegmentSpec(BaseModel):
    """Positional window inside every block."""

    model_config = ConfigDict(from_attributes=True)

    block_size: int = Field(default=9, ge=1)
    start: int = Field(ge=0)
    length: int = Field(ge=0)


class FrequencyResponse(BaseModel):
    """Frequency table ordered by descending count."""

    kind: NgramKind
    segment: SegmentSpec | None = None
    total: int
    entries: list[FrequencyData]


class SegmentProfileData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    segment: SegmentSpec
    letters: int
    index_of_coincidence: float
    flatness_statistic: float | None = None
    flatness_p_value: float | None = None
    english_correlation: float
    verdict: SegmentVerdict


class DiagnosisResponse(BaseModel):
    """Caesar vs substitution segment comparison."""

    model_config = ConfigDict(from_attributes=True)

    caesar: SegmentProfileData
    substitution: SegmentProfileData
    monoalphabetic_segment: str | None
    explanations: list[str] = []


class GuessSuggestionData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cipher: str
    plain: str
    cipher_count: int


# ============================================================================
# Cipher Schemas
# ============================================================================


class BlockTraceData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int
    block: str
    caesar_in: str
    caesar_out: str
    shift_letter: str | None
    shift: int | None
    substitution_in: str
    substitution_out: str
    partial: bool = False


class EncryptRequest(BaseModel):
    """Request schema for /cipher/encrypt."""

    plaintext: str = Field(min_length=1, max_length=100_000)
    trace: bool = False


class DecryptRequest(BaseModel):
    """Request schema for /cipher/decrypt."""

    ciphertext: str = Field(min_length=1, max_length=100_000)
    trace: bool = False


class CipherResponse(BaseModel):
    """Result of encryption or decryption."""

    text: str
    intermediate: str
    blocks: list[BlockTraceData] = []


class AnalyzeRequest(BaseModel):
    """Request schema for /analyze."""

    ciphertext: str = Field(min_length=1, max_length=100_000)
    top: int = Field(default=26, ge=1)


class AnalyzeResponse(BaseModel):
    """Stateless frequency analysis of a ciphertext."""

    length: int
    index_of_coincidence: float
    entropy: float
    chi_squared: float
    unigrams: list[FrequencyData]
    digrams: list[FrequencyData]
    trigrams: list[FrequencyData]
    caesar_unigrams: list[FrequencyData]
    substitution_unigrams: list[FrequencyData]
    diagnosis: DiagnosisResponse


# ============================================================================
# Session Schemas
# ============================================================================


class SessionCreateRequest(BaseModel):
    """Request schema for POST /sessions."""

    ciphertext: str = Field(min_length=1, max_length=100_000)


class SessionResponse(BaseModel):
    """Summary of a live analysis session."""

    session_id: str
    raw_length: int
    clean_length: int
    removed_chars: dict[str, int] = Field(default_factory=dict)
    dictionary_loaded: bool
    dictionary_size: int


class GuessRequest(BaseModel):
    """Plain letter to assign to a cipher letter."""

    plain: str = Field(pattern=LETTER_PATTERN)


class GuessEntry(BaseModel):
    cipher: str
    plain: str


class GuessMapResponse(BaseModel):
    """Current guess for every cipher letter, in alphabet order."""

    guesses: list[GuessEntry]
    known: int


class ContextResponse(BaseModel):
    text: str


class ResolvedLetterData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    resolution: Resolution
    letter: str | None = None


class BlockReconstructionData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int
    cipher_block: str
    caesar: list[ResolvedLetterData]
    substitution: list[ResolvedLetterData]
    shift: int | None = None


class ValidateRequest(BaseModel):
    """Text to validate; the session's context view when omitted."""

    text: str | None = Field(default=None, max_length=200_000)
    show_all: bool = False


class ScoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: ScoreStatus
    score: int
    total_found: int
    words: list[str]
    summary: str


class AttemptResponse(BaseModel):
    """Full reconstruction attempt under the current guesses."""

    text: str
    blocks: list[BlockReconstructionData]
    validation: ScoreResponse
    explanations: list[str]


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Builders
# ============================================================================


def frequency_entries(table: FrequencyTable, top: int | None = None) -> list[FrequencyData]:
    """Frequency table rows by descending count."""
    return [
        FrequencyData(symbol=e.symbol, count=e.count, frequency=e.frequency)
        for e in table.sorted_entries(top)
    ]


def segment_spec(segment: Segment) -> SegmentSpec:
    return SegmentSpec(block_size=segment.block_size, start=segment.start, length=segment.length)


def segment_profile_data(profile: SegmentProfile) -> SegmentProfileData:
    return SegmentProfileData(
        name=profile.name,
        segment=segment_spec(profile.segment),
        letters=profile.letters,
        index_of_coincidence=profile.index_of_coincidence,
        flatness_statistic=profile.flatness_statistic,
        flatness_p_value=profile.flatness_p_value,
        english_correlation=profile.english_correlation,
        verdict=profile.verdict,
    )


def diagnosis_response(diagnosis: SegmentDiagnosis, explanations: list[str]) -> DiagnosisResponse:
    return DiagnosisResponse(
        caesar=segment_profile_data(diagnosis.caesar),
        substitution=segment_profile_data(diagnosis.substitution),
        monoalphabetic_segment=diagnosis.monoalphabetic_segment,
        explanations=explanations,
    )


def block_reconstruction_data(block: BlockReconstruction) -> BlockReconstructionData:
    return BlockReconstructionData(
        index=block.index,
        cipher_block=block.cipher_block,
        caesar=[ResolvedLetterData(resolution=l.resolution, letter=l.letter) for l in block.caesar],
        substitution=[
            ResolvedLetterData(resolution=l.resolution, letter=l.letter) for l in block.substitution
        ],
        shift=block.shift,
    )


def score_response(result: ScoreResult) -> ScoreResponse:
    return ScoreResponse(
        status=result.status,
        score=result.score,
        total_found=result.total_found,
        words=result.words,
        summary=result.summary,
    )


def cipher_response(result: CipherResult, trace: bool) -> CipherResponse:
    blocks = [BlockTraceData.model_validate(b) for b in result.blocks] if trace else []
    return CipherResponse(text=result.text, intermediate=result.intermediate, blocks=blocks)
