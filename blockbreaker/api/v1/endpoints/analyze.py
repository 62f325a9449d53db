from fastapi import APIRouter, HTTPException, status

from blockbreaker.dependencies import SettingsDep
from blockbreaker.models.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    diagnosis_response,
    frequency_entries,
)
from blockbreaker.services.analysis.statistics import (
    CAESAR_SEGMENT,
    SUBSTITUTION_SEGMENT,
    FrequencyAnalyzer,
)
from blockbreaker.services.explanation.generator import ExplanationGenerator
from blockbreaker.services.preprocessing.normalizer import TextNormalizer

router = APIRouter()


@router.post(
    "",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    summary="Analyze ciphertext",
    description=(
        "Frequency analysis of a ciphertext: overall n-gram counts, "
        "per-segment letter counts and a diagnosis of which block segment "
        "is monoalphabetic."
    ),
)
async def analyze_ciphertext(
    request: AnalyzeRequest,
    settings: SettingsDep,
) -> AnalyzeResponse:
    """
    Analyze ciphertext without opening a session.

    The analysis pipeline:
    1. Normalize the ciphertext to clean letters
    2. Count unigrams, digrams and trigrams over the whole text
    3. Count unigrams of the Caesar and substitution segments separately
    4. Compare both segments and explain the reading
    """
    if len(request.ciphertext) > settings.max_ciphertext_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ciphertext exceeds maximum length of {settings.max_ciphertext_length}",
        )

    # 1. Normalize text
    clean = TextNormalizer().normalize(request.ciphertext)

    # 2-3. Frequency tables
    analyzer = FrequencyAnalyzer(settings.alphabet)
    top = request.top

    # 4. Segment diagnosis
    diagnosis = analyzer.diagnose_segments(clean)
    explanations = ExplanationGenerator().explain_diagnosis(diagnosis)

    return AnalyzeResponse(
        length=len(clean),
        index_of_coincidence=analyzer.index_of_coincidence(clean),
        entropy=analyzer.entropy(clean),
        chi_squared=analyzer.chi_squared(clean),
        unigrams=frequency_entries(analyzer.count_unigrams(clean), top),
        digrams=frequency_entries(analyzer.count_digrams(clean), top),
        trigrams=frequency_entries(analyzer.count_trigrams(clean), top),
        caesar_unigrams=frequency_entries(analyzer.count_segment(clean, CAESAR_SEGMENT), top),
        substitution_unigrams=frequency_entries(
            analyzer.count_segment(clean, SUBSTITUTION_SEGMENT), top
        ),
        diagnosis=diagnosis_response(diagnosis, explanations),
    )
