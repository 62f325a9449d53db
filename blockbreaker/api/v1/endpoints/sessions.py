from fastapi import APIRouter, HTTPException, Path, Query, status

from blockbreaker.core.exceptions import SessionNotFoundError
from blockbreaker.dependencies import SessionStoreDep
from blockbreaker.models.schemas import (
    LETTER_PATTERN,
    AttemptResponse,
    ContextResponse,
    DiagnosisResponse,
    ErrorResponse,
    FrequencyResponse,
    GuessEntry,
    GuessMapResponse,
    GuessRequest,
    GuessSuggestionData,
    ScoreResponse,
    SessionCreateRequest,
    SessionResponse,
    ValidateRequest,
    block_reconstruction_data,
    diagnosis_response,
    frequency_entries,
    score_response,
    segment_spec,
)
from blockbreaker.services.analysis.statistics import NgramKind, Segment
from blockbreaker.services.explanation.generator import ExplanationGenerator
from blockbreaker.services.session.session import AnalysisSession
from blockbreaker.services.session.store import SessionStore

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}

CipherLetter = Path(pattern=LETTER_PATTERN, description="Cipher letter")


def _get_session(store: SessionStore, session_id: str) -> AnalysisSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _session_response(session_id: str, session: AnalysisSession) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        raw_length=session.raw_length,
        clean_length=session.clean_length,
        removed_chars=session.removed_chars,
        dictionary_loaded=session.dictionary.available,
        dictionary_size=len(session.dictionary),
    )


def _guess_map_response(session: AnalysisSession) -> GuessMapResponse:
    return GuessMapResponse(
        guesses=[GuessEntry(cipher=c, plain=p) for c, p in session.render_guess_map()],
        known=len(session.guess_map),
    )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid input"}},
    summary="Load ciphertext",
    description="Open an interactive analysis session for a ciphertext.",
)
async def create_session(
    request: SessionCreateRequest,
    store: SessionStoreDep,
) -> SessionResponse:
    session_id, session = store.create(request.ciphertext)
    return _session_response(session_id, session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses=NOT_FOUND,
    summary="Get session",
)
async def get_session(session_id: str, store: SessionStoreDep) -> SessionResponse:
    return _session_response(session_id, _get_session(store, session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Close session",
)
async def delete_session(session_id: str, store: SessionStoreDep) -> None:
    try:
        store.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get(
    "/{session_id}/guesses",
    response_model=GuessMapResponse,
    responses=NOT_FOUND,
    summary="Show guess map",
)
async def get_guesses(session_id: str, store: SessionStoreDep) -> GuessMapResponse:
    return _guess_map_response(_get_session(store, session_id))


@router.put(
    "/{session_id}/guesses/{cipher}",
    response_model=GuessMapResponse,
    responses=NOT_FOUND,
    summary="Guess a letter",
    description=(
        "Map a cipher letter to a plain letter. A plain letter already "
        "claimed by another cipher letter is taken over."
    ),
)
async def put_guess(
    session_id: str,
    request: GuessRequest,
    store: SessionStoreDep,
    cipher: str = CipherLetter,
) -> GuessMapResponse:
    session = _get_session(store, session_id)
    session.guess(cipher.lower(), request.plain.lower())
    return _guess_map_response(session)


@router.delete(
    "/{session_id}/guesses/{cipher}",
    response_model=GuessMapResponse,
    responses=NOT_FOUND,
    summary="Undo a guess",
)
async def delete_guess(
    session_id: str,
    store: SessionStoreDep,
    cipher: str = CipherLetter,
) -> GuessMapResponse:
    session = _get_session(store, session_id)
    session.undo(cipher.lower())
    return _guess_map_response(session)


@router.delete(
    "/{session_id}/guesses",
    response_model=GuessMapResponse,
    responses=NOT_FOUND,
    summary="Clear all guesses",
)
async def reset_guesses(session_id: str, store: SessionStoreDep) -> GuessMapResponse:
    session = _get_session(store, session_id)
    session.reset_guesses()
    return _guess_map_response(session)


@router.get(
    "/{session_id}/context",
    response_model=ContextResponse,
    responses=NOT_FOUND,
    summary="Partially decrypted substitution segments",
    description="Substitution segments under the current guesses; Caesar segments are masked.",
)
async def get_context(session_id: str, store: SessionStoreDep) -> ContextResponse:
    return ContextResponse(text=_get_session(store, session_id).context_view())


@router.get(
    "/{session_id}/attempt",
    response_model=AttemptResponse,
    responses=NOT_FOUND,
    summary="Attempt full decryption",
    description=(
        "Decrypt the substitution segments with the current guesses, derive "
        "each block's Caesar shift from them, and score the result."
    ),
)
async def get_attempt(
    session_id: str,
    store: SessionStoreDep,
    show_all: bool = Query(False, description="Return every found word"),
) -> AttemptResponse:
    session = _get_session(store, session_id)

    blocks = session.reconstruct()
    text = session.full_attempt()
    validation = session.validate(text, show_all=show_all)

    return AttemptResponse(
        text=text,
        blocks=[block_reconstruction_data(b) for b in blocks],
        validation=score_response(validation),
        explanations=ExplanationGenerator().explain_progress(blocks, validation),
    )


@router.post(
    "/{session_id}/validate",
    response_model=ScoreResponse,
    responses=NOT_FOUND,
    summary="Validate text against the dictionary",
)
async def validate_text(
    session_id: str,
    request: ValidateRequest,
    store: SessionStoreDep,
) -> ScoreResponse:
    session = _get_session(store, session_id)
    return score_response(session.validate(request.text, show_all=request.show_all))


@router.get(
    "/{session_id}/frequencies",
    response_model=FrequencyResponse,
    responses={
        **NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Invalid segment"},
    },
    summary="Frequency table",
    description=(
        "Unigram, digram or trigram counts over the whole text, or restricted "
        "to one segment of every block when start and length are given."
    ),
)
async def get_frequencies(
    session_id: str,
    store: SessionStoreDep,
    kind: NgramKind = Query(NgramKind.UNIGRAM),
    block_size: int = Query(9, description="Block size for segmented counts"),
    start: int | None = Query(None, description="Segment start inside each block"),
    length: int | None = Query(None, description="Segment length"),
    top: int = Query(26, ge=1, description="Number of rows to return"),
) -> FrequencyResponse:
    session = _get_session(store, session_id)

    segment = None
    if start is not None or length is not None:
        if start is None or length is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Segmented counts need both start and length",
            )
        segment = Segment(block_size, start, length)

    table = session.frequency(kind, segment)

    return FrequencyResponse(
        kind=kind,
        segment=segment_spec(segment) if segment else None,
        total=table.total,
        entries=frequency_entries(table, top),
    )


@router.get(
    "/{session_id}/diagnosis",
    response_model=DiagnosisResponse,
    responses=NOT_FOUND,
    summary="Segment diagnosis",
)
async def get_diagnosis(session_id: str, store: SessionStoreDep) -> DiagnosisResponse:
    diagnosis = _get_session(store, session_id).diagnose_segments()
    explanations = ExplanationGenerator().explain_diagnosis(diagnosis)
    return diagnosis_response(diagnosis, explanations)


@router.get(
    "/{session_id}/suggestions",
    response_model=list[GuessSuggestionData],
    responses=NOT_FOUND,
    summary="Frequency-rank guess suggestions",
)
async def get_suggestions(session_id: str, store: SessionStoreDep) -> list[GuessSuggestionData]:
    session = _get_session(store, session_id)
    return [GuessSuggestionData.model_validate(s) for s in session.suggest_guesses()]
