from fastapi import APIRouter, HTTPException, status

from blockbreaker.dependencies import BlockCipherDep, SettingsDep
from blockbreaker.models.schemas import (
    CipherResponse,
    DecryptRequest,
    EncryptRequest,
    ErrorResponse,
    cipher_response,
)

router = APIRouter()


@router.post(
    "/encrypt",
    response_model=CipherResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    summary="Encrypt plaintext",
    description=(
        "Encrypt plaintext with the block cipher. Educational tool for "
        "generating ciphertexts to analyze."
    ),
)
async def encrypt_plaintext(
    request: EncryptRequest,
    settings: SettingsDep,
    cipher: BlockCipherDep,
) -> CipherResponse:
    """
    Encrypt plaintext in 9-letter blocks.

    With `trace` set, the response also lists how every block was
    transformed.
    """
    if len(request.plaintext) > settings.max_ciphertext_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Plaintext exceeds maximum length of {settings.max_ciphertext_length}",
        )

    result = cipher.encrypt_with_trace(request.plaintext)
    return cipher_response(result, request.trace)


@router.post(
    "/decrypt",
    response_model=CipherResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    summary="Decrypt ciphertext",
    description="Decrypt ciphertext with the configured substitution table.",
)
async def decrypt_ciphertext(
    request: DecryptRequest,
    settings: SettingsDep,
    cipher: BlockCipherDep,
) -> CipherResponse:
    """
    Decrypt ciphertext with the known key.

    Trailing x/y/z letters are removed as padding, which also removes
    genuine trailing x, y or z letters of the plaintext.
    """
    if len(request.ciphertext) > settings.max_ciphertext_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ciphertext exceeds maximum length of {settings.max_ciphertext_length}",
        )

    result = cipher.decrypt_with_trace(request.ciphertext)
    return cipher_response(result, request.trace)
