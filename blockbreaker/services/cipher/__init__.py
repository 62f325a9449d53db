"""Block cipher and its fixed parameters."""

from blockbreaker.services.cipher.alphabet import AlphabetCodec, CipherProfile
from blockbreaker.services.cipher.block_cipher import BlockCipher, BlockTrace, CipherResult

__all__ = [
    "AlphabetCodec",
    "CipherProfile",
    "BlockCipher",
    "BlockTrace",
    "CipherResult",
]
