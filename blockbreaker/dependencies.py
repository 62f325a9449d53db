from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from blockbreaker.core.config import Settings, get_settings
from blockbreaker.services.cipher.block_cipher import BlockCipher
from blockbreaker.services.session.store import SessionStore
from blockbreaker.services.validation.dictionary import Dictionary, load_dictionary


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache
def get_dictionary() -> Dictionary:
    """Dictionary shared by every session, loaded once."""
    return load_dictionary(get_settings().dictionary_path)


@lru_cache
def get_session_store() -> SessionStore:
    """Process-wide session store."""
    settings = get_settings()
    return SessionStore(
        dictionary=get_dictionary(),
        profile=settings.cipher_profile(),
        max_sessions=settings.max_sessions,
        top_n=settings.validation_top_n,
        max_ciphertext_length=settings.max_ciphertext_length,
    )


def get_block_cipher(settings: SettingsDep) -> BlockCipher:
    return BlockCipher(settings.cipher_profile())


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
BlockCipherDep = Annotated[BlockCipher, Depends(get_block_cipher)]
