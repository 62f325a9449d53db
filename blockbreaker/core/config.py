from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from blockbreaker.services.cipher.alphabet import (
    DEFAULT_ALPHABET,
    DEFAULT_PADDING,
    DEFAULT_SUBSTITUTION_TABLE,
    CipherProfile,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Block Cipher Cryptanalysis Workbench"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Cipher profile
    alphabet: str = DEFAULT_ALPHABET
    substitution_table: str = DEFAULT_SUBSTITUTION_TABLE
    padding: str = DEFAULT_PADDING

    # Dictionary (None uses the bundled word list)
    dictionary_path: str | None = None

    # Analysis settings
    max_ciphertext_length: int = Field(default=100_000, ge=1)
    max_sessions: int = Field(default=64, ge=1)
    validation_top_n: int = Field(default=10, ge=1)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    def cipher_profile(self) -> CipherProfile:
        """Build the cipher profile described by these settings."""
        return CipherProfile(
            alphabet=self.alphabet,
            substitution_table=self.substitution_table,
            padding=self.padding,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
