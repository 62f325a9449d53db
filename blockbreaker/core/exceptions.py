from typing import Any


class CryptanalysisError(Exception):
    """Base exception for all cryptanalysis errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CryptanalysisError):
    """Raised when input validation fails."""

    pass


class CiphertextTooLongError(ValidationError):
    """Raised when ciphertext exceeds maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Ciphertext length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class InvalidSegmentError(ValidationError):
    """Raised when a segment geometry cannot describe a window of a block."""

    def __init__(self, block_size: int, segment_start: int, segment_length: int, n: int = 1):
        super().__init__(
            f"Invalid segment (block_size={block_size}, start={segment_start}, "
            f"length={segment_length}, n={n})",
            {
                "block_size": block_size,
                "segment_start": segment_start,
                "segment_length": segment_length,
                "n": n,
            },
        )


class InvalidProfileError(ValidationError):
    """Raised when an alphabet or substitution table is not usable."""

    pass


class CiphertextLoadError(CryptanalysisError):
    """Raised when a ciphertext file cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Could not read ciphertext file '{path}': {reason}",
            {"path": path, "reason": reason},
        )


class DictionaryLoadError(CryptanalysisError):
    """Raised when a dictionary file cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Could not read dictionary '{path}': {reason}",
            {"path": path, "reason": reason},
        )


class SessionError(CryptanalysisError):
    """Base exception for analysis session errors."""

    pass


class SessionNotFoundError(SessionError):
    """Raised when a session id is not known to the store."""

    def __init__(self, session_id: str):
        super().__init__(
            f"Session '{session_id}' not found",
            {"session_id": session_id},
        )
