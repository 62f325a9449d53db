import logging
import uuid
from collections import OrderedDict

from blockbreaker.core.exceptions import CiphertextTooLongError, SessionNotFoundError
from blockbreaker.services.cipher.alphabet import CipherProfile
from blockbreaker.services.session.session import AnalysisSession
from blockbreaker.services.validation.dictionary import Dictionary, DictionaryValidator

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory registry of live analysis sessions.

    Sessions are kept in creation order; once `max_sessions` is reached the
    oldest session is evicted to make room.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        profile: CipherProfile | None = None,
        max_sessions: int = 64,
        top_n: int = DictionaryValidator.DEFAULT_TOP_N,
        max_ciphertext_length: int | None = None,
    ):
        self.dictionary = dictionary
        self.profile = profile or CipherProfile()
        self.max_sessions = max_sessions
        self.top_n = top_n
        self.max_ciphertext_length = max_ciphertext_length
        self._sessions: OrderedDict[str, AnalysisSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self, ciphertext: str) -> tuple[str, AnalysisSession]:
        """
        Start a new session for a ciphertext.

        Returns:
            Tuple of (session id, session)

        Raises:
            CiphertextTooLongError: If the ciphertext exceeds max_ciphertext_length
        """
        if self.max_ciphertext_length is not None and len(ciphertext) > self.max_ciphertext_length:
            raise CiphertextTooLongError(len(ciphertext), self.max_ciphertext_length)

        while self._sessions and len(self._sessions) >= self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted session %s", evicted)

        session_id = uuid.uuid4().hex
        session = AnalysisSession(ciphertext, self.dictionary, self.profile, top_n=self.top_n)
        self._sessions[session_id] = session

        logger.info(
            "Created session %s (%d raw characters, %d letters)",
            session_id,
            session.raw_length,
            session.clean_length,
        )
        return session_id, session

    def get(self, session_id: str) -> AnalysisSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Closed session %s", session_id)

    def clear(self) -> None:
        self._sessions.clear()
