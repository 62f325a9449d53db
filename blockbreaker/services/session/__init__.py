"""Analysis sessions and their in-memory store."""

from blockbreaker.services.session.session import AnalysisSession
from blockbreaker.services.session.store import SessionStore

__all__ = ["AnalysisSession", "SessionStore"]
