"""In-memory registry of portal sessions, owned by one application instance"""

import secrets
from typing import Dict

from perpus_portal.domain.exceptions import NotFoundError
from perpus_portal.domain.session import PortalSession


class SessionNotFoundError(NotFoundError):
    code = "session_not_found"
    default_message = "Session not found"


class SessionRegistry:
    """Holds PortalSession objects by random id; nothing is persisted"""

    def __init__(self) -> None:
        self._sessions: Dict[str, PortalSession] = {}

    def create(self) -> PortalSession:
        session_id = secrets.token_urlsafe(16)
        while session_id in self._sessions:
            session_id = secrets.token_urlsafe(16)
        session = PortalSession(session_id=session_id)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> PortalSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError() from None
