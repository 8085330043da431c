"""Local anonymous identity provider."""

import uuid
from typing import Callable, Optional

from paytrack.database.base import IdentityProvider, SessionHandler
from paytrack.domain.entities import Session
from paytrack.logging_setup import get_logger

logger = get_logger(__name__)


class LocalIdentityProvider(IdentityProvider):
    """Issues anonymous sessions in-process.

    Handlers are called synchronously, in registration order, whenever the
    session changes.
    """

    def __init__(self, uid: Optional[str] = None):
        """Initialize identity provider.

        Args:
            uid: Fixed anonymous uid to reuse; a random one is issued if None
        """
        self._uid = uid
        self._session: Optional[Session] = None
        self._handlers: list[SessionHandler] = []

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    def establish_anonymous_session(self) -> Session:
        """Sign in anonymously, reusing the current session if there is one."""
        if self._session is not None:
            return self._session
        session = Session(uid=self._uid or uuid.uuid4().hex)
        logger.info("Established anonymous session %s", session.uid)
        self._set_session(session)
        return session

    def sign_out(self) -> None:
        """Drop the current session."""
        if self._session is None:
            return
        logger.info("Signed out session %s", self._session.uid)
        self._set_session(None)

    def on_session_change(self, handler: SessionHandler) -> Callable[[], None]:
        """Register a handler; it is called at once with the current session."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        handler(self._session)
        return unsubscribe

    def _set_session(self, session: Optional[Session]) -> None:
        self._session = session
        for handler in list(self._handlers):
            handler(session)
