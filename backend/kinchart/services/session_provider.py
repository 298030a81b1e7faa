"""Observable authentication session.

The provider holds the account's current session and notifies subscribers
whenever a session is published: at sign-in, on every authenticated request
(the equivalent of a token refresh) and with ``None`` at sign-out.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """The authenticated account."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class UserSession:
    """A validated bearer session."""

    user: SessionUser
    access_token: str | None = None
    expires_at: datetime | None = None


SessionListener = Callable[["UserSession | None"], None]


class SessionProvider:
    """Current session plus a loading flag, observable via ``subscribe``."""

    def __init__(self) -> None:
        self._session: UserSession | None = None
        self._loading = True
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> UserSession | None:
        return self._session

    @property
    def loading(self) -> bool:
        """True until the first session (or absence of one) is published."""
        return self._loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, session: UserSession | None) -> None:
        """Store the session and notify listeners in subscription order."""
        self._session = session
        self._loading = False
        for listener in list(self._listeners):
            listener(session)
        logger.debug(
            "Session published for %s",
            session.user.id if session else "<signed out>",
        )
