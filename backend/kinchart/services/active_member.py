"""Active-member selection.

Every record list and every record creation operates on the "active" member:
either the account holder ("Self") or one of their family members. The store
derives its default from the session the first time one appears and never
overrides a selection afterwards.
"""

from __future__ import annotations

import logging

from kinchart.constants import SELF_LABEL
from kinchart.schemas.active_member import ActiveMember, MemberType
from kinchart.services.session_provider import SessionProvider, UserSession

logger = logging.getLogger(__name__)


def self_member(user_id: str) -> ActiveMember:
    """The default selection for an account."""
    return ActiveMember(id=user_id, type=MemberType.USER, label=SELF_LABEL)


class ActiveMemberStore:
    """Holds the currently selected member for one account.

    The store subscribes to the session provider when it is constructed, so
    it can never miss the first session. A session arriving while nothing is
    selected installs the "Self" default; later sessions (refreshes, repeated
    publishes) leave the selection alone. Publishing ``None`` (sign-out)
    clears it.
    """

    def __init__(self, session_provider: SessionProvider):
        self._session_provider = session_provider
        self._active: ActiveMember | None = None
        self._unsubscribe = session_provider.subscribe(self._on_session)
        if session_provider.session is not None:
            self._on_session(session_provider.session)

    def get_active_member(self) -> ActiveMember | None:
        return self._active

    def set_active_member(self, member: ActiveMember) -> None:
        """Replace the selection. The id is not checked here; callers pass
        identifiers they have already fetched."""
        self._active = member

    def member_deleted(self, member_id: str) -> bool:
        """Fall back to "Self" if the deleted family member was active.

        Returns:
            True if the selection changed.
        """
        active = self._active
        if active is None or active.id != member_id or active.type != MemberType.FAMILY:
            return False

        session = self._session_provider.session
        self._active = self_member(session.user.id) if session else None
        logger.info("Active member %s deleted, reverted to Self", member_id)
        return True

    def close(self) -> None:
        """Detach from the session provider."""
        self._unsubscribe()

    def _on_session(self, session: UserSession | None) -> None:
        if session is None:
            self._active = None
        elif self._active is None:
            self._active = self_member(session.user.id)
