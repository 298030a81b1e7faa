"""Per-session active-member state.

Every bearer session (one per signed-in device) gets its own
``SessionProvider`` and ``ActiveMemberStore``. They are always created as a
pair so the store is subscribed before any session is published.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from kinchart.services.active_member import ActiveMemberStore
from kinchart.services.session_provider import SessionProvider, UserSession


@dataclass
class MemberContext:
    """Session provider and active-member store of one client session."""

    session_provider: SessionProvider
    active_members: ActiveMemberStore

    @classmethod
    def create(cls) -> MemberContext:
        provider = SessionProvider()
        return cls(session_provider=provider, active_members=ActiveMemberStore(provider))


class MemberContextRegistry:
    """Process-wide registry of client-session contexts, created once per app.

    Contexts are keyed by bearer token, so every signed-in device keeps its
    own selection. A context is dropped when its token is signed out or
    rejected as expired.
    """

    def __init__(self) -> None:
        self._contexts: dict[str, MemberContext] = {}
        self._owners: dict[str, str] = {}

    def get(self, token: str) -> MemberContext | None:
        return self._contexts.get(token)

    def publish(self, session: UserSession) -> MemberContext:
        """Publish a validated session to its token's provider, creating the
        context on first use."""
        if not session.access_token:
            raise ValueError("Session has no access token")
        context = self._contexts.get(session.access_token)
        if context is None:
            context = MemberContext.create()
            self._contexts[session.access_token] = context
            self._owners[session.access_token] = session.user.id
        context.session_provider.publish(session)
        return context

    def for_user(self, user_id: str) -> list[MemberContext]:
        """Contexts of every live session of an account."""
        return [self._contexts[token] for token, owner in self._owners.items() if owner == user_id]

    def sign_out(self, token: str) -> None:
        """Publish an absent session for the token and forget its context."""
        context = self._contexts.pop(token, None)
        self._owners.pop(token, None)
        if context is not None:
            context.session_provider.publish(None)
            context.active_members.close()

    def __len__(self) -> int:
        return len(self._contexts)


def get_member_contexts(request: Request) -> MemberContextRegistry:
    """FastAPI dependency returning the application's registry."""
    return request.app.state.member_contexts
