"""Use-case for ending the current session."""

from __future__ import annotations

from forum_api.domain.sessions import UserSession


class LogoutUserUseCase:
    def execute(self, session: UserSession) -> bool:
        was_authenticated = session.user_id is not None
        session.clear()
        return was_authenticated
