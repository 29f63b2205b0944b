"""Use-case resolving the session to its user."""

from __future__ import annotations

from forum_api.domain.sessions import UserSession
from forum_api.domain.users.entities import User
from forum_api.domain.users.repositories import UserRepository


class CurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, session: UserSession) -> User | None:
        user_id = session.user_id
        if user_id is None:
            return None
        # A session pointing at a removed user reads as anonymous.
        return self._users.find_by_id(user_id)
