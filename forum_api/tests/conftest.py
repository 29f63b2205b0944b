from __future__ import annotations

import os
import tempfile

# Configuration is read once per process, so it has to be in place before
# anything from forum_api is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="forum-api-tests-")
os.environ["APP_ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'forum.db')}"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_PARALLELISM"] = "1"
os.environ["RESILIENCE_RETRIES"] = "1"
os.environ["RESILIENCE_BACKOFF_BASE"] = "0.01"
os.environ["RESILIENCE_BACKOFF_CAP"] = "0.01"
os.environ["GRAPHQL_IDE"] = "0"

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402

from forum_api.application.use_cases.users import (  # noqa: E402
    CurrentUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RegisterUserUseCase,
)
from forum_api.domain.users.entities import User  # noqa: E402
from forum_api.domain.users.exceptions import UserAlreadyExistsError  # noqa: E402
from forum_api.domain.users.repositories import PasswordHasher, UserRepository  # noqa: E402
from forum_api.interfaces.graphql import AuthUseCases  # noqa: E402
from forum_api.shared.middleware.sessions import ServerSession  # noqa: E402


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1
        self.add_calls = 0

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: int) -> User | None:
        for user in self._users.values():
            if user.id == user_id:
                return user
        return None

    def add(self, user: User) -> User:
        self.add_calls += 1
        if user.username in self._users:
            raise UserAlreadyExistsError()
        new_user = User(
            id=self._seq,
            username=user.username,
            password_hash=user.password_hash,
            created_at=datetime.now(UTC),
        )
        self._seq += 1
        self._users[new_user.username] = new_user
        return new_user

    def remove(self, username: str) -> None:
        self._users.pop(username, None)

    def count(self, username: str) -> int:
        return sum(1 for user in self._users.values() if user.username == username)


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.hash_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def session() -> ServerSession:
    return ServerSession()


@pytest.fixture()
def auth(users: InMemoryUserRepository, hasher: DeterministicHasher) -> AuthUseCases:
    return AuthUseCases(
        register=RegisterUserUseCase(users=users, password_hasher=hasher),
        login=LoginUserUseCase(users=users, password_hasher=hasher),
        logout=LogoutUserUseCase(),
        current_user=CurrentUserUseCase(users=users),
    )
