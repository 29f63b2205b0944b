from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask, jsonify, session
from itsdangerous import Signer

from forum_api.domain.sessions import SessionRecord
from forum_api.infrastructure.sessions import InMemorySessionStore
from forum_api.shared.config import AppConfig, load_config
from forum_api.shared.errors.base import SessionStoreUnavailableError
from forum_api.shared.middleware.error_handler import configure_error_handling
from forum_api.shared.middleware.sessions import StoreSessionInterface, configure_sessions

TEN_YEARS = 315_360_000


class RecordingStore(InMemorySessionStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []
        self.ttls: list[int] = []
        self.fail_on: set[str] = set()

    def load(self, sid):
        self.calls.append(("load", sid))
        if "load" in self.fail_on:
            raise SessionStoreUnavailableError("load")
        return super().load(sid)

    def save(self, sid, record, ttl_seconds):
        self.calls.append(("save", sid))
        self.ttls.append(ttl_seconds)
        if "save" in self.fail_on:
            raise SessionStoreUnavailableError("save")
        super().save(sid, record, ttl_seconds)

    def destroy(self, sid):
        self.calls.append(("destroy", sid))
        super().destroy(sid)


def build_app(store: RecordingStore, config: AppConfig | None = None) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    configure_sessions(app, store, config or load_config())

    @app.post("/login/<int:user_id>")
    def login(user_id: int):
        session.user_id = user_id
        return jsonify(ok=True)

    @app.get("/whoami")
    def whoami():
        return jsonify(user_id=session.user_id)

    @app.post("/visit")
    def visit():
        session["visits"] = session.get("visits", 0) + 1
        return jsonify(visits=session["visits"])

    @app.post("/logout")
    def logout():
        session.clear()
        return jsonify(ok=True)

    return app


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def client(store: RecordingStore):
    return build_app(store).test_client()


def _set_cookie_headers(response) -> list[str]:
    return response.headers.getlist("Set-Cookie")


def test_request_without_cookie_touches_nothing(client, store: RecordingStore) -> None:
    response = client.get("/whoami")

    assert response.get_json() == {"user_id": None}
    assert store.calls == []
    assert _set_cookie_headers(response) == []


def test_login_issues_signed_long_lived_cookie(client, store: RecordingStore) -> None:
    response = client.post("/login/7")

    [header] = _set_cookie_headers(response)
    assert header.startswith("qid=")
    assert f"Max-Age={TEN_YEARS}" in header
    assert "HttpOnly" in header
    assert "SameSite=Lax" in header
    assert "Secure" not in header

    [(operation, sid)] = store.calls
    assert operation == "save"
    assert store.ttls == [TEN_YEARS]
    # The cookie carries the signed id, not the bare id.
    cookie = client.get_cookie("qid")
    assert cookie.value != sid
    assert cookie.value.startswith(sid)


def test_reads_resolve_identity_without_writing(client, store: RecordingStore) -> None:
    client.post("/login/7")
    store.calls.clear()

    response = client.get("/whoami")

    assert response.get_json() == {"user_id": 7}
    assert _set_cookie_headers(response) == []
    assert [op for op, _ in store.calls] == ["load"]


def test_modified_session_keeps_sid_and_expiry(client, store: RecordingStore) -> None:
    client.post("/login/7")
    [(_, sid)] = store.calls

    response = client.post("/visit")

    assert response.get_json() == {"visits": 1}
    assert _set_cookie_headers(response) == []
    assert store.calls[-1] == ("save", sid)
    assert store.ttls[-1] <= TEN_YEARS
    assert client.get("/whoami").get_json() == {"user_id": 7}


def test_tampered_cookie_is_anonymous(client, store: RecordingStore) -> None:
    client.set_cookie("qid", "forged-session-id.bad-signature")

    response = client.get("/whoami")

    assert response.get_json() == {"user_id": None}
    assert store.calls == []


def test_unknown_session_id_is_anonymous(store: RecordingStore) -> None:
    app = build_app(store)
    client = app.test_client()
    client.post("/login/7")
    [(_, sid)] = store.calls
    store.destroy(sid)

    assert client.get("/whoami").get_json() == {"user_id": None}


def test_logout_destroys_record_and_expires_cookie(client, store: RecordingStore) -> None:
    client.post("/login/7")
    [(_, sid)] = store.calls

    response = client.post("/logout")

    [header] = _set_cookie_headers(response)
    assert header.startswith("qid=;")
    assert "Max-Age=0" in header
    assert ("destroy", sid) in store.calls
    assert store.load(sid) is None
    assert client.get("/whoami").get_json() == {"user_id": None}


def test_clearing_an_anonymous_session_saves_nothing(client, store: RecordingStore) -> None:
    response = client.post("/logout")

    assert _set_cookie_headers(response) == []
    assert store.calls == []


def test_store_outage_on_load_degrades_to_anonymous(client, store: RecordingStore) -> None:
    client.post("/login/7")
    store.fail_on.add("load")

    response = client.get("/whoami")

    assert response.status_code == 200
    assert response.get_json() == {"user_id": None}


def test_store_outage_on_save_fails_the_request(client, store: RecordingStore) -> None:
    store.fail_on.add("save")

    response = client.post("/login/7")

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}
    assert client.get_cookie("qid") is None
    # the error response is finalized without a second write
    assert [operation for operation, _ in store.calls] == ["save"]


def test_production_marks_cookie_secure(store: RecordingStore) -> None:
    config = AppConfig(APP_ENV="production", SECRET_KEY="a-long-random-production-secret")
    client = build_app(store, config).test_client()

    response = client.post("/login/7")

    [header] = _set_cookie_headers(response)
    assert "Secure" in header


def test_session_past_its_lifetime_is_destroyed_with_cookie(store: RecordingStore) -> None:
    app = build_app(store)
    client = app.test_client()
    created_at = datetime.now(UTC) - timedelta(seconds=TEN_YEARS + 60)
    store.save("old-sid", SessionRecord(data={"user_id": 7}, created_at=created_at), 60)
    signer = Signer(app.secret_key, salt=StoreSessionInterface.salt, key_derivation="hmac")
    client.set_cookie("qid", signer.sign("old-sid").decode("utf-8"))
    store.calls.clear()

    response = client.post("/visit")

    [header] = _set_cookie_headers(response)
    assert header.startswith("qid=;")
    assert "Max-Age=0" in header
    assert store.calls == [("load", "old-sid"), ("destroy", "old-sid")]
    assert store.load("old-sid") is None
