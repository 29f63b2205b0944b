# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Server-side sessions behind an opaque, signed cookie.

The cookie only carries a random session id signed with ``SECRET_KEY``;
the session contents live in a :class:`SessionStore`. A session is loaded
before the view runs and written back after it, and only when the view
changed it. Expiry is fixed at creation: reads never refresh it.
"""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from flask import Flask, Request, Response
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from forum_api.application.interfaces import SessionStore
from forum_api.domain.sessions import SessionRecord
from forum_api.shared.config.settings import AppConfig
from forum_api.shared.errors.base import SessionStoreUnavailableError
from forum_api.shared.logging import logger

USER_ID_KEY = "user_id"


class ServerSession(CallbackDict, SessionMixin):
    """Mutable per-request session; ``modified`` flips on any write."""

    def __init__(
        self,
        initial: dict[str, Any] | None = None,
        *,
        sid: str | None = None,
        created_at: datetime | None = None,
    ) -> None:
        def on_update(self_: ServerSession) -> None:
            self_.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.created_at = created_at
        self.modified = False

    @property
    def new(self) -> bool:  # type: ignore[override]
        return self.sid is None

    @property
    def user_id(self) -> int | None:
        value = self.get(USER_ID_KEY)
        return int(value) if value is not None else None

    @user_id.setter
    def user_id(self, value: int | None) -> None:
        if value is None:
            self.pop(USER_ID_KEY, None)
        else:
            self[USER_ID_KEY] = int(value)


class StoreSessionInterface(SessionInterface):
    session_class = ServerSession
    salt = "forum-api.session"

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def _signer(self, app: Flask) -> Signer | None:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt, key_derivation="hmac")

    def _expire_cookie(self, app: Flask, response: Response) -> None:
        response.delete_cookie(
            self.get_cookie_name(app),
            domain=self.get_cookie_domain(app),
            path=self.get_cookie_path(app),
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
            httponly=self.get_cookie_httponly(app),
        )

    def open_session(self, app: Flask, request: Request) -> ServerSession | None:
        signer = self._signer(app)
        if signer is None:
            return None

        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self.session_class()

        try:
            sid = signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            logger.warning("sessions: cookie with bad signature ignored")
            return self.session_class()

        try:
            record = self._store.load(sid)
        except SessionStoreUnavailableError:
            logger.warning("sessions: store unavailable on load, continuing anonymous")
            return self.session_class()

        if record is None:
            logger.debug("sessions: unknown or expired session id")
            return self.session_class()
        return self.session_class(record.data, sid=sid, created_at=record.created_at)

    def save_session(self, app: Flask, session: SessionMixin, response: Response) -> None:
        assert isinstance(session, ServerSession)
        if not session.modified:
            return
        # Consumed up front: if the store write fails, Flask finalizes the error
        # response through here again and must not retry it.
        session.modified = False

        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)
        lifetime = int(app.permanent_session_lifetime.total_seconds())

        if not session:
            # Anonymous sessions are never stored; emptied stored ones are destroyed.
            if session.sid is not None:
                self._store.destroy(session.sid)
                self._expire_cookie(app, response)
                logger.info("sessions: destroyed")
            return

        if session.new:
            record = SessionRecord(data=dict(session))
            sid = secrets.token_urlsafe(32)
            self._store.save(sid, record, lifetime)
            session.sid = sid
            session.created_at = record.created_at

            signer = self._signer(app)
            assert signer is not None
            response.set_cookie(
                name,
                signer.sign(sid).decode("utf-8"),
                max_age=lifetime,
                httponly=httponly,
                secure=secure,
                samesite=samesite,
                domain=domain,
                path=path,
            )
            response.vary.add("Cookie")
            logger.info("sessions: issued new session")
            return

        record = SessionRecord(
            data=dict(session), created_at=session.created_at or datetime.now(UTC)
        )
        ttl = record.remaining_ttl(lifetime)
        if ttl <= 0:
            self._store.destroy(session.sid)
            self._expire_cookie(app, response)
            logger.info("sessions: lifetime reached, destroyed")
            return
        self._store.save(session.sid, record, ttl)


def configure_sessions(app: Flask, store: SessionStore, config: AppConfig) -> None:
    app.config.update(
        SECRET_KEY=config.secret_key,
        SESSION_COOKIE_NAME=config.session.cookie_name,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=config.is_production(),
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=config.session.lifetime_seconds),
    )
    app.session_interface = StoreSessionInterface(store)


__all__ = ["ServerSession", "StoreSessionInterface", "configure_sessions"]
