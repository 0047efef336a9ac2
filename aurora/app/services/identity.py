"""Caller identity in one of two mutually exclusive modes.

Cookie mode trusts a named cookie verbatim and keeps a last-seen registry.
Token mode only trusts opaque tokens it minted itself and looks them up on
every request. Switching modes drops every session and every token.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

log = logging.getLogger(__name__)

TOKEN_PARAM = "token"


class AuthMode(str, Enum):
    COOKIE = "cookie"
    TOKEN = "token"


@dataclass(frozen=True)
class ResolvedIdentity:
    """Who the caller is (if anyone) and how links must carry that."""

    username: str | None = None
    mode: AuthMode = AuthMode.COOKIE
    token: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.username is not None

    def link(self, path: str) -> str:
        if self.mode is not AuthMode.TOKEN or not self.token:
            return path
        parts = urlsplit(path)
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != TOKEN_PARAM]
        query.append((TOKEN_PARAM, self.token))
        return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass(frozen=True)
class TokenRecord:
    username: str
    created_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


def mint_token(username: str) -> str:
    prefix = hashlib.sha256(username.encode("utf-8")).hexdigest()[:8]
    return f"{prefix}-{secrets.token_hex(16)}"


class CookieSessions:
    mode = AuthMode.COOKIE

    def __init__(self) -> None:
        self.last_seen: dict[str, datetime] = {}

    def resolve(self, *, cookie: str | None, token: str | None) -> ResolvedIdentity:
        if not cookie:
            return ResolvedIdentity(mode=self.mode)
        self.last_seen[cookie] = _now()
        return ResolvedIdentity(username=cookie, mode=self.mode)

    def login(self, username: str) -> ResolvedIdentity:
        self.last_seen[username] = _now()
        return ResolvedIdentity(username=username, mode=self.mode)

    def logout(self, identity: ResolvedIdentity) -> None:
        if identity.username is not None:
            self.last_seen.pop(identity.username, None)


class TokenRegistry:
    mode = AuthMode.TOKEN

    def __init__(self) -> None:
        self.tokens: dict[str, TokenRecord] = {}

    def resolve(self, *, cookie: str | None, token: str | None) -> ResolvedIdentity:
        record = self.tokens.get(token) if token else None
        if record is None:
            return ResolvedIdentity(mode=self.mode)
        return ResolvedIdentity(username=record.username, mode=self.mode, token=token)

    def login(self, username: str) -> ResolvedIdentity:
        token = mint_token(username)
        self.tokens[token] = TokenRecord(username=username, created_at=_now())
        return ResolvedIdentity(username=username, mode=self.mode, token=token)

    def logout(self, identity: ResolvedIdentity) -> None:
        if identity.token is not None:
            self.tokens.pop(identity.token, None)


class IdentityResolver:
    def __init__(self, mode: AuthMode = AuthMode.COOKIE) -> None:
        self._lock = threading.Lock()
        self._backend: CookieSessions | TokenRegistry = self._fresh_backend(AuthMode(mode))

    @staticmethod
    def _fresh_backend(mode: AuthMode) -> CookieSessions | TokenRegistry:
        return TokenRegistry() if mode is AuthMode.TOKEN else CookieSessions()

    @property
    def mode(self) -> AuthMode:
        return self._backend.mode

    @property
    def backend(self) -> CookieSessions | TokenRegistry:
        return self._backend

    def resolve(self, *, cookie: str | None = None, token: str | None = None) -> ResolvedIdentity:
        with self._lock:
            return self._backend.resolve(cookie=cookie, token=token)

    def login(self, username: str) -> ResolvedIdentity:
        with self._lock:
            identity = self._backend.login(username)
        log.info("Login %s (%s mode)", username, identity.mode.value)
        return identity

    def logout(self, identity: ResolvedIdentity) -> None:
        with self._lock:
            # A token minted before a mode switch is already gone.
            if identity.mode is self._backend.mode:
                self._backend.logout(identity)

    def switch_mode(self, mode: AuthMode) -> bool:
        """Reset all sessions and tokens under a new mode; no-op if the mode is unchanged."""
        # Cookies are trusted verbatim, so a browser that kept its cookie across
        # token -> cookie is identified again without logging in; only the
        # registries can be reset here.
        mode = AuthMode(mode)
        with self._lock:
            if mode is self._backend.mode:
                return False
            self._backend = self._fresh_backend(mode)
        log.warning("Authentication mode switched to %s; all sessions and tokens cleared", mode.value)
        return True
