"""
Storefront API — Authentication Service
=========================================

What:  Issues, verifies and revokes bearer tokens; checks login credentials.
Why:   Guards the /api/v2 resource routes and backs POST /login and /logout.
How:   A token is an HS256 JWT (python-jose) whose `jti` names a session in
       the in-memory SessionRegistry. A token is accepted only while:
         1. its signature verifies with settings.secret_key
         2. its `exp` has not passed
         3. its session is still registered (not logged out, not expired)
       Logging out removes the session, so a signed, unexpired token stops
       working immediately.
Who:   Created once per application in create_app() (app.state.auth_service);
       used by the require_auth guard and the auth routes.

Limitations:
    Sessions live in process memory: a restart logs everyone out and
    sessions are not shared between workers.
"""

import logging
import math
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from storefront.exceptions import InvalidCredentialsError, UnauthorizedError
from storefront.models.user import User
from storefront.services.passwords import verify_password
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Session:
    session_id: str
    subject: str
    username: str
    issued_at: float
    expires_at: float


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity attached to request.state.user by the auth guard."""
    user_id: int
    username: str
    session_id: str


@dataclass(frozen=True)
class IssuedToken:
    token: str
    session: Session

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.session.expires_at, tz=timezone.utc)


class SessionRegistry:
    """
    Active sessions keyed by session id.

    Expired sessions are dropped lazily when looked up and swept whenever a
    new session is opened.
    """

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def open(self, subject: str, username: str, ttl_seconds: float) -> Session:
        now = self._clock()
        session = Session(
            session_id=uuid.uuid4().hex,
            subject=subject,
            username=username,
            issued_at=now,
            expires_at=now + ttl_seconds,
        )
        with self._lock:
            self._sweep(now)
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        """The session if it exists and has not expired, else None."""
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._clock() >= session.expires_at:
                del self._sessions[session_id]
                return None
            return session

    def revoke(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def _sweep(self, now: float) -> None:
        expired = [sid for sid, s in self._sessions.items() if now >= s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Swept %d expired sessions", len(expired))


class AuthService:
    """
    Token lifecycle and credential checks.

    Args:
        secret_key:     HMAC key for signing tokens
        algorithm:      JWT algorithm (HS256)
        token_ttl:      Seconds a token stays valid after login
        registry:       Session store; a fresh one is created when omitted
        clock:          Time source in epoch seconds (injectable for tests)
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        token_ttl: float = 3600,
        registry: Optional[SessionRegistry] = None,
        clock: Clock = time.time,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_ttl = token_ttl
        self._clock = clock
        self.registry = registry if registry is not None else SessionRegistry(clock=clock)

    # ── Token lifecycle ───────────────────────────────────────────────────

    def issue(self, user: User) -> IssuedToken:
        """Open a session for `user` and sign a token referencing it."""
        session = self.registry.open(
            subject=str(user.user_id),
            username=user.username,
            ttl_seconds=self.token_ttl,
        )
        claims = {
            "sub": session.subject,
            "username": session.username,
            "jti": session.session_id,
            "iat": int(session.issued_at),
            # Rounded up so the claim never lapses before the session does
            "exp": math.ceil(session.expires_at),
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return IssuedToken(token=token, session=session)

    def verify(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Resolve a token to the identity it was issued for.

        Raises:
            UnauthorizedError: missing, malformed, tampered, expired,
                               unknown or revoked token
        """
        if not token:
            raise UnauthorizedError(reason="missing_token")
        try:
            # Expiry is checked below against the service clock, not by jose
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise UnauthorizedError(message="Invalid token", reason="invalid_token")

        exp = claims.get("exp")
        if not isinstance(exp, int):
            raise UnauthorizedError(message="Invalid token", reason="invalid_token")
        if self._clock() >= exp:
            raise UnauthorizedError(message="Token has expired", reason="expired_token")

        session = self.registry.get(claims.get("jti"))
        if session is None or session.subject != claims.get("sub"):
            raise UnauthorizedError(message="Session is no longer active", reason="inactive_session")

        return AuthenticatedUser(
            user_id=int(session.subject),
            username=session.username,
            session_id=session.session_id,
        )

    def revoke(self, token: Optional[str]) -> bool:
        """
        End the session a token refers to. Expired tokens can still be
        revoked; tokens with a bad signature are ignored.
        """
        if not token:
            return False
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return False
        return self.registry.revoke(claims.get("jti"))

    # ── Login / logout ────────────────────────────────────────────────────

    async def login(self, db: AsyncSession, username: str, password: str) -> IssuedToken:
        """
        Check credentials against the stored user and issue a token.

        Raises:
            InvalidCredentialsError: unknown username or wrong password (one
                                     message for both)
        """
        user = await user_service.get_by_username(db, username)
        stored_hash = user.password_hash if user is not None else None
        valid = await run_in_threadpool(verify_password, password, stored_hash)
        if user is None or not valid:
            logger.warning("Failed login attempt for username '%s'", username)
            raise InvalidCredentialsError()

        issued = self.issue(user)
        logger.info("User %s logged in (session %s)", user.user_id, issued.session.session_id[:8])
        return issued

    def logout(self, token: Optional[str]) -> None:
        """Always succeeds; a token that names no live session is a no-op."""
        if self.revoke(token):
            logger.info("Session revoked on logout")
