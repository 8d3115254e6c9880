# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client-side authentication session.

The session owns the signed-in user, the refresh token and the last error,
and publishes them as immutable :class:`SessionState` snapshots. Mutating
operations (``initialize``, ``login``, ``register``, ``logout``) are queued
behind one lock, so a snapshot is only ever replaced as a whole when an
operation starts or settles.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace

from frontend.domain.session.entities import SessionState, SessionStatus
from frontend.domain.users.entities import AuthResult, User
from frontend.domain.users.repositories import AuthGateway, CredentialStore
from frontend.shared.errors import AppError, StorageError
from frontend.shared.logging import correlation_scope, logger

SessionListener = Callable[[SessionState], None]

DEFAULT_REFRESH_TOKEN_KEY = "refresh_token"
LOGIN_FAILED = "Login failed"
REGISTRATION_FAILED = "Registration failed"


def _failure_message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, AppError):
        return exc.message or fallback
    return str(exc) or fallback


class SessionManager:
    def __init__(
        self,
        *,
        gateway: AuthGateway,
        store: CredentialStore,
        refresh_token_key: str = DEFAULT_REFRESH_TOKEN_KEY,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._refresh_token_key = refresh_token_key
        self._refresh_token: str | None = store.get(refresh_token_key)
        self._resolved = False
        self._state = SessionState.derive(user=None, resolved=False)
        self._listeners: list[SessionListener] = []
        self._lock = asyncio.Lock()
        logger.debug(
            f"SessionManager: initialized stored_token={self._refresh_token is not None}"
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def has_refresh_token(self) -> bool:
        return self._refresh_token is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for every published snapshot.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, state: SessionState) -> SessionState:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("SessionManager: listener failed")
        return state

    def _settle(self, user: User | None, error: str | None = None) -> SessionState:
        self._resolved = True
        return self._publish(SessionState.derive(user=user, resolved=True, error=error))

    def _remember(self, refresh_token: str) -> None:
        self._store.set(self._refresh_token_key, refresh_token)
        self._refresh_token = refresh_token

    def _forget(self) -> None:
        self._refresh_token = None
        try:
            self._store.delete(self._refresh_token_key)
        except StorageError:
            logger.exception("SessionManager: failed to remove stored refresh token")

    async def initialize(self) -> SessionState:
        """Resolve the session once at startup.

        The ambient access cookie is checked first; only when that fails and a
        refresh token was stored is a single refresh attempted. Any failure
        ends in ``UNAUTHENTICATED``.
        """
        async with self._lock:
            if self._resolved:
                logger.debug("SessionManager: already resolved, skipping initialization")
                return self._state

            with correlation_scope():
                error = self._state.error
                try:
                    user = await self._gateway.current_user()
                except Exception as exc:
                    logger.info(f"SessionManager: no active session ({exc})")
                else:
                    logger.info(f"SessionManager: session restored user_id={user.id}")
                    return self._settle(user, error)

                if self._refresh_token is None:
                    return self._settle(None, error)

                try:
                    result = await self._gateway.refresh(self._refresh_token)
                    self._remember(result.refresh_token)
                except Exception as exc:
                    logger.info(f"SessionManager: refresh failed ({exc}), clearing token")
                    self._forget()
                    return self._settle(None, error)

                logger.info(f"SessionManager: session renewed user_id={result.user.id}")
                return self._settle(result.user, error)

    async def _authenticate(
        self,
        action: str,
        call: Callable[[], Awaitable[AuthResult]],
        fallback: str,
    ) -> SessionState:
        async with self._lock:
            with correlation_scope():
                self._publish(
                    SessionState.derive(
                        user=self._state.user, resolved=self._resolved, busy=True
                    )
                )
                try:
                    result = await call()
                    self._remember(result.refresh_token)
                except Exception as exc:
                    message = _failure_message(exc, fallback)
                    logger.warning(f"SessionManager: {action} failed: {message}")
                    self._settle(None, message)
                    raise

                logger.info(f"SessionManager: {action} ok user_id={result.user.id}")
                return self._settle(result.user)

    async def login(self, email: str, password: str) -> SessionState:
        """Sign in; on failure the error is recorded in the state and re-raised."""
        return await self._authenticate(
            "login",
            lambda: self._gateway.login(email, password),
            LOGIN_FAILED,
        )

    async def register(self, username: str, email: str, password: str) -> SessionState:
        """Create an account and sign in; failures are recorded and re-raised."""
        return await self._authenticate(
            "register",
            lambda: self._gateway.register(username, email, password),
            REGISTRATION_FAILED,
        )

    async def logout(self) -> SessionState:
        """Sign out locally, telling the backend on a best-effort basis."""
        async with self._lock:
            with correlation_scope():
                if self._refresh_token is not None:
                    try:
                        await self._gateway.logout(self._refresh_token)
                    except Exception:
                        logger.exception("SessionManager: backend logout failed")

                self._forget()
                logger.info("SessionManager: logged out")
                return self._settle(None, self._state.error)

    def clear_error(self) -> SessionState:
        if self._state.error is None:
            return self._state
        return self._publish(replace(self._state, error=None))


__all__ = [
    "DEFAULT_REFRESH_TOKEN_KEY",
    "LOGIN_FAILED",
    "REGISTRATION_FAILED",
    "SessionListener",
    "SessionManager",
]
