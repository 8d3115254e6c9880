# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Observable authentication state handed to session consumers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from frontend.domain.users.entities import User


class SessionStatus(StrEnum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(slots=True, frozen=True)
class SessionState:
    """Immutable snapshot of a session.

    ``status`` is always derived from ``user`` and whether the session has
    settled at least once, so ``user is not None`` exactly when the status is
    ``AUTHENTICATED``. ``busy`` marks a login or registration in flight and
    ``error`` holds the message of the last failed attempt.
    """

    status: SessionStatus
    user: User | None = None
    error: str | None = None
    busy: bool = False

    @classmethod
    def derive(
        cls,
        *,
        user: User | None,
        resolved: bool,
        error: str | None = None,
        busy: bool = False,
    ) -> SessionState:
        if user is not None:
            status = SessionStatus.AUTHENTICATED
        elif resolved:
            status = SessionStatus.UNAUTHENTICATED
        else:
            status = SessionStatus.LOADING
        return cls(status=status, user=user, error=error, busy=busy)

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.LOADING or self.busy
