# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client-side authentication session for the web app template."""

from .application import SessionListener, SessionManager
from .container import Container
from .domain import AuthResult, SessionState, SessionStatus, User
from .shared.errors import RequestFailedError

__all__ = [
    "AuthResult",
    "Container",
    "RequestFailedError",
    "SessionListener",
    "SessionManager",
    "SessionState",
    "SessionStatus",
    "User",
]
