# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import SessionState, SessionStatus
from .users import AuthGateway, AuthResult, CredentialStore, User

__all__ = [
    "AuthGateway",
    "AuthResult",
    "CredentialStore",
    "SessionState",
    "SessionStatus",
    "User",
]
