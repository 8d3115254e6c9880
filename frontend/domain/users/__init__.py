# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthResult, User
from .repositories import AuthGateway, CredentialStore

__all__ = ["AuthGateway", "AuthResult", "CredentialStore", "User"]
