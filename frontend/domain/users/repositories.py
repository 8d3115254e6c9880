# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import AuthResult, User


class AuthGateway(Protocol):
    async def register(self, username: str, email: str, password: str) -> AuthResult: ...
    async def login(self, email: str, password: str) -> AuthResult: ...
    async def refresh(self, refresh_token: str) -> AuthResult: ...
    async def logout(self, refresh_token: str) -> None: ...
    async def current_user(self) -> User: ...


class CredentialStore(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
