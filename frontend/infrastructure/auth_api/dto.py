# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from frontend.domain.users.entities import AuthResult, User


class RegisterRequestDTO(BaseModel):
    username: str
    email: str
    password: str


class LoginRequestDTO(BaseModel):
    email: str
    password: str


class RefreshRequestDTO(BaseModel):
    refresh_token: str


class UserDTO(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime

    model_config = ConfigDict(extra="ignore")

    def to_entity(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )


class AuthResponseDTO(BaseModel):
    user: UserDTO
    access_token: str
    refresh_token: str

    model_config = ConfigDict(extra="ignore")

    def to_entity(self) -> AuthResult:
        return AuthResult(
            user=self.user.to_entity(),
            access_token=self.access_token,
            refresh_token=self.refresh_token,
        )
