# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class AuthResult:

    user: User
    access_token: str
    refresh_token: str
