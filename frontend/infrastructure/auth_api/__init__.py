# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .client import (
    CURRENT_USER_PATH,
    LOGIN_PATH,
    LOGOUT_PATH,
    REFRESH_PATH,
    REGISTER_PATH,
    HttpAuthApiClient,
)

__all__ = [
    "CURRENT_USER_PATH",
    "LOGIN_PATH",
    "LOGOUT_PATH",
    "REFRESH_PATH",
    "REGISTER_PATH",
    "HttpAuthApiClient",
]
