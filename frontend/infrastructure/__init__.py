# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_api import HttpAuthApiClient
from .storage import FileCredentialStore

__all__ = ["FileCredentialStore", "HttpAuthApiClient"]
