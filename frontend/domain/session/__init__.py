# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import SessionState, SessionStatus

__all__ = ["SessionState", "SessionStatus"]
