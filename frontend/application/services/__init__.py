# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session_manager import SessionListener, SessionManager

__all__ = ["SessionListener", "SessionManager"]
