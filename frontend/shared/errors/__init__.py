# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import AppError, RequestFailedError, RequestFailureKind, StorageError
from .validation import describe_validation_error, format_pydantic_errors

__all__ = [
    "AppError",
    "RequestFailedError",
    "RequestFailureKind",
    "StorageError",
    "describe_validation_error",
    "format_pydantic_errors",
]
