# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    message: str
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class RequestFailureKind(StrEnum):
    TRANSPORT = "transport"
    HTTP = "http"
    DECODE = "decode"


class RequestFailedError(AppError):
    """Any failed backend call: the request never completed, the server
    answered with a non-2xx status, or a success body could not be decoded.

    The three cases share one type on purpose; ``kind`` and ``status_code``
    are kept for callers that want to tell them apart.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: RequestFailureKind = RequestFailureKind.HTTP,
        status_code: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code="request_failed", message=message, context=context)
        self.kind = kind
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["kind"] = str(self.kind)
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload


class StorageError(AppError):
    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code="storage_error", message=message, context=context)
