# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP adapter for the backend's ``/api/auth`` routes.

The client is stateless from the session's point of view. The only state it
keeps is the cookie jar of its ``httpx.AsyncClient``: the backend answers
login, registration and refresh with an ``access_token`` cookie, and every
later request carries it back automatically.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from frontend.domain.users.entities import AuthResult, User
from frontend.domain.users.repositories import AuthGateway
from frontend.shared.config import ApiConfig
from frontend.shared.errors import (
    RequestFailedError,
    RequestFailureKind,
    describe_validation_error,
)
from frontend.shared.logging import get_correlation_id, logger

from .dto import (
    AuthResponseDTO,
    LoginRequestDTO,
    RefreshRequestDTO,
    RegisterRequestDTO,
    UserDTO,
)

REGISTER_PATH = "/api/auth/register"
LOGIN_PATH = "/api/auth/login"
LOGOUT_PATH = "/api/auth/logout"
REFRESH_PATH = "/api/auth/refresh"
CURRENT_USER_PATH = "/api/auth/me"

_MAX_ERROR_BODY = 500

ModelT = TypeVar("ModelT", bound=BaseModel)

# The last three sit outside the httpx.HTTPError hierarchy.
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.CookieConflict, httpx.StreamError)


async def _attach_request_id(request: httpx.Request) -> None:
    correlation_id = get_correlation_id()
    if correlation_id != "-":
        request.headers.setdefault("X-Request-ID", correlation_id)


class HttpAuthApiClient(AuthGateway):
    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
            event_hooks={"request": [_attach_request_id]},
        )
        logger.debug(f"HttpAuthApiClient: initialized base_url={base_url} timeout={timeout}")

    @classmethod
    def from_config(
        cls, config: ApiConfig, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> HttpAuthApiClient:
        return cls(base_url=config.base_url, timeout=config.timeout, transport=transport)

    @property
    def cookies(self) -> httpx.Cookies:
        return self._http.cookies

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> HttpAuthApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _send(self, method: str, path: str, body: BaseModel | None = None) -> httpx.Response:
        payload = body.model_dump() if body is not None else None
        try:
            response = await self._http.request(method, path, json=payload)
        except _TRANSPORT_ERRORS as exc:
            error = RequestFailedError(
                str(exc) or exc.__class__.__name__,
                kind=RequestFailureKind.TRANSPORT,
                context={"path": path},
            )
            logger.warning(f"auth_api: {method} {path} transport failure {error.to_dict()}")
            raise error from exc

        logger.debug(f"auth_api: {method} {path} -> {response.status_code}")
        return response

    async def _request(
        self,
        method: str,
        path: str,
        model: type[ModelT],
        body: BaseModel | None = None,
    ) -> ModelT:
        response = await self._send(method, path, body)

        if not response.is_success:
            text = response.text.strip()
            message = text[:_MAX_ERROR_BODY] if text else f"HTTP {response.status_code}"
            error = RequestFailedError(
                message,
                kind=RequestFailureKind.HTTP,
                status_code=response.status_code,
                context={"path": path},
            )
            logger.warning(f"auth_api: {method} {path} rejected {error.to_dict()}")
            raise error

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise RequestFailedError(
                "Malformed response body: invalid JSON",
                kind=RequestFailureKind.DECODE,
                status_code=response.status_code,
                context={"path": path},
            ) from exc

        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise RequestFailedError(
                describe_validation_error(exc),
                kind=RequestFailureKind.DECODE,
                status_code=response.status_code,
                context={"path": path},
            ) from exc

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        body = RegisterRequestDTO(username=username, email=email, password=password)
        dto = await self._request("POST", REGISTER_PATH, AuthResponseDTO, body)
        return dto.to_entity()

    async def login(self, email: str, password: str) -> AuthResult:
        body = LoginRequestDTO(email=email, password=password)
        dto = await self._request("POST", LOGIN_PATH, AuthResponseDTO, body)
        return dto.to_entity()

    async def refresh(self, refresh_token: str) -> AuthResult:
        body = RefreshRequestDTO(refresh_token=refresh_token)
        dto = await self._request("POST", REFRESH_PATH, AuthResponseDTO, body)
        return dto.to_entity()

    async def logout(self, refresh_token: str) -> None:
        body = RefreshRequestDTO(refresh_token=refresh_token)
        try:
            response = await self._send("POST", LOGOUT_PATH, body)
        except RequestFailedError:
            return
        finally:
            self._http.cookies.clear()

        if not response.is_success:
            logger.warning(f"auth_api: logout rejected code={response.status_code}")

    async def current_user(self) -> User:
        dto = await self._request("GET", CURRENT_USER_PATH, UserDTO)
        return dto.to_entity()


__all__ = [
    "CURRENT_USER_PATH",
    "LOGIN_PATH",
    "LOGOUT_PATH",
    "REFRESH_PATH",
    "REGISTER_PATH",
    "HttpAuthApiClient",
]
