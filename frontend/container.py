"""Application dependency container."""

from __future__ import annotations

from functools import cached_property
from types import TracebackType

import httpx

from frontend.application.services.session_manager import SessionManager
from frontend.infrastructure.auth_api import HttpAuthApiClient
from frontend.infrastructure.storage import FileCredentialStore
from frontend.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or load_config()
        self._transport = transport

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def auth_api(self) -> HttpAuthApiClient:
        return HttpAuthApiClient.from_config(self._config.api, transport=self._transport)

    @cached_property
    def credential_store(self) -> FileCredentialStore:
        return FileCredentialStore(self._config.storage.credentials_file)

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            gateway=self.auth_api,
            store=self.credential_store,
            refresh_token_key=self._config.storage.refresh_token_key,
        )

    async def open_session(self) -> SessionManager:
        session = self.session_manager
        await session.initialize()
        return session

    async def aclose(self) -> None:
        if "auth_api" in self.__dict__:
            await self.auth_api.aclose()

    async def __aenter__(self) -> Container:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
