from __future__ import annotations

import asyncio

import pytest

from frontend.application.services.session_manager import SessionManager
from frontend.domain.session.entities import SessionState, SessionStatus
from frontend.domain.users.entities import AuthResult, User
from frontend.shared.errors import RequestFailedError, RequestFailureKind, StorageError
from frontend.tests.fakes import make_auth_result, make_user

KEY = "refresh_token"


class InMemoryCredentialStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class BrokenCredentialStore(InMemoryCredentialStore):
    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        fail_set: bool = False,
        fail_delete: bool = False,
    ) -> None:
        super().__init__(initial)
        self.fail_set = fail_set
        self.fail_delete = fail_delete

    def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise StorageError("disk full")
        super().set(key, value)

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageError("disk full")
        super().delete(key)


class FakeGateway:
    def __init__(
        self,
        *,
        me: User | Exception | None = None,
        refresh: AuthResult | Exception | None = None,
        login: AuthResult | Exception | None = None,
        register: AuthResult | Exception | None = None,
        logout: Exception | None = None,
    ) -> None:
        self._me = me if me is not None else RequestFailedError("Missing authentication token", status_code=401)
        self._refresh = refresh if refresh is not None else RequestFailedError("Invalid refresh token", status_code=401)
        self._login = login if login is not None else make_auth_result()
        self._register = register if register is not None else make_auth_result()
        self._logout = logout
        self.calls: list[tuple] = []

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def current_user(self) -> User:
        self.calls.append(("current_user",))
        return self._answer(self._me)

    async def refresh(self, refresh_token: str) -> AuthResult:
        self.calls.append(("refresh", refresh_token))
        return self._answer(self._refresh)

    async def login(self, email: str, password: str) -> AuthResult:
        self.calls.append(("login", email, password))
        return self._answer(self._login)

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        self.calls.append(("register", username, email, password))
        return self._answer(self._register)

    async def logout(self, refresh_token: str) -> None:
        self.calls.append(("logout", refresh_token))
        if self._logout is not None:
            raise self._logout

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


def _session(gateway: FakeGateway, store: InMemoryCredentialStore | None = None) -> SessionManager:
    return SessionManager(gateway=gateway, store=store or InMemoryCredentialStore(), refresh_token_key=KEY)


def _assert_consistent(state: SessionState) -> None:
    assert (state.user is not None) == (state.status is SessionStatus.AUTHENTICATED)


def test_new_session_is_loading_and_reads_stored_token() -> None:
    session = _session(FakeGateway(), InMemoryCredentialStore({KEY: "stored"}))

    assert session.status is SessionStatus.LOADING
    assert session.user is None
    assert session.loading is True
    assert session.has_refresh_token is True


@pytest.mark.asyncio
async def test_initialize_with_valid_cookie_skips_refresh() -> None:
    gateway = FakeGateway(me=make_user())
    session = _session(gateway, InMemoryCredentialStore({KEY: "stored"}))

    state = await session.initialize()

    assert state.status is SessionStatus.AUTHENTICATED
    assert state.user == make_user()
    assert gateway.names == ["current_user"]


@pytest.mark.asyncio
async def test_initialize_without_stored_token_does_not_refresh() -> None:
    gateway = FakeGateway()
    session = _session(gateway)

    state = await session.initialize()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert state.user is None
    assert state.loading is False
    assert gateway.names == ["current_user"]


@pytest.mark.asyncio
async def test_initialize_renews_with_stored_token() -> None:
    gateway = FakeGateway(refresh=make_auth_result("r2"))
    store = InMemoryCredentialStore({KEY: "r1"})
    session = _session(gateway, store)

    state = await session.initialize()

    assert state.status is SessionStatus.AUTHENTICATED
    assert state.user is not None and state.user.id == 1
    assert gateway.calls == [("current_user",), ("refresh", "r1")]
    assert store.data[KEY] == "r2"


@pytest.mark.asyncio
async def test_initialize_clears_stored_token_when_refresh_fails() -> None:
    gateway = FakeGateway()
    store = InMemoryCredentialStore({KEY: "expired"})
    session = _session(gateway, store)

    state = await session.initialize()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert KEY not in store.data
    assert session.has_refresh_token is False
    assert gateway.names == ["current_user", "refresh"]


@pytest.mark.asyncio
async def test_initialize_runs_once() -> None:
    gateway = FakeGateway(me=make_user())
    session = _session(gateway)

    await session.initialize()
    await session.initialize()

    assert gateway.names == ["current_user"]


@pytest.mark.asyncio
async def test_initialize_after_login_keeps_login_result() -> None:
    gateway = FakeGateway()
    session = _session(gateway)

    await session.login("a@b.com", "pw123456")
    state = await session.initialize()

    assert state.status is SessionStatus.AUTHENTICATED
    assert gateway.names == ["login"]


@pytest.mark.asyncio
async def test_login_success_persists_refresh_token() -> None:
    store = InMemoryCredentialStore()
    session = _session(FakeGateway(), store)
    await session.initialize()

    state = await session.login("a@b.com", "pw123456")

    assert state.status is SessionStatus.AUTHENTICATED
    assert state.user is not None and state.user.id == 1
    assert state.error is None
    assert state.busy is False
    assert store.data[KEY] == "r1"


@pytest.mark.asyncio
async def test_login_failure_records_error_and_reraises() -> None:
    failure = RequestFailedError("Internal Server Error", status_code=500)
    session = _session(FakeGateway(login=failure))
    await session.initialize()

    with pytest.raises(RequestFailedError) as exc_info:
        await session.login("a@b.com", "pw123456")

    assert exc_info.value is failure
    assert session.status is SessionStatus.UNAUTHENTICATED
    assert session.user is None
    assert session.error == "Internal Server Error"
    assert session.loading is False


@pytest.mark.asyncio
async def test_login_failure_clears_previous_user() -> None:
    gateway = FakeGateway(me=make_user(), login=RequestFailedError("Invalid email or password"))
    session = _session(gateway)
    await session.initialize()

    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "wrong-password")

    assert session.user is None
    assert session.status is SessionStatus.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_failure_without_message_uses_fallback() -> None:
    session = _session(
        FakeGateway(
            login=RequestFailedError("", kind=RequestFailureKind.TRANSPORT),
            register=RuntimeError(),
        )
    )

    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "pw123456")
    assert session.error == "Login failed"

    with pytest.raises(RuntimeError):
        await session.register("a", "a@b.com", "pw123456")
    assert session.error == "Registration failed"


@pytest.mark.asyncio
async def test_register_success() -> None:
    store = InMemoryCredentialStore()
    gateway = FakeGateway(register=make_auth_result("r9", make_user(7, "neo", "neo@b.com")))
    session = _session(gateway, store)

    state = await session.register("neo", "neo@b.com", "pw123456")

    assert state.status is SessionStatus.AUTHENTICATED
    assert state.user is not None and state.user.username == "neo"
    assert store.data[KEY] == "r9"
    assert gateway.calls == [("register", "neo", "neo@b.com", "pw123456")]


@pytest.mark.asyncio
async def test_new_attempt_clears_previous_error() -> None:
    gateway = FakeGateway(login=RequestFailedError("Invalid email or password"))
    session = _session(gateway)
    seen: list[SessionState] = []

    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "nope")
    session.subscribe(seen.append)
    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "nope")

    assert seen[0].busy is True
    assert seen[0].error is None
    assert seen[-1].error == "Invalid email or password"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "logout_error",
    [None, RequestFailedError("connection reset", kind=RequestFailureKind.TRANSPORT)],
)
async def test_logout_clears_everything(logout_error: Exception | None) -> None:
    store = InMemoryCredentialStore()
    gateway = FakeGateway(logout=logout_error)
    session = _session(gateway, store)
    await session.login("a@b.com", "pw123456")

    state = await session.logout()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert state.user is None
    assert state.error is None
    assert KEY not in store.data
    assert ("logout", "r1") in gateway.calls


@pytest.mark.asyncio
async def test_logout_without_token_skips_backend() -> None:
    gateway = FakeGateway(me=make_user())
    session = _session(gateway)
    await session.initialize()

    state = await session.logout()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert "logout" not in gateway.names


@pytest.mark.asyncio
async def test_clear_error_leaves_status_and_user() -> None:
    session = _session(FakeGateway(login=RequestFailedError("Internal Server Error", status_code=500)))
    await session.initialize()
    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "pw123456")
    before = session.state

    once = session.clear_error()
    twice = session.clear_error()

    assert once.error is None
    assert once.status is before.status
    assert once.user is before.user
    assert twice == once


@pytest.mark.asyncio
async def test_overlapping_logins_run_one_after_another() -> None:
    events: list[str] = []

    class SlowGateway(FakeGateway):
        async def login(self, email: str, password: str) -> AuthResult:
            events.append(f"start:{email}")
            await asyncio.sleep(0.01)
            events.append(f"end:{email}")
            return make_auth_result(f"token-{email}")

    store = InMemoryCredentialStore()
    session = _session(SlowGateway(), store)

    await asyncio.gather(
        session.login("a@b.com", "pw123456"),
        session.login("c@d.com", "pw123456"),
    )

    assert events == ["start:a@b.com", "end:a@b.com", "start:c@d.com", "end:c@d.com"]
    assert store.data[KEY] == "token-c@d.com"


@pytest.mark.asyncio
async def test_subscribers_receive_busy_and_settled_snapshots() -> None:
    session = _session(FakeGateway())
    await session.initialize()
    seen: list[SessionState] = []
    unsubscribe = session.subscribe(seen.append)

    await session.login("a@b.com", "pw123456")
    unsubscribe()
    await session.logout()

    assert [state.busy for state in seen] == [True, False]
    assert seen[0].status is SessionStatus.UNAUTHENTICATED
    assert seen[1].status is SessionStatus.AUTHENTICATED


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_operation() -> None:
    session = _session(FakeGateway())
    seen: list[SessionState] = []

    def broken(state: SessionState) -> None:
        raise ValueError("boom")

    session.subscribe(broken)
    session.subscribe(seen.append)

    state = await session.login("a@b.com", "pw123456")

    assert state.is_authenticated
    assert seen[-1] == state


@pytest.mark.asyncio
async def test_user_present_only_when_authenticated() -> None:
    gateway = FakeGateway(refresh=make_auth_result("r2"), login=RequestFailedError("nope"))
    session = _session(gateway, InMemoryCredentialStore({KEY: "r1"}))
    seen: list[SessionState] = [session.state]
    session.subscribe(seen.append)

    await session.initialize()
    with pytest.raises(RequestFailedError):
        await session.login("a@b.com", "pw123456")
    session.clear_error()
    await session.logout()

    assert len(seen) > 4
    for state in seen:
        _assert_consistent(state)


@pytest.mark.asyncio
async def test_logout_completes_when_store_cannot_delete() -> None:
    store = BrokenCredentialStore()
    gateway = FakeGateway()
    session = _session(gateway, store)
    await session.login("a@b.com", "pw123456")
    store.fail_delete = True

    state = await session.logout()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert state.user is None
    assert session.has_refresh_token is False
    assert ("logout", "r1") in gateway.calls


@pytest.mark.asyncio
async def test_initialize_settles_when_store_cannot_write() -> None:
    store = BrokenCredentialStore({KEY: "r1"}, fail_set=True, fail_delete=True)
    gateway = FakeGateway(refresh=make_auth_result("r2"))
    session = _session(gateway, store)

    state = await session.initialize()

    assert state.status is SessionStatus.UNAUTHENTICATED
    assert state.loading is False
    assert session.has_refresh_token is False
    assert gateway.names == ["current_user", "refresh"]


@pytest.mark.asyncio
async def test_login_fails_when_token_cannot_be_stored() -> None:
    session = _session(FakeGateway(), BrokenCredentialStore(fail_set=True))
    await session.initialize()

    with pytest.raises(StorageError):
        await session.login("a@b.com", "pw123456")

    assert session.status is SessionStatus.UNAUTHENTICATED
    assert session.user is None
    assert session.error == "disk full"
    assert session.has_refresh_token is False
