from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from blog_backend.application.ports.auth_event_repository_port import AuthEventCreateInput
from blog_backend.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
)
from blog_backend.application.services.account_service import (
    AccountService,
    EmailAlreadyRegisteredError,
    InvalidCurrentPasswordError,
    InvalidUserEmailError,
    InvalidUserPasswordError,
    UserNotFoundError,
)
from blog_backend.infrastructure.security.password_hasher import (
    Pbkdf2Parameters,
    Pbkdf2PasswordHasher,
)


class InMemoryUserRepository:
    def __init__(self, *, raise_duplicate_on_create: bool = False) -> None:
        self.users: dict[UUID, UserRecord] = {}
        self.raise_duplicate_on_create = raise_duplicate_on_create

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        if self.raise_duplicate_on_create:
            raise DuplicateUserEmailError(payload.email)
        now = datetime.now(tz=UTC)
        user = UserRecord(
            user_id=payload.user_id,
            email=payload.email,
            name=payload.name,
            password_hash=payload.password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users[user.user_id] = user
        return user

    async def replace_password_hash(
        self,
        *,
        user_id: UUID,
        password_hash: str,
    ) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = replace(user, password_hash=password_hash)
        self.users[user_id] = updated
        return updated


class FakeAuthEventRepository:
    def __init__(self) -> None:
        self.events: list[AuthEventCreateInput] = []

    async def append_event(self, payload: AuthEventCreateInput) -> int:
        self.events.append(payload)
        return len(self.events)


def _service(
    users: InMemoryUserRepository | None = None,
) -> tuple[AccountService, InMemoryUserRepository, FakeAuthEventRepository]:
    resolved_users = users or InMemoryUserRepository()
    auth_events = FakeAuthEventRepository()
    service = AccountService(
        users=resolved_users,
        auth_events=auth_events,
        password_hasher=Pbkdf2PasswordHasher(parameters=Pbkdf2Parameters(iterations=1_000)),
    )
    return service, resolved_users, auth_events


@pytest.mark.asyncio
async def test_sign_up_stores_salted_record_not_plaintext() -> None:
    service, users, auth_events = _service()

    user = await service.sign_up(
        email=" Writer@Example.com ",
        password="correct horse",
        name="  Writer ",
        ip_address="10.0.0.1",
        user_agent="pytest",
    )

    stored = users.users[user.user_id]
    assert stored.email == "writer@example.com"
    assert stored.name == "Writer"
    assert "correct horse" not in stored.password_hash
    assert len(stored.password_hash) == 97
    assert [event.event_type for event in auth_events.events] == ["signup_success"]
    assert auth_events.events[0].payload == {"email": "writer@example.com"}


@pytest.mark.asyncio
async def test_sign_up_same_password_twice_yields_different_records() -> None:
    service, _, _ = _service()

    first = await service.sign_up(email="a@example.com", password="shared-pw")
    second = await service.sign_up(email="b@example.com", password="shared-pw")

    assert first.password_hash != second.password_hash


@pytest.mark.asyncio
async def test_sign_up_rejects_existing_email() -> None:
    service, _, _ = _service()
    await service.sign_up(email="a@example.com", password="pw")

    with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
        await service.sign_up(email="A@example.com", password="other")

    assert exc_info.value.email == "a@example.com"


@pytest.mark.asyncio
async def test_sign_up_translates_repository_duplicate_race() -> None:
    service, _, _ = _service(InMemoryUserRepository(raise_duplicate_on_create=True))

    with pytest.raises(EmailAlreadyRegisteredError):
        await service.sign_up(email="a@example.com", password="pw")


@pytest.mark.asyncio
async def test_sign_up_rejects_blank_email_and_password() -> None:
    service, _, _ = _service()

    with pytest.raises(InvalidUserEmailError):
        await service.sign_up(email="   ", password="pw")
    with pytest.raises(InvalidUserPasswordError):
        await service.sign_up(email="a@example.com", password="   ")


@pytest.mark.asyncio
async def test_get_user_raises_when_missing() -> None:
    service, _, _ = _service()

    with pytest.raises(UserNotFoundError):
        await service.get_user(user_id=uuid4())


@pytest.mark.asyncio
async def test_change_password_replaces_record_and_emits_event() -> None:
    service, users, auth_events = _service()
    user = await service.sign_up(email="a@example.com", password="old-pw")
    hasher = Pbkdf2PasswordHasher(parameters=Pbkdf2Parameters(iterations=1_000))

    updated = await service.change_password(
        user_id=user.user_id,
        current_password="old-pw",
        new_password="new-pw",
    )

    assert updated.password_hash != user.password_hash
    stored = users.users[user.user_id].password_hash
    assert hasher.verify_password(password="new-pw", password_hash=stored) is True
    assert hasher.verify_password(password="old-pw", password_hash=stored) is False
    assert auth_events.events[-1].event_type == "password_changed"
    assert auth_events.events[-1].payload == {}


@pytest.mark.asyncio
async def test_change_password_to_same_value_still_gets_new_salt() -> None:
    service, users, _ = _service()
    user = await service.sign_up(email="a@example.com", password="same-pw")

    await service.change_password(
        user_id=user.user_id,
        current_password="same-pw",
        new_password="same-pw",
    )

    assert users.users[user.user_id].password_hash != user.password_hash


@pytest.mark.asyncio
async def test_change_password_rejects_wrong_current_password() -> None:
    service, users, auth_events = _service()
    user = await service.sign_up(email="a@example.com", password="old-pw")

    with pytest.raises(InvalidCurrentPasswordError):
        await service.change_password(
            user_id=user.user_id,
            current_password="guess",
            new_password="new-pw",
        )

    assert users.users[user.user_id].password_hash == user.password_hash
    assert [event.event_type for event in auth_events.events] == ["signup_success"]


@pytest.mark.asyncio
async def test_change_password_with_malformed_stored_record_is_rejected() -> None:
    service, users, _ = _service()
    user = await service.sign_up(email="a@example.com", password="old-pw")
    users.users[user.user_id] = replace(user, password_hash="aa:bb")

    with pytest.raises(InvalidCurrentPasswordError):
        await service.change_password(
            user_id=user.user_id,
            current_password="old-pw",
            new_password="new-pw",
        )


@pytest.mark.asyncio
async def test_change_password_rejects_blank_new_password() -> None:
    service, _, _ = _service()
    user = await service.sign_up(email="a@example.com", password="old-pw")

    with pytest.raises(InvalidUserPasswordError):
        await service.change_password(
            user_id=user.user_id,
            current_password="old-pw",
            new_password=" ",
        )


@pytest.mark.asyncio
async def test_sign_up_rejects_unencodable_password() -> None:
    service, users, _ = _service()

    with pytest.raises(InvalidUserPasswordError):
        await service.sign_up(email="a@example.com", password="pw\ud800")

    assert users.users == {}


@pytest.mark.asyncio
async def test_change_password_rejects_unencodable_passwords() -> None:
    service, users, _ = _service()
    user = await service.sign_up(email="a@example.com", password="old-pw")

    with pytest.raises(InvalidUserPasswordError):
        await service.change_password(
            user_id=user.user_id,
            current_password="old-pw",
            new_password="\udfff",
        )
    with pytest.raises(InvalidCurrentPasswordError):
        await service.change_password(
            user_id=user.user_id,
            current_password="\ud800",
            new_password="new-pw",
        )

    assert users.users[user.user_id].password_hash == user.password_hash
