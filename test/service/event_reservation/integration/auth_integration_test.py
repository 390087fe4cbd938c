"""
Registration, login and lockout end to end, with real bcrypt hashing
"""

from collections.abc import Awaitable, Callable

import anyio
import pytest

from src.platform.config.di import Container
from src.platform.exception.exceptions import ErrorKind
from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.user_account_state import UserAccountState
from src.service.event_reservation.domain.enum.user_role import UserRole


@pytest.mark.integration
class TestRegister:
    @pytest.mark.asyncio
    async def test_register_defaults_to_user_role(
        self, register_user: Callable[..., Awaitable[AuthenticatedUser]]
    ) -> None:
        user = await register_user(email=' alice@example.com ')

        assert user.role == UserRole.USER
        assert user.email == 'alice@example.com'
        assert user.state == UserAccountState.ACTIVE

    @pytest.mark.asyncio
    async def test_register_with_role(
        self, register_user: Callable[..., Awaitable[AuthenticatedUser]]
    ) -> None:
        user = await register_user(role=UserRole.ORGANIZER)

        assert user.role == UserRole.ORGANIZER

    @pytest.mark.asyncio
    async def test_short_password_is_rejected(self, container: Container) -> None:
        result = await container.register_user_use_case().register(
            username='bob', email='bob@example.com', password='short'
        )

        assert result.error_kind == ErrorKind.VALIDATION
        assert result.reason == ErrorReason.PASSWORD_TOO_SHORT

    @pytest.mark.asyncio
    async def test_invalid_email_is_rejected(
        self, container: Container, default_password: str
    ) -> None:
        result = await container.register_user_use_case().register(
            username='bob', email='invalid', password=default_password
        )

        assert result.reason == ErrorReason.EMAIL_INVALID

    @pytest.mark.asyncio
    async def test_email_and_username_are_unique_case_insensitively(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
        default_password: str,
    ) -> None:
        await register_user(username='alice', email='alice@example.com')
        use_case = container.register_user_use_case()

        same_email = await use_case.register(
            username='other', email='ALICE@example.com', password=default_password
        )
        same_username = await use_case.register(
            username='ALICE', email='other@example.com', password=default_password
        )

        assert same_email.error_kind == ErrorKind.CONFLICT
        assert same_email.reason == ErrorReason.EMAIL_TAKEN
        assert same_username.reason == ErrorReason.USERNAME_TAKEN

    @pytest.mark.asyncio
    async def test_concurrent_registrations_of_one_username_create_one_user(
        self, container: Container, default_password: str
    ) -> None:
        use_case = container.register_user_use_case()
        results = []

        async def attempt(email: str) -> None:
            results.append(
                await use_case.register(username='carol', email=email, password=default_password)
            )

        async with anyio.create_task_group() as tg:
            tg.start_soon(attempt, 'carol1@example.com')
            tg.start_soon(attempt, 'carol2@example.com')

        assert sorted(r.succeeded for r in results) == [False, True]
        assert next(r for r in results if r.failed).reason == ErrorReason.USERNAME_TAKEN


@pytest.mark.integration
class TestLogin:
    @pytest.mark.asyncio
    async def test_login_by_username_or_email(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
        default_password: str,
    ) -> None:
        user = await register_user()
        login = container.login_use_case()

        by_username = await login.login(username_or_email='Alice', password=default_password)
        by_email = await login.login(
            username_or_email='alice@example.com', password=default_password
        )

        assert by_username.data.id == user.id
        assert by_email.data.id == user.id

    @pytest.mark.asyncio
    async def test_five_wrong_passwords_lock_the_account(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
        default_password: str,
    ) -> None:
        """
        Given: A registered user
        When: Five wrong passwords arrive concurrently
        Then: Every attempt is counted, the account locks,
              and even the right password is refused afterwards
        """
        user = await register_user()
        login = container.login_use_case()
        results = []

        async def wrong_attempt() -> None:
            results.append(
                await login.login(username_or_email='alice', password='wrong-password')
            )

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(wrong_attempt)

        assert all(r.reason == ErrorReason.INVALID_CREDENTIALS for r in results)
        locked = await login.login(username_or_email='alice', password=default_password)
        assert locked.error_kind == ErrorKind.LOCKED_ACCOUNT
        assert locked.message == 'Account is locked due to failed attempts.'

        reset = await container.reset_access_failures_use_case().reset_access_failures(
            user_id=user.id
        )
        assert reset.data.state == UserAccountState.ACTIVE
        unlocked = await login.login(username_or_email='alice', password=default_password)
        assert unlocked.succeeded

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_look_the_same(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
    ) -> None:
        await register_user()
        login = container.login_use_case()

        unknown = await login.login(username_or_email='nobody', password='whatever-1')
        wrong = await login.login(username_or_email='alice', password='whatever-1')

        assert (unknown.error_kind, unknown.message) == (wrong.error_kind, wrong.message)


@pytest.mark.integration
class TestFailedAttemptBookkeeping:
    @pytest.mark.asyncio
    async def test_register_failed_attempt_counts_past_the_threshold(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
    ) -> None:
        await register_user()
        use_case = container.register_failed_attempt_use_case()

        states = []
        for _ in range(6):
            result = await use_case.register_failed_attempt(username_or_email='alice@example.com')
            states.append(result.data.state)

        assert states == [UserAccountState.ACTIVE] * 4 + [UserAccountState.LOCKED] * 2

    @pytest.mark.asyncio
    async def test_unknown_user(self, container: Container) -> None:
        result = await container.register_failed_attempt_use_case().register_failed_attempt(
            username_or_email='ghost'
        )

        assert result.reason == ErrorReason.USER_NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize('username_or_email', ['', '   '])
    async def test_blank_input_is_a_validation_failure(
        self,
        container: Container,
        register_user: Callable[..., Awaitable[AuthenticatedUser]],
        username_or_email: str,
    ) -> None:
        await register_user()

        result = await container.register_failed_attempt_use_case().register_failed_attempt(
            username_or_email=username_or_email
        )

        assert result.error_kind == ErrorKind.VALIDATION
        assert result.reason == ErrorReason.CREDENTIALS_REQUIRED
        assert result.message == 'Username or email is required.'
