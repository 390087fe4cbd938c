"""
Test Configuration and Fixtures

This module provides:
- Test environment variables, set before any application module reads settings
- A fixed clock so date rules are deterministic
- A fresh dependency-injector Container per test (own store, own lock table)
- Helpers that create events and users through the real use cases

Architecture:
- Unit tests (*_unit_test.py): domain objects or use cases with AsyncMock ports
- Integration tests (*_integration_test.py): use cases wired through the Container
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# src.platform.config.core_setting builds `settings` at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ.setdefault('BCRYPT_ROUNDS', '4')
    os.environ.setdefault('AGGREGATE_LOCK_TIMEOUT_SECONDS', '2')
    os.environ.setdefault('CONCURRENCY_RETRY_BACKOFF_SECONDS', '0')

    test_log_dir = Path(__file__).parent / 'test_log'
    os.environ.setdefault('TEST_LOG_DIR', str(test_log_dir))


_early_setup_test_environment()

from collections.abc import Awaitable, Callable, Generator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any  # noqa: E402

from dependency_injector import providers  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import Container  # noqa: E402
from src.service.event_reservation.app.dto.authenticated_user import (  # noqa: E402
    AuthenticatedUser,
)
from src.service.event_reservation.app.dto.event_view import EventView  # noqa: E402
from src.service.event_reservation.app.interface.i_clock import IClock  # noqa: E402
from src.service.event_reservation.domain.enum.event_category import (  # noqa: E402
    EventCategory,
)


FIXED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
DEFAULT_PASSWORD = 'P@ssw0rd-123'


class FixedClock(IClock):
    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture
def container(clock: FixedClock) -> Generator[Container, None, None]:
    """Container with its own store and lock table; only the clock is replaced"""
    test_container = Container()
    test_container.clock.override(providers.Object(clock))
    yield test_container
    test_container.clock.reset_override()
    test_container.reset_singletons()


@pytest.fixture
def event_input() -> dict[str, Any]:
    return {
        'title': 'Jazz Night',
        'description': 'An evening of live jazz.',
        'start_at': FIXED_NOW + timedelta(days=7),
        'duration': timedelta(hours=2),
        'city': 'Taipei',
        'address_line': '1 Music Road',
        'capacity': 10,
        'category': EventCategory.MUSIC,
    }


@pytest.fixture
def create_event(
    container: Container, event_input: dict[str, Any]
) -> Callable[..., Awaitable[EventView]]:
    async def _create(**overrides: Any) -> EventView:
        result = await container.create_event_use_case().create_event(
            **(event_input | overrides)
        )
        assert result.succeeded, result.message
        return result.data

    return _create


@pytest.fixture
def register_user(container: Container) -> Callable[..., Awaitable[AuthenticatedUser]]:
    async def _register(
        username: str = 'alice', email: str = 'alice@example.com', **kwargs: Any
    ) -> AuthenticatedUser:
        result = await container.register_user_use_case().register(
            username=username,
            email=email,
            password=kwargs.pop('password', DEFAULT_PASSWORD),
            **kwargs,
        )
        assert result.succeeded, result.message
        return result.data

    return _register


@pytest.fixture
def default_password() -> str:
    return DEFAULT_PASSWORD
