"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/factory.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.in_memory_store import InMemoryDataStore
from src.platform.database.unit_of_work import InMemoryUnitOfWork
from src.platform.state.aggregate_lock import AggregateLockRegistry
from src.service.event_reservation.app.command.cancel_event_use_case import CancelEventUseCase
from src.service.event_reservation.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.event_reservation.app.command.create_event_use_case import CreateEventUseCase
from src.service.event_reservation.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.event_reservation.app.command.login_use_case import LoginUseCase
from src.service.event_reservation.app.command.register_failed_attempt_use_case import (
    RegisterFailedAttemptUseCase,
)
from src.service.event_reservation.app.command.register_user_use_case import RegisterUserUseCase
from src.service.event_reservation.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.event_reservation.app.command.reset_access_failures_use_case import (
    ResetAccessFailuresUseCase,
)
from src.service.event_reservation.app.command.update_event_use_case import UpdateEventUseCase
from src.service.event_reservation.app.query.get_dashboard_metrics_use_case import (
    GetDashboardMetricsUseCase,
)
from src.service.event_reservation.app.query.get_event_use_case import GetEventUseCase
from src.service.event_reservation.app.query.list_event_reservations_use_case import (
    ListEventReservationsUseCase,
)
from src.service.event_reservation.app.query.list_upcoming_events_use_case import (
    ListUpcomingEventsUseCase,
)
from src.service.event_reservation.app.query.list_user_reservations_use_case import (
    ListUserReservationsUseCase,
)
from src.service.event_reservation.app.query.search_events_use_case import SearchEventsUseCase
from src.service.event_reservation.driven_adapter.clock.system_clock import SystemClock
from src.service.event_reservation.driven_adapter.repo.user_repo_impl import USER_UNIQUE_INDEXES
from src.service.event_reservation.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # System of record (one per container) and the per-aggregate lock table,
    # shared by every thread that resolves them
    data_store = providers.ThreadSafeSingleton(
        InMemoryDataStore, unique_indexes=USER_UNIQUE_INDEXES
    )
    lock_registry = providers.ThreadSafeSingleton(
        AggregateLockRegistry,
        timeout_seconds=config_service.provided.AGGREGATE_LOCK_TIMEOUT_SECONDS,
    )

    # A fresh unit of work per operation
    unit_of_work = providers.Factory(InMemoryUnitOfWork, store=data_store)
    transaction = providers.ThreadSafeSingleton(
        AggregateTransaction,
        lock_registry=lock_registry,
        uow_factory=unit_of_work.provider,
        max_attempts=config_service.provided.MAX_CONCURRENCY_RETRIES,
        backoff_seconds=config_service.provided.CONCURRENCY_RETRY_BACKOFF_SECONDS,
    )

    # Infrastructure services
    clock = providers.Singleton(SystemClock)
    password_hasher = providers.Singleton(
        BcryptPasswordHasher, rounds=config_service.provided.BCRYPT_ROUNDS
    )

    # Event use cases
    create_event_use_case = providers.Factory(
        CreateEventUseCase, transaction=transaction, clock=clock
    )
    update_event_use_case = providers.Factory(
        UpdateEventUseCase, transaction=transaction, clock=clock
    )
    cancel_event_use_case = providers.Factory(CancelEventUseCase, transaction=transaction)
    delete_event_use_case = providers.Factory(DeleteEventUseCase, transaction=transaction)
    get_event_use_case = providers.Factory(GetEventUseCase, uow_factory=unit_of_work.provider)
    list_upcoming_events_use_case = providers.Factory(
        ListUpcomingEventsUseCase, uow_factory=unit_of_work.provider, clock=clock
    )
    search_events_use_case = providers.Factory(
        SearchEventsUseCase, uow_factory=unit_of_work.provider
    )

    # Booking use cases
    reserve_seats_use_case = providers.Factory(
        ReserveSeatsUseCase, transaction=transaction, clock=clock
    )
    cancel_reservation_use_case = providers.Factory(
        CancelReservationUseCase, transaction=transaction
    )
    list_user_reservations_use_case = providers.Factory(
        ListUserReservationsUseCase, uow_factory=unit_of_work.provider
    )
    list_event_reservations_use_case = providers.Factory(
        ListEventReservationsUseCase, uow_factory=unit_of_work.provider
    )

    # Auth use cases
    register_user_use_case = providers.Factory(
        RegisterUserUseCase,
        transaction=transaction,
        password_hasher=password_hasher,
        clock=clock,
        settings=config_service,
    )
    login_use_case = providers.Factory(
        LoginUseCase, transaction=transaction, password_hasher=password_hasher
    )
    register_failed_attempt_use_case = providers.Factory(
        RegisterFailedAttemptUseCase, transaction=transaction
    )
    reset_access_failures_use_case = providers.Factory(
        ResetAccessFailuresUseCase, transaction=transaction
    )

    # Admin dashboard
    get_dashboard_metrics_use_case = providers.Factory(
        GetDashboardMetricsUseCase, uow_factory=unit_of_work.provider, clock=clock
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.data_store()


def cleanup() -> None:
    container.reset_singletons()
