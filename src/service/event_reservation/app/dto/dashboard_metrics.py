import attrs


@attrs.define(frozen=True)
class DashboardMetrics:
    total_events: int
    upcoming_events: int
    cancelled_events: int
    total_reservations: int
    active_reservations: int
    cancelled_reservations: int
    reserved_seats: int
