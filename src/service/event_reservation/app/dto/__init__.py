"""Application layer DTOs"""

from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.app.dto.dashboard_metrics import DashboardMetrics
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult

__all__ = ['AuthenticatedUser', 'DashboardMetrics', 'EventView', 'OperationResult']
