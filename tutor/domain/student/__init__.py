from .telemetry_subscriber import TelemetrySubscriber, TelemetryEvent, TelemetryEventType
from .reporting_service import ReportingService

__all__ = ["TelemetrySubscriber", "TelemetryEvent", "TelemetryEventType", "ReportingService"]
