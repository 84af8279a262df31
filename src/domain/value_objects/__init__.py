"""Domain value objects (immutable, no identity)."""

from src.domain.value_objects.request_context import RequestContext
from src.domain.value_objects.session_policy import SessionPolicy
from src.domain.value_objects.storage_reports import CleanupReport, SessionCounts

__all__ = ["CleanupReport", "RequestContext", "SessionCounts", "SessionPolicy"]
