"""Production tracking services."""

from paye.services.production import NotFoundError, ProductionTracker, WorkerRole
from paye.services.state_machine import (
    InvalidTransitionError,
    ProcessStateMachine,
    ProcessStatus,
)

__all__ = [
    "ProductionTracker",
    "WorkerRole",
    "NotFoundError",
    "ProcessStateMachine",
    "ProcessStatus",
    "InvalidTransitionError",
]
