"""API routes."""

from paye.api.routes.health import router as health_router
from paye.api.routes.payroll import router as payroll_router

__all__ = ["health_router", "payroll_router"]
