"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from paye.calculators.engine import PayrollEngine


@lru_cache(maxsize=1)
def get_engine() -> PayrollEngine:
    """Get shared engine instance; it holds no per-request state."""
    return PayrollEngine()


# Type aliases for cleaner dependency injection
Engine = Annotated[PayrollEngine, Depends(get_engine)]
