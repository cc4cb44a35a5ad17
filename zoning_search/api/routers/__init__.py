"""API routers."""

from .health import router as health_router
from .orchestrate import router as orchestrate_router

__all__ = ["health_router", "orchestrate_router"]
