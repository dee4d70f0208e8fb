from .formats import router as formats_router
from .jobs import router as jobs_router
from .pages import router as pages_router
from .push import router as push_router

__all__ = [
    "formats_router",
    "jobs_router",
    "pages_router",
    "push_router",
]
