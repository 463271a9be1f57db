"""Route handlers for Web API."""

from verbario.web.routes.health import router as health_router
from verbario.web.routes.translations import router as translations_router
from verbario.web.routes.verbs import router as verbs_router

__all__ = [
    "health_router",
    "translations_router",
    "verbs_router",
]
