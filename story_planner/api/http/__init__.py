from story_planner.api.http.health import router as health_router
from story_planner.api.http.documents import router as documents_router
from story_planner.api.http.users import router as users_router
from story_planner.api.http.fields import router as fields_router
from story_planner.api.http.admin import router as admin_router

__all__ = [
    "health_router",
    "documents_router",
    "users_router",
    "fields_router",
    "admin_router"
]
