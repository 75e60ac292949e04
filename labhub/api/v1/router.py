from fastapi import APIRouter

from labhub.api.v1.health import router as health_router
from labhub.api.v1.auth import router as auth_router
from labhub.api.v1.projects import router as projects_router
from labhub.api.v1.reviews import router as reviews_router
from labhub.api.v1.notifications import router as notifications_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# PROJECTS / REVIEW WORKFLOW
# ------------------------------------------------------------------
v1_router.include_router(projects_router, tags=["projects"])
v1_router.include_router(reviews_router, tags=["reviews"])

# ------------------------------------------------------------------
# NOTIFICATIONS
# ------------------------------------------------------------------
v1_router.include_router(notifications_router, tags=["notifications"])
