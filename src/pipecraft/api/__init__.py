"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a blanket include_router(dependencies=...) guard, auth is
declared per route here, because most resources mix public reads with
admin-only writes. Each protected handler depends on get_current_user
or require_admin.
"""

from fastapi import APIRouter

from pipecraft.api.applications import router as applications_router
from pipecraft.api.auth import router as users_router
from pipecraft.api.careers import router as careers_router
from pipecraft.api.contacts import router as contacts_router
from pipecraft.api.health import router as health_router
from pipecraft.api.projects import router as projects_router
from pipecraft.api.services import router as services_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users", "auth"])
api_router.include_router(services_router, tags=["services"])
api_router.include_router(contacts_router, tags=["contacts"])
api_router.include_router(careers_router, tags=["careers"])
api_router.include_router(applications_router, tags=["applications"])
api_router.include_router(projects_router, tags=["projects"])
