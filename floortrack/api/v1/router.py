"""
API Router
Every endpoint group served under the /api prefix
"""

from fastapi import APIRouter

from floortrack.api.v1.endpoints import (
    admin_access_points,
    admin_buildings,
    admin_devices,
    admin_floors,
    admin_global_permissions,
    admin_groups,
    admin_pending_users,
    auth,
    diagnostics,
    floors,
    health,
    profile,
    stats,
    users,
)

api_router = APIRouter()

# Identity: /register, /login, /logout, /reset-password, /me
api_router.include_router(auth.router, tags=["authentication"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])

# Admin CRUD
api_router.include_router(admin_buildings.router, prefix="/admin/buildings", tags=["admin"])
api_router.include_router(admin_floors.router, prefix="/admin/floors", tags=["admin"])
api_router.include_router(admin_access_points.router, prefix="/admin/aps", tags=["admin"])
api_router.include_router(admin_devices.router, prefix="/admin/devices", tags=["admin"])
api_router.include_router(admin_groups.router, prefix="/admin/groups", tags=["admin"])
api_router.include_router(admin_groups.roles_router, prefix="/admin/roles", tags=["admin"])
api_router.include_router(
    admin_global_permissions.router,
    prefix="/admin/global-permissions",
    tags=["admin"],
)
api_router.include_router(admin_pending_users.router, prefix="/admin/pending-users", tags=["admin"])

# Scoped reads
api_router.include_router(floors.router, prefix="/floors", tags=["floors"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

api_router.include_router(health.router, tags=["health"])
api_router.include_router(diagnostics.router, tags=["health"])
