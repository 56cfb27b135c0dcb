"""Routes package initializer.

Groups all route modules for API version 1.
"""

from fastapi import APIRouter

from . import admin, ai, health, lists, recipes, reports, taxonomy

api_router = APIRouter()
api_router.include_router(admin.router)
api_router.include_router(ai.router)
api_router.include_router(health.router)
api_router.include_router(lists.router)
api_router.include_router(recipes.router)
api_router.include_router(reports.router)
api_router.include_router(taxonomy.router)
