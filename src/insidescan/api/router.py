"""Top-level API router: mounts all domain routers under /api/v1."""

from fastapi import APIRouter

from insidescan.api.routes import scan, system

api_router = APIRouter()
api_router.include_router(scan.router, prefix="/scan", tags=["scan"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
