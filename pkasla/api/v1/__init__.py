"""API v1 router aggregator."""

from fastapi import APIRouter

from pkasla.api.v1 import settings, users

api_router = APIRouter(tags=["API v1"])

api_router.include_router(settings.router)
api_router.include_router(users.router)
