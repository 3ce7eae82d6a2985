from fastapi import APIRouter
from app.api.routes import health
from app.api.v1.routes import church, church_roster, service


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])

api_router.include_router(service.router, prefix="/church/service", tags=["service"])
api_router.include_router(church_roster.router, prefix="/church", tags=["church roster"])
api_router.include_router(church.router, prefix="/church", tags=["church"])
