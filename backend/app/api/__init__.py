from fastapi import APIRouter
from app.api.routes import health, jurisdiction, precincts, schedules

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(jurisdiction.router)
api_router.include_router(precincts.router)
api_router.include_router(schedules.router)
