"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import couples, dates, bucket_list, moods

api_router = APIRouter()

# Include all route modules
api_router.include_router(couples.router)
api_router.include_router(dates.router)
api_router.include_router(bucket_list.router)
api_router.include_router(moods.router)
