# File: resume_layout/api/api.py
from fastapi import APIRouter

from resume_layout.api.endpoints import export

api_router = APIRouter(prefix="/api")
api_router.include_router(export.router, prefix="/export", tags=["export"])
