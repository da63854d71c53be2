from fastapi import APIRouter

from ecoswap.app.api.routes import recipes

api_router = APIRouter()
api_router.include_router(recipes.router)
