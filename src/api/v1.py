"""Centralized v1 API router — customer and admin chat surfaces."""

from fastapi import APIRouter

from src.modules.chat.router import admin_router as admin_chat_router
from src.modules.chat.router import customer_router as chat_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(chat_router)
v1_router.include_router(admin_chat_router)
