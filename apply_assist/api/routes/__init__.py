"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from apply_assist.api.routes.question_routes import router as question_router
from apply_assist.api.routes.chatbot_routes import router as chatbot_router
from apply_assist.api.routes.resume_routes import router as resume_router
from apply_assist.api.routes.matching_routes import router as matching_router
from apply_assist.api.routes.log_routes import router as log_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(question_router)
api_router.include_router(chatbot_router)
api_router.include_router(resume_router)
api_router.include_router(matching_router)
api_router.include_router(log_router)
