"""
Apply Assist Backend - Main Application

FastAPI backend for the Naukri apply-assist browser extension:
- Gemini (OpenAI-compatible endpoint) for answers and resume parsing
- MongoDB for scraped jobs
- JSON files for LLM interaction logs

Run: uvicorn apply_assist.main:app --reload
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from apply_assist.api.routes import api_router
from apply_assist.core.config import get_settings
from apply_assist.core.logging_config import get_logger
from apply_assist.db.mongodb import init_mongo_indexes, close_mongo_client, test_mongo_connection

settings = get_settings()
logger = get_logger("apply_assist")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="""
    Autofills job-application forms from a candidate profile and a Gemini LLM.

    ## Features
    - **Question answering**: text and multiple-choice form questions
    - **Chatbot actions**: next UI action for recruiter chatbots
    - **Resume parsing**: resume text/file to structured profile
    - **Job matching**: scraped jobs ranked by skill overlap
    - **Interaction logs**: audit trail and accuracy stats
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Method, path, status and latency for every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Server Error",
            "message": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.on_event("shutdown")
async def shutdown_event():
    close_mongo_client()


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness check."""
    return {"status": "ok"}


@app.get("/health/details", tags=["Health"])
def health_details():
    """Health check including MongoDB reachability."""
    return {
        "status": "ok",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
