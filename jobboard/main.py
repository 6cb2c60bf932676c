"""
Job Board - Main Application

FastAPI backend with:
- MongoDB for users, jobs and applicants
- Local disk for uploaded resumes
- JWT authentication with Admin / Job Provider / User roles

Run: uvicorn jobboard.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobboard.api.routes import api_router
from jobboard.db.mongodb import init_mongo_indexes, test_mongo_connection
from jobboard.core.config import get_settings
from jobboard.utils.error_handlers import register_exception_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Board",
    description="""
    A job board backend.

    ## Roles
    - **Admin**: manage users and jobs; deleting a user removes their jobs and applications
    - **Job Provider**: post jobs, review, shortlist and reject applicants
    - **User**: browse jobs and apply with a PDF resume
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup (the applicant uniqueness index lives here)."""
    try:
        init_mongo_indexes()
    except Exception:
        logger.exception("MongoDB index initialization failed")
        raise


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
