"""
Football Predictions API - Main Application Entry Point
"""

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before imports that might use them
load_dotenv()

# Now import app modules that require environment variables
from footpredict.models.common import HealthResponse, ReadinessResponse
from footpredict.routers import predictions
from footpredict.services.factory import close_prediction_service, get_prediction_service
from footpredict.services.prediction_service import PredictionService
from footpredict.utils.config import settings, verify_env_variables
from footpredict.utils.logger import logger

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Football match predictions favouring home sides, cached for 2 hours",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    debug=settings.APP_DEBUG,
)

logger.info("Environment variables loaded")

# Configure CORS - allow frontend to communicate with backend
frontend_urls = [
    "http://localhost:3000",  # Local development
    "http://localhost:3001",  # Local API host
    "https://ftbpredict.netlify.app",  # Production
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_urls,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,  # 24 hours cache for preflight requests
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint to verify API is running.
    Returns current API version and status.
    """
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/ready", response_model=ReadinessResponse)
async def ready_check(service: PredictionService = Depends(get_prediction_service)):
    """
    Readiness check to verify that the application can serve requests.

    `cache` reports whether the cache store answers; `upstream` whether the
    live Betminer feed is configured (offline mode serves sample data).
    """
    status = {
        "cache": await service.cache_store.ping(),
        "upstream": service.fetcher.is_live,
    }

    return {"ready": status["cache"], "services": status}


app.include_router(predictions.router, prefix="/predictions", tags=["predictions"])


@app.on_event("startup")
async def startup_event():
    """
    Executes when the FastAPI application starts.
    Validate configuration.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    if settings.APP_DEBUG:
        logger.warning("Running in DEBUG mode - not recommended for production")

    if not verify_env_variables():
        logger.warning(
            "Some required environment variables are missing. "
            "Some features may not work correctly."
        )


@app.on_event("shutdown")
async def shutdown_event():
    """
    Executes when the FastAPI application shuts down.
    Close the cache store connection.
    """
    logger.info(f"Shutting down {settings.APP_NAME}")
    await close_prediction_service()


if __name__ == "__main__":
    uvicorn.run("footpredict.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.APP_DEBUG)
