"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.deps import shutdown_followup_scheduler
from app.api.middleware import CorsMiddleware, RequestIdMiddleware
from app.api.routes import api_router
from app.infrastructure.redis import redis_client
from app.logging_config import setup_logging
from app.settings import settings
from app.workers import followup_worker, submission_worker

# Setup logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    await redis_client.connect()
    yield
    # Shutdown
    await shutdown_followup_scheduler()
    await redis_client.disconnect()


# Create FastAPI app
app = FastAPI(
    title="Lead Intake Bridge",
    description="Landing page lead intake with delayed SMS follow-up",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CorsMiddleware)
app.add_middleware(RequestIdMiddleware)

app.include_router(api_router)

# Worker routes (for Cloud Tasks)
app.include_router(submission_worker.router, prefix="/workers", tags=["workers"])
app.include_router(followup_worker.router, prefix="/workers", tags=["workers"])


@app.get("/health")
async def health_check():
    """Health check endpoint for Cloud Run."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
