"""
MP Case Portal - Main Application

FastAPI application for missing-person case views, role-gated case actions
and sighting submission.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from case_portal.config.settings import settings
from case_portal.api.routes.admin import router as admin_router
from case_portal.api.routes.cases import router as cases_router
from case_portal.api.routes.sightings import router as sightings_router
from case_portal.infrastructure.api.client import MissingPersonsClient, api_client, get_api_client
from case_portal.models import HealthResponse

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting {settings.service_name} ({settings.environment})")
    logger.info(f"Missing-persons API: {settings.api_base_url}")

    await api_client.initialize()

    yield

    # Shutdown
    logger.info("Shutting down Case Portal")
    await api_client.close()


# Create FastAPI app
app = FastAPI(
    title="MP Case Portal",
    description="Case lifecycle and sighting submission for the missing-persons platform",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(cases_router)
app.include_router(sightings_router)
app.include_router(admin_router)


# Root endpoint
@app.get(
    "/",
    summary="Service Information",
    description="""
Returns basic information about the Case Portal.

**Response Example**:
```json
{
  "service": "mp-case-portal",
  "version": "0.1.0",
  "status": "running",
  "environment": "production"
}
```

**Authorization**: None required (public endpoint)
    """,
    responses={
        200: {"description": "Service information returned successfully"}
    }
)
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.environment
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="""
Returns the health status of the Case Portal and whether the
missing-persons API is reachable.

**Use Cases**:
- Kubernetes liveness/readiness probes
- Docker Compose healthcheck

**Authorization**: None required (public endpoint)
    """,
    responses={
        200: {"description": "Service is running"}
    }
)
async def health(client: MissingPersonsClient = Depends(get_api_client)) -> HealthResponse:
    """Health check"""
    api_available = await client.health_check()
    return HealthResponse(
        status="healthy" if api_available else "degraded",
        service=settings.service_name,
        api_available=api_available
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "case_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=True if settings.environment == "development" else False
    )
