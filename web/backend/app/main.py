"""FastAPI application for the cityreg web portal.

Provides REST API endpoints wrapping the cityreg package for:
- Listing cities with pagination and aggregate statistics
- Looking up a single city
- Registering new cities
- Previewing satisfaction scores
- Probing substrate availability
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cityreg import __version__
from web.backend.app.routers import cities

app = FastAPI(
    title="cityreg API",
    description=(
        "REST API for the cityreg city registry. "
        "Provides endpoints for listing, registering, and scoring cities "
        "stored on a key-value substrate."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(cities.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "cityreg API",
        "version": __version__,
        "description": "City registry REST API",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
