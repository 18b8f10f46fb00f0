"""FastAPI application."""
from fastapi import FastAPI

from skillflow.api.routes import ai, catalog, health, workflows
from skillflow.observability import setup_logging

# Setup logging
setup_logging()

# Create FastAPI app
app = FastAPI(
    title="SkillFlow",
    description="Skill workflow composition and metered AI execution",
    version="0.1.0",
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(workflows.router, tags=["workflows"])
app.include_router(ai.router, tags=["ai"])


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "service": "skillflow",
        "version": "0.1.0",
        "docs": "/docs",
    }
