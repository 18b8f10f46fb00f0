"""Health check routes."""
from fastapi import APIRouter, Depends

from skillflow.api.dependencies import get_catalog
from skillflow.catalog import SkillCatalog

router = APIRouter()


@router.get("/health")
def health_check(catalog: SkillCatalog = Depends(get_catalog)) -> dict:
    """
    Health check endpoint.

    Returns:
        Status dict with the number of catalog skills loaded
    """
    return {
        "status": "healthy",
        "service": "skillflow",
        "skills": len(catalog),
    }
