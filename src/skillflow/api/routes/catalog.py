"""Catalog and template routes."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from skillflow.api.dependencies import get_catalog
from skillflow.catalog import SkillCatalog
from skillflow.workflow import get_template, list_templates
from skillflow.workflow.serialization import workflow_to_dict

router = APIRouter()


@router.get("/v1/skills")
def list_skills(catalog: SkillCatalog = Depends(get_catalog)) -> list[dict[str, Any]]:
    """Skills usable in workflows, with their typed ports."""
    skills = []
    for schema in catalog.list_schemas():
        info = catalog.get_skill(schema.skill_id)
        entry = info.model_dump(mode="json", by_alias=True)
        entry.update(schema.model_dump(mode="json", by_alias=True, exclude={"skill_id"}))
        skills.append(entry)
    return skills


@router.get("/v1/templates")
def templates() -> list[dict[str, Any]]:
    """Sample workflows shipped with the catalog."""
    return [workflow_to_dict(t) for t in list_templates()]


@router.get("/v1/templates/{template_id}")
def template(template_id: str) -> dict[str, Any]:
    """
    Get one template.

    Raises:
        HTTPException: If template not found
    """
    found = get_template(template_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return workflow_to_dict(found)
