"""Workflow routes: validation, layout, inputs, prompts, simulation, import."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from skillflow.api.dependencies import get_app_settings, get_catalog
from skillflow.catalog import SkillCatalog
from skillflow.config import Settings
from skillflow.errors import MissingInputsError, WorkflowImportError, WorkflowValidationError
from skillflow.observability import get_logger, with_run_context
from skillflow.runtime import ExecutionMode, ExecutionState, WorkflowScheduler, get_required_inputs
from skillflow.workflow import (
    Workflow,
    auto_arrange,
    compile_workflow_prompt,
    import_workflow,
    validate_workflow,
)
from skillflow.workflow.serialization import workflow_to_dict

logger = get_logger(__name__)
router = APIRouter(prefix="/v1/workflows")


class SimulateRequest(BaseModel):
    """Request model for a simulated run."""

    workflow: Workflow = Field(..., description="Workflow to run")
    inputs: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="User-supplied values: {node_id: {input_id: value}}",
    )


class ImportRequest(BaseModel):
    """Request model for importing an exported workflow document."""

    content: str = Field(..., description="Exported workflow JSON text")


@router.post("/validate")
def validate(
    workflow: Workflow,
    catalog: SkillCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Validate a workflow, returning every error found."""
    result = validate_workflow(workflow, catalog, reject_cycles=settings.reject_cycles)
    return result.model_dump()


@router.post("/arrange")
def arrange(workflow: Workflow) -> dict[str, Any]:
    """Lay nodes out left-to-right by dependency depth."""
    positions = auto_arrange(workflow)
    return {
        "workflow": workflow_to_dict(workflow),
        "positions": {node_id: pos.model_dump() for node_id, pos in positions.items()},
    }


@router.post("/required-inputs")
def required_inputs(
    workflow: Workflow,
    catalog: SkillCatalog = Depends(get_catalog),
) -> list[dict[str, Any]]:
    """Required inputs that no connection feeds."""
    return [
        p.model_dump(mode="json", by_alias=True)
        for p in get_required_inputs(workflow, catalog)
    ]


@router.post("/prompt")
def prompt(
    workflow: Workflow,
    catalog: SkillCatalog = Depends(get_catalog),
) -> dict[str, str]:
    """Compile the workflow into a single copyable prompt."""
    return {"prompt": compile_workflow_prompt(workflow, catalog)}


@router.post("/simulate")
async def simulate(
    request: SimulateRequest,
    catalog: SkillCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """
    Run a workflow in simulate mode (no AI calls, no quota).

    Returns:
        Final state plus every progress snapshot observed

    Raises:
        HTTPException: 422 if the workflow is invalid or inputs are missing
    """
    progress: list[ExecutionState] = []
    scheduler = WorkflowScheduler(catalog, settings=settings)

    try:
        state = await scheduler.execute(
            request.workflow,
            on_progress=progress.append,
            initial_inputs=request.inputs,
            mode=ExecutionMode.SIMULATE,
        )
    except WorkflowValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors}) from e
    except MissingInputsError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "error": str(e),
                "pending": [p.model_dump(mode="json", by_alias=True) for p in e.pending],
            },
        ) from e

    logger.info(
        "Simulated run served",
        extra=with_run_context(run_id=state.run_id, workflow_id=state.workflow_id),
    )
    return {
        "state": state.to_dict(),
        "progress": [snapshot.to_dict() for snapshot in progress],
    }


@router.post("/import")
def import_document(request: ImportRequest) -> dict[str, Any]:
    """
    Import an exported workflow document.

    Raises:
        HTTPException: 400 if the document is not a valid workflow
    """
    try:
        workflow = import_workflow(request.content)
    except WorkflowImportError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return workflow_to_dict(workflow)
