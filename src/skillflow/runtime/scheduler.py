"""
Workflow Scheduler - dependency-ordered execution of a workflow.

Runs nodes one at a time in layer order, feeding each node the outputs of
its upstream nodes, and reports every step to an observer. In AI mode the
usage gate is consulted before every backend call.

State machine per run:
    idle -> running -> completed | failed | quota_exceeded

Only quota exhaustion is an expected, user-actionable stop
(QuotaExceededError); every other backend failure ends the run with
NodeExecutionError or InvalidCredentialError. Partial node outputs are
kept on the state carried by the exception.
"""
import asyncio
import inspect
import uuid
from typing import Any, Awaitable, Callable, Union

from skillflow.catalog import SkillCatalog
from skillflow.config import Settings, get_settings
from skillflow.errors import (
    BackendError,
    ExecutionError,
    InvalidCredentialError,
    MissingInputsError,
    NodeExecutionError,
    QuotaExceededError,
)
from skillflow.observability import get_logger, with_run_context
from skillflow.runtime.backend import (
    AIBackend,
    BackendRequest,
    map_result_to_outputs,
    simulate_node_outputs,
)
from skillflow.runtime.inputs import InitialInputs, resolve_node_inputs, unresolved_inputs
from skillflow.runtime.state import (
    ErrorKind,
    ExecutionErrorInfo,
    ExecutionMode,
    ExecutionState,
    RunStatus,
)
from skillflow.usage import UsageGate
from skillflow.workflow import Workflow, WorkflowNode, build_node_prompt, compute_layers, ensure_valid

logger = get_logger(__name__)

ProgressCallback = Callable[[ExecutionState], Union[None, Awaitable[None]]]


class WorkflowScheduler:
    """
    Executes workflows against an AI backend or in simulation.

    Usage:
        scheduler = WorkflowScheduler(catalog, backend=HttpAIBackend(), gate=gate)
        state = await scheduler.execute(workflow, on_progress=print,
                                        initial_inputs={"node-1": {"topic": "..."}})
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        backend: AIBackend | None = None,
        gate: UsageGate | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize scheduler.

        Args:
            catalog: Skill catalog resolving node schemas
            backend: AI backend (required for AI mode)
            gate: Usage gate (required for AI mode)
            settings: Settings override
        """
        self.catalog = catalog
        self.backend = backend
        self.gate = gate
        self.settings = settings or get_settings()

    async def execute(
        self,
        workflow: Workflow,
        on_progress: ProgressCallback | None = None,
        initial_inputs: InitialInputs | None = None,
        mode: ExecutionMode | str = ExecutionMode.AI,
    ) -> ExecutionState:
        """
        Run a workflow to completion.

        Args:
            workflow: Workflow to execute
            on_progress: Called with a copied state after every step
            initial_inputs: User values, {node_id: {input_id: value}}
            mode: "ai" or "simulate"

        Returns:
            Final (completed) execution state

        Raises:
            WorkflowValidationError: Workflow invalid; nothing ran
            MissingInputsError: Required inputs unresolved; nothing ran
            QuotaExceededError: Free runs used up and no credential
            InvalidCredentialError: Backend rejected the credential
            NodeExecutionError: Backend call for a node failed
        """
        mode = ExecutionMode(mode)
        initial_inputs = initial_inputs or {}

        ensure_valid(workflow, self.catalog, reject_cycles=self.settings.reject_cycles)

        pending = unresolved_inputs(workflow, self.catalog, initial_inputs)
        if pending:
            raise MissingInputsError(pending)

        if mode == ExecutionMode.AI and (self.backend is None or self.gate is None):
            raise ValueError("AI mode requires both a backend and a usage gate")

        layering = compute_layers(workflow)
        state = ExecutionState(
            run_id=str(uuid.uuid4()),
            workflow_id=workflow.id,
            mode=mode,
            status=RunStatus.RUNNING,
        )
        extra = with_run_context(run_id=state.run_id, workflow_id=workflow.id, mode=mode.value)

        if layering.has_cycle:
            logger.warning(
                "Nodes outside the DAG run last with whatever inputs are available",
                extra={**extra, "remainder": layering.remainder},
            )

        logger.info("Workflow run started", extra={**extra, "nodes": len(workflow.nodes)})
        await self._emit(on_progress, state)

        for node_id in layering.execution_order:
            node = workflow.get_node(node_id)
            if node is None:
                continue

            state.current_node_id = node_id
            await self._emit(on_progress, state)

            inputs = resolve_node_inputs(
                workflow, node, self.catalog, state.node_outputs, initial_inputs
            )

            if mode == ExecutionMode.SIMULATE:
                outputs = await self._simulate(node, inputs)
            else:
                outputs = await self._invoke(state, node, inputs, on_progress)

            state.node_outputs[node_id] = outputs
            state.completed_node_ids.append(node_id)
            logger.info(
                "Node completed",
                extra=with_run_context(
                    run_id=state.run_id,
                    workflow_id=workflow.id,
                    node_id=node_id,
                    skill_id=node.skill_id,
                ),
            )
            await self._emit(on_progress, state)

        state.current_node_id = None
        state.status = RunStatus.COMPLETED
        logger.info("Workflow run completed", extra=extra)
        await self._emit(on_progress, state)
        return state

    async def _simulate(self, node: WorkflowNode, inputs: dict[str, Any]) -> dict[str, Any]:
        """Placeholder outputs; never touches the usage gate."""
        delay = self.settings.simulate_step_delay_s
        if delay > 0:
            await asyncio.sleep(delay)
        return simulate_node_outputs(
            self.catalog.get_skill(node.skill_id),
            self.catalog.get_schema(node.skill_id),
            inputs,
        )

    async def _invoke(
        self,
        state: ExecutionState,
        node: WorkflowNode,
        inputs: dict[str, Any],
        on_progress: ProgressCallback | None,
    ) -> dict[str, Any]:
        """Call the AI backend for one node, honouring the usage gate."""
        backend, gate = self.backend, self.gate
        if backend is None or gate is None:
            raise ValueError("AI mode requires both a backend and a usage gate")
        extra = with_run_context(
            run_id=state.run_id,
            workflow_id=state.workflow_id,
            node_id=node.id,
            skill_id=node.skill_id,
        )

        check = gate.can_run()
        if not check.can_run:
            message = check.reason or "Free run limit reached"
            error = QuotaExceededError(
                message,
                limit=gate.get_free_run_limit(),
                used=gate.get_usage_count(),
                node_id=node.id,
            )
            raise await self._fail(state, error, ErrorKind.QUOTA_EXCEEDED, on_progress, extra)

        credential = gate.get_credential() if gate.has_credential() else None
        skill = self.catalog.get_skill(node.skill_id)
        schema = self.catalog.get_schema(node.skill_id)
        request = BackendRequest(
            skill_id=node.skill_id,
            node_id=node.id,
            prompt=build_node_prompt(skill, schema, inputs),
            inputs=inputs,
            credential=credential,
            fingerprint=gate.fingerprint,
        )

        logger.info("AI call started", extra=extra)
        try:
            response = await backend.execute(request)
        except BackendError as e:
            if e.kind == BackendError.QUOTA_EXCEEDED:
                error: ExecutionError = QuotaExceededError(
                    e.message, limit=e.limit, used=e.used, node_id=node.id
                )
                kind = ErrorKind.QUOTA_EXCEEDED
            elif e.kind == BackendError.INVALID_CREDENTIAL:
                error = InvalidCredentialError(e.message, node_id=node.id)
                kind = ErrorKind.INVALID_CREDENTIAL
            else:
                error = NodeExecutionError(
                    f"Node {node.id} ({node.skill_id}) failed: {e.message}",
                    node_id=node.id,
                )
                kind = ErrorKind.BACKEND_ERROR
            raise await self._fail(state, error, kind, on_progress, extra) from e
        except Exception as e:
            error = NodeExecutionError(
                f"Node {node.id} ({node.skill_id}) failed: {e}",
                node_id=node.id,
            )
            raise await self._fail(
                state, error, ErrorKind.BACKEND_ERROR, on_progress, extra
            ) from e

        if credential is None:
            gate.record_run()

        return map_result_to_outputs(schema, response.result)

    async def _fail(
        self,
        state: ExecutionState,
        error: ExecutionError,
        kind: ErrorKind,
        on_progress: ProgressCallback | None,
        extra: dict[str, Any],
    ) -> ExecutionError:
        """Move the run to its terminal failure state; returns the error to raise."""
        state.status = (
            RunStatus.QUOTA_EXCEEDED if kind == ErrorKind.QUOTA_EXCEEDED else RunStatus.FAILED
        )
        state.current_node_id = None
        state.error = ExecutionErrorInfo(kind=kind, message=str(error), node_id=error.node_id)
        error.state = state.snapshot()

        logger.error(
            "Workflow run stopped",
            extra={**extra, "status": state.status.value, "error_kind": kind.value},
        )
        await self._emit(on_progress, state)
        return error

    @staticmethod
    async def _emit(on_progress: ProgressCallback | None, state: ExecutionState) -> None:
        if on_progress is None:
            return
        result = on_progress(state.snapshot())
        if inspect.isawaitable(result):
            await result


async def execute_workflow(
    workflow: Workflow,
    catalog: SkillCatalog,
    on_progress: ProgressCallback | None = None,
    initial_inputs: InitialInputs | None = None,
    mode: ExecutionMode | str = ExecutionMode.AI,
    backend: AIBackend | None = None,
    gate: UsageGate | None = None,
) -> ExecutionState:
    """Convenience wrapper building a one-off scheduler."""
    scheduler = WorkflowScheduler(catalog, backend=backend, gate=gate)
    return await scheduler.execute(
        workflow,
        on_progress=on_progress,
        initial_inputs=initial_inputs,
        mode=mode,
    )
