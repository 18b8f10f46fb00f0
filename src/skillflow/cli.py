"""
SkillFlow CLI - Main entry point.

Provides commands for:
- Validating, arranging and compiling workflow files
- Running workflows (AI or simulated)
- Managing the local free-run quota and API key
- Listing catalog skills and exporting templates
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from skillflow.catalog import SkillCatalog
from skillflow.config import get_settings
from skillflow.errors import (
    CatalogLoadError,
    ExecutionError,
    MissingInputsError,
    QuotaExceededError,
    SkillFlowError,
    WorkflowImportError,
    WorkflowValidationError,
)
from skillflow.runtime import (
    ExecutionMode,
    ExecutionState,
    HttpAIBackend,
    WorkflowScheduler,
    get_required_inputs,
)
from skillflow.usage import FileUsageStore, UsageGate
from skillflow.workflow import (
    Workflow,
    auto_arrange,
    compile_workflow_prompt,
    export_workflow,
    get_template,
    import_workflow,
    list_templates,
    validate_workflow,
)

logger = logging.getLogger("skillflow")


def _load_workflow(path: str) -> Workflow:
    try:
        return import_workflow(Path(path).read_text(encoding="utf-8"))
    except WorkflowImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _write_or_echo(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text)


def _gate() -> UsageGate:
    """Gate over the local usage file (the CLI's client-side storage)."""
    settings = get_settings()
    return UsageGate(FileUsageStore(settings.usage_file), limit=settings.free_run_limit)


def _parse_inputs(pairs: Tuple[str, ...]) -> dict[str, dict[str, str]]:
    """Turn ``node.input=value`` pairs into {node_id: {input_id: value}}."""
    values: dict[str, dict[str, str]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        node_id, dot, input_id = key.rpartition(".")
        if not sep or not dot or not node_id or not input_id:
            raise click.BadParameter(
                f"expected NODE.INPUT=VALUE, got {pair!r}", param_hint="--input"
            )
        values.setdefault(node_id, {})[input_id] = value
    return values


@click.group()
@click.option(
    "--catalog", "catalog_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Custom skill catalog (YAML or JSON)"
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, catalog_path: Optional[str], verbose: bool):
    """SkillFlow - compose and run skill workflows."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    path = catalog_path or get_settings().catalog_path
    try:
        ctx.obj["catalog"] = SkillCatalog.from_file(path) if path else SkillCatalog.default()
    except CatalogLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


# ==============================================================================
# Workflow Commands
# ==============================================================================

@cli.command("validate")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate_cmd(ctx: click.Context, workflow_file: str):
    """Validate a workflow file; exits 1 when invalid."""
    workflow = _load_workflow(workflow_file)
    result = validate_workflow(
        workflow,
        ctx.obj["catalog"],
        reject_cycles=get_settings().reject_cycles,
    )

    if result.valid:
        click.echo(f"Workflow '{workflow.name}' is valid ({len(workflow.nodes)} skills)")
        return

    click.echo("Workflow is invalid:")
    for err in result.errors:
        click.echo(f"  - {err}")
    sys.exit(1)


@cli.command("arrange")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Write the arranged workflow here")
@click.option("--in-place", is_flag=True, help="Overwrite WORKFLOW_FILE")
def arrange_cmd(workflow_file: str, output: Optional[str], in_place: bool):
    """Lay nodes out left-to-right by dependency depth."""
    workflow = _load_workflow(workflow_file)
    auto_arrange(workflow)
    _write_or_echo(export_workflow(workflow), workflow_file if in_place else output)


@cli.command("prompt")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def prompt_cmd(ctx: click.Context, workflow_file: str):
    """Print the workflow compiled into a single prompt."""
    workflow = _load_workflow(workflow_file)
    click.echo(compile_workflow_prompt(workflow, ctx.obj["catalog"]))


@cli.command("inputs")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def inputs_cmd(ctx: click.Context, workflow_file: str):
    """List required inputs that have to be supplied with --input."""
    workflow = _load_workflow(workflow_file)
    pending = get_required_inputs(workflow, ctx.obj["catalog"])
    if not pending:
        click.echo("No inputs required")
        return
    for p in pending:
        click.echo(f"{p.node_id}.{p.input_id}  {p.skill_name} / {p.input_name} ({p.kind.value})")


@cli.command("run")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--input", "-i", "input_pairs",
    multiple=True,
    help="Input value as NODE.INPUT=VALUE (repeatable)"
)
@click.option("--simulate", is_flag=True, help="Placeholder outputs; no AI calls, no quota")
@click.option("--backend-url", help="AI execute service URL (defaults to settings)")
@click.option("--show-outputs/--no-show-outputs", default=True, help="Print node outputs")
@click.pass_context
def run_cmd(
    ctx: click.Context,
    workflow_file: str,
    input_pairs: Tuple[str, ...],
    simulate: bool,
    backend_url: Optional[str],
    show_outputs: bool,
):
    """
    Execute a workflow.

    WORKFLOW_FILE: Path to an exported workflow JSON

    Examples:

        # Try it without spending free runs
        skillflow run ./workflow.json --simulate -i node-1.topic="LLM agents"

        # Real run against the AI service
        skillflow run ./workflow.json -i node-1.topic="LLM agents"
    """
    workflow = _load_workflow(workflow_file)
    initial_inputs = _parse_inputs(input_pairs)
    catalog: SkillCatalog = ctx.obj["catalog"]

    if simulate:
        scheduler = WorkflowScheduler(catalog)
        mode = ExecutionMode.SIMULATE
    else:
        scheduler = WorkflowScheduler(
            catalog,
            backend=HttpAIBackend(base_url=backend_url),
            gate=_gate(),
        )
        mode = ExecutionMode.AI

    seen: set[str] = set()

    def on_progress(state: ExecutionState) -> None:
        if state.current_node_id and state.current_node_id not in seen:
            seen.add(state.current_node_id)
            node = workflow.get_node(state.current_node_id)
            skill = catalog.get_skill(node.skill_id) if node else None
            click.echo(f"-> {state.current_node_id} ({skill.name if skill else '?'})")

    try:
        state = asyncio.run(
            scheduler.execute(
                workflow,
                on_progress=on_progress,
                initial_inputs=initial_inputs,
                mode=mode,
            )
        )
    except WorkflowValidationError as e:
        click.echo("Workflow is invalid:", err=True)
        for err in e.errors:
            click.echo(f"  - {err}", err=True)
        sys.exit(1)
    except MissingInputsError as e:
        click.echo("Missing required inputs:", err=True)
        for p in e.pending:
            click.echo(f"  --input {p.node_id}.{p.input_id}=...  ({p.input_name})", err=True)
        sys.exit(1)
    except QuotaExceededError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Add a key with: skillflow usage set-key <KEY>", err=True)
        sys.exit(2)
    except ExecutionError as e:
        done = len(e.state.completed_node_ids) if e.state else 0
        click.echo(f"Error: {e} ({done} skills completed)", err=True)
        sys.exit(1)

    click.echo(f"\nResult: {state.status.value}")
    if show_outputs:
        for node_id in state.completed_node_ids:
            for output_id, value in state.node_outputs.get(node_id, {}).items():
                click.echo(f"\n[{node_id}.{output_id}]\n{value}")


# ==============================================================================
# Usage Commands
# ==============================================================================

@cli.group()
def usage():
    """Inspect free runs and manage the API key."""
    pass


@usage.command("show")
def usage_show():
    """Show free-run usage for this machine."""
    gate = _gate()
    click.echo(f"Fingerprint: {gate.fingerprint}")
    click.echo(f"Used: {gate.get_usage_count()}/{gate.get_free_run_limit()}")
    click.echo(f"Remaining: {gate.get_remaining_free_runs()}")
    click.echo(f"API key: {'set' if gate.has_credential() else 'not set'}")


@usage.command("set-key")
@click.argument("api_key")
def usage_set_key(api_key: str):
    """Store an API key; runs with it are not counted."""
    if not api_key.strip():
        raise click.BadParameter("API key must not be empty", param_hint="API_KEY")
    _gate().set_credential(api_key.strip())
    click.echo("API key saved")


@usage.command("clear-key")
def usage_clear_key():
    """Remove the stored API key."""
    _gate().clear_credential()
    click.echo("API key removed")


# ==============================================================================
# Catalog Commands
# ==============================================================================

@cli.command("skills")
@click.pass_context
def skills_cmd(ctx: click.Context):
    """List skills usable in workflows."""
    catalog: SkillCatalog = ctx.obj["catalog"]
    for schema in catalog.list_schemas():
        skill = catalog.get_skill(schema.skill_id)
        ins = ", ".join(f"{p.id}:{p.kind.value}" for p in schema.inputs) or "-"
        outs = ", ".join(f"{p.id}:{p.kind.value}" for p in schema.outputs) or "-"
        click.echo(f"{schema.skill_id}  {skill.name}  in[{ins}] out[{outs}]")


@cli.group()
def templates():
    """Sample workflows."""
    pass


@templates.command("list")
def templates_list():
    """List available templates."""
    for t in list_templates():
        click.echo(f"{t.id}: {t.name} ({len(t.nodes)} skills)")


@templates.command("export")
@click.argument("template_id")
@click.option("--output", "-o", type=click.Path(), help="Write to file instead of stdout")
def templates_export(template_id: str, output: Optional[str]):
    """Export a template as a workflow file."""
    template = get_template(template_id)
    if template is None:
        click.echo(f"Error: Unknown template: {template_id}", err=True)
        sys.exit(1)
    _write_or_echo(export_workflow(template), output)


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except SkillFlowError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
