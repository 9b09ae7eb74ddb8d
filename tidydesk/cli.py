"""CLI interface for TidyDesk."""

import json
import logging
import sys
from pathlib import Path

import click

from .settings import settings
from .batch import (
    BatchReport,
    OperationResult,
    describe_operation,
    plan_moves,
    plan_renames,
    run_batch,
)
from .batch import executor
from .chat import describe_duplicates, describe_largest, handle_chat_message
from .filesystem import (
    AIOrganizer,
    fallback_organization,
    find_duplicates_by_size,
    find_largest_files,
    format_size,
    get_directory_tree,
    organize_by_extension,
    organize_by_month,
    scan_directory,
    summarize_files,
)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ORGANIZE_STRATEGIES = ["type", "date", "category", "project", "ai"]


def _load_files(directory: str):
    try:
        return scan_directory(directory)
    except OSError as e:
        click.echo(f"❌ Cannot read {directory}: {e}", err=True)
        sys.exit(1)


def _make_organizer(use_ai: bool = True) -> AIOrganizer:
    if not use_ai:
        return AIOrganizer(enabled=False)
    return AIOrganizer()


def _print_result(result: OperationResult, to_stderr: bool = False) -> None:
    if result.operation is not None:
        label = describe_operation(result.operation)
    else:
        label = f"invalid {result.raw!r}"

    if result.success:
        click.echo(f"  ✅ {label}", err=to_stderr)
    else:
        click.echo(f"  ❌ {label}: {result.error} [{result.error_kind.value}]", err=True)


def _print_report(report: BatchReport) -> None:
    click.echo(f"\n{report.successful}/{report.total} operations succeeded, {report.failed} failed")


def _finish_single(result: OperationResult) -> None:
    _print_result(result)
    if not result.success:
        sys.exit(1)


def _apply_operations(operations) -> BatchReport:
    report = run_batch(operations, on_result=lambda _, result: _print_result(result))
    _print_report(report)
    return report


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show info level log output")
def cli(verbose):
    """TidyDesk - organize folders with batch file operations."""
    if verbose:
        logging.getLogger().setLevel(logging.INFO)


@cli.command("ls")
@click.argument("directory", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--tree", "as_tree", is_flag=True, help="Show a directory tree instead")
@click.option("--depth", default=3, help="Tree depth")
def list_cmd(directory, as_tree, depth):
    """List a directory."""
    if as_tree:
        click.echo(f"{Path(directory).resolve()}/")
        for line in get_directory_tree(directory, max_depth=depth):
            click.echo(line)
        return

    files = _load_files(directory)
    for entry in files:
        if entry.is_directory:
            click.echo(f"📁 {entry.name}/")
        else:
            click.echo(f"📄 {entry.name} ({format_size(entry.size)}, {entry.modified_at:%Y-%m-%d %H:%M})")

    summary = summarize_files(files)
    click.echo(
        f"\n{summary['total_files']} files, {summary['total_folders']} folders, "
        f"{format_size(summary['total_size'])}"
    )


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--by",
    "strategy",
    type=click.Choice(ORGANIZE_STRATEGIES),
    default="type",
    help="Grouping strategy",
)
@click.option(
    "--target",
    type=click.Path(file_okay=False),
    default=None,
    help="Folder that receives the groups (defaults to DIRECTORY)",
)
@click.option("--query", default="", help="Request text passed to the language model (--by ai)")
@click.option("--apply", "apply_plan", is_flag=True, help="Execute the plan instead of only showing it")
def organize(directory, strategy, target, query, apply_plan):
    """Propose (and optionally apply) a folder organization."""
    files = _load_files(directory)
    target = target or directory

    if strategy == "type":
        buckets = organize_by_extension(files)
    elif strategy == "date":
        buckets = organize_by_month(files)
    elif strategy == "category":
        buckets = fallback_organization(files)
    elif strategy == "project":
        buckets = _make_organizer().detect_projects(files)
    else:
        buckets = _make_organizer().suggest_organization(files, query)

    if not buckets:
        click.echo("Nothing to organize.")
        return

    click.echo(f"\n📂 Proposed organization ({strategy}):\n")
    for category, group in buckets.items():
        click.echo(f"• {category}: {len(group)} files")

    operations = plan_moves(buckets, target)

    if not apply_plan:
        click.echo(f"\nPlan ({len(operations)} operations):")
        for operation in operations:
            click.echo(f"  {describe_operation(operation)}")
        click.echo("\nPreview only. Run again with --apply to execute.")
        return

    report = _apply_operations(operations)
    if report.failed:
        sys.exit(1)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
def duplicates(directory):
    """Find potential duplicates (same file size)."""
    click.echo(describe_duplicates(find_duplicates_by_size(_load_files(directory))))


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("-n", "--limit", default=None, type=int, help="Number of files to show")
def largest(directory, limit):
    """Show the largest files."""
    click.echo(describe_largest(find_largest_files(_load_files(directory), limit=limit)))


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--apply", "apply_plan", is_flag=True, help="Execute the renames")
def renames(directory, apply_plan):
    """Ask the language model for better file names."""
    files = _load_files(directory)
    organizer = _make_organizer()
    if not organizer.available:
        click.echo("❌ AI features are disabled (TIDYDESK_AI_ENABLED)", err=True)
        sys.exit(1)

    suggestions = organizer.suggest_renames(files)
    if not suggestions:
        click.echo("No rename suggestions.")
        return

    for s in suggestions:
        click.echo(f"• {s.original} → {s.suggested} ({s.reason})")

    if apply_plan:
        report = _apply_operations(plan_renames(suggestions, files))
        if report.failed:
            sys.exit(1)


@cli.command("run")
@click.argument("operations_file", type=click.File("r"))
@click.option("--quiet", is_flag=True, help="Only print the JSON report")
def run_cmd(operations_file, quiet):
    """Run a JSON list of operations and print the report as JSON.

    The file holds either a list of operations or an object with an
    "operations" list, for example:

        [{"type": "create_folder", "path": "/tmp/x"},
         {"type": "copy", "source": "/tmp/x", "destination": "/tmp/y"}]
    """
    try:
        data = json.load(operations_file)
    except json.JSONDecodeError as e:
        click.echo(f"❌ Invalid JSON: {e}", err=True)
        sys.exit(2)

    if isinstance(data, dict):
        data = data.get("operations")
    if not isinstance(data, list):
        click.echo("❌ Expected a list of operations", err=True)
        sys.exit(2)

    if quiet:
        report = run_batch(data)
    else:
        report = run_batch(data, on_result=lambda _, result: _print_result(result, to_stderr=True))
    click.echo(report.model_dump_json(indent=2))
    if report.failed:
        sys.exit(1)


@cli.command()
@click.argument("source")
@click.argument("destination")
def move(source, destination):
    """Move a file or folder."""
    _finish_single(executor.move(source, destination))


@cli.command()
@click.argument("source")
@click.argument("destination")
def copy(source, destination):
    """Copy a file or folder recursively."""
    _finish_single(executor.copy(source, destination))


@cli.command()
@click.argument("path")
@click.option("--force", is_flag=True, help="Delete without confirmation")
def delete(path, force):
    """Delete a file or folder recursively (cannot be undone)."""
    if not force:
        click.confirm(f"⚠️ Really delete '{path}'? This cannot be undone", abort=True)
    _finish_single(executor.delete(path))


@cli.command()
@click.argument("old_path")
@click.argument("new_path")
def rename(old_path, new_path):
    """Rename a file or folder."""
    _finish_single(executor.rename(old_path, new_path))


@cli.command()
@click.argument("path")
def mkdir(path):
    """Create a folder (and missing parents)."""
    _finish_single(executor.create_folder(path))


@cli.command()
@click.argument("path")
@click.option("--content", default="", help="Text to write into the file")
def touch(path, content):
    """Create or overwrite a file."""
    _finish_single(executor.create_file(path, content))


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--target", type=click.Path(file_okay=False), default=None, help="Folder for organized groups")
@click.option("--no-ai", is_flag=True, help="Do not use the language model")
def chat(directory, target, no_ai):
    """Interactive assistant for one folder."""
    organizer = _make_organizer(use_ai=not no_ai)
    target = target or directory

    click.echo(f"💬 TidyDesk assistant for {Path(directory).resolve()}")
    click.echo("Ask me to organize by type, date, category or project, find duplicates or large files.")
    click.echo("Type 'exit' to quit.\n")

    while True:
        try:
            query = click.prompt("You", prompt_suffix="> ").strip()
        except (EOFError, click.Abort):
            click.echo()
            break

        if query.lower() in ("exit", "quit", "bye"):
            break
        if not query:
            continue

        try:
            files = scan_directory(directory)
            proposal = handle_chat_message(query, files, target, organizer=organizer)
            click.echo(f"\n{proposal.message}\n")

            if proposal.operations and click.confirm(
                f"Apply {len(proposal.operations)} operations?", default=False
            ):
                _apply_operations(proposal.operations)
                click.echo()
        except Exception as e:
            click.echo(f"\n❌ Error: {e}", err=True)
            logger.exception("Chat error")


@cli.command()
def health():
    """Check whether the language model is reachable."""
    if not settings.ollama.enabled:
        click.echo("ℹ️ AI features disabled, fallback organization only")
        sys.exit(0)

    from .providers import OllamaProvider

    provider = OllamaProvider()
    if provider.is_available():
        click.echo(f"✅ Ollama is running ({provider.model} at {provider.base_url})")
        sys.exit(0)

    click.echo(f"❌ Ollama is not reachable at {provider.base_url}", err=True)
    sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Host to bind the server to")
@click.option("--port", default=None, type=int, help="Port to run the server on")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host, port, reload):
    """Start the HTTP API used by desktop front ends."""
    host = host or settings.api.host
    port = port or settings.api.port

    click.echo("🚀 Starting TidyDesk API server...")
    click.echo(f"   Host: {host}")
    click.echo(f"   Port: {port}")
    click.echo(f"   OpenAPI Docs: http://{host}:{port}/docs")

    try:
        from .api import run_server
        run_server(host=host, port=port, reload=reload)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
