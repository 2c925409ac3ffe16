"""CLI application for DepRun."""

import asyncio
import logging
from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from deprun.analysis import PypiAnalyzer
from deprun.api import HttpApiHandler, RecordingApiHandler
from deprun.apply import RequirementsApplier
from deprun.config import UpdaterSettings
from deprun.discovery import RequirementsDiscoverer
from deprun.errors import UpdaterError
from deprun.job import read_job_file
from deprun.pipeline import UpdateRunner
from deprun.serialization import WireFormat

console = Console()

WIRE_FORMAT = WireFormat()


def configure_logging(level: str) -> None:
    """Route log records through rich on the CLI console."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_summary(recorder: RecordingApiHandler) -> None:
    """Show what would have been sent to the reporting API."""
    calls = Counter(name for name, _ in recorder.calls)
    table = Table(title="API calls")
    table.add_column("Endpoint")
    table.add_column("Count", justify="right")
    for name, count in calls.items():
        table.add_row(name, str(count))
    console.print(table)

    for pull_request in recorder.pull_requests:
        console.print(f"[bold]{pull_request.pr_title}[/bold]", highlight=False)
        for dependency in pull_request.dependencies:
            console.print(
                f"  {dependency.name}: {dependency.previous_version} -> {dependency.version}",
                highlight=False,
            )


app = typer.Typer(
    name="deprun",
    help="DepRun - Run dependency update jobs across repository directories",
    add_completion=False,
)


@app.command()
def run(
    job_path: Path = typer.Argument(help="Path to the job file"),
    repo_root: Path = typer.Argument(help="Local checkout of the repository"),
    base_commit_sha: str = typer.Argument(help="Commit the updates apply against"),
    output_path: Path = typer.Argument(help="Where to write the run result JSON"),
    api_url: str | None = typer.Option(None, "--api-url", help="Reporting API base URL"),
    job_id: str | None = typer.Option(None, "--job-id", help="Update job identifier"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Record API calls instead of sending them"),
    python_version: str | None = typer.Option(None, "--python", help="Target Python version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Run an update job and write the result JSON."""
    settings = UpdaterSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    if not repo_root.is_dir():
        console.print(f"Error: Repository root {repo_root} not found", style="red")
        raise typer.Exit(1)

    api_url = api_url or settings.api_url
    job_id = job_id or settings.job_id
    recorder = None
    if dry_run or not api_url:
        recorder = RecordingApiHandler()
        api = recorder
    elif not job_id:
        console.print("Error: --job-id is required with --api-url", style="red")
        raise typer.Exit(1)
    else:
        api = HttpApiHandler(
            api_url,
            job_id,
            token=settings.job_token,
            wire_format=WIRE_FORMAT,
            timeout=settings.timeout,
        )

    try:
        runner = UpdateRunner(
            api=api,
            discoverer=RequirementsDiscoverer(),
            analyzer=PypiAnalyzer(
                python_version=python_version or settings.python_version,
                index_url=settings.pypi_url,
                timeout=settings.timeout,
            ),
            applier=RequirementsApplier(),
            wire_format=WIRE_FORMAT,
        )
        result = asyncio.run(
            runner.run_file(
                job_path,
                repo_root,
                base_commit_sha,
                output_path,
                package_manager=settings.package_manager,
            )
        )
    except UpdaterError as e:
        console.print(f"Error: {e}", style="red", highlight=False)
        raise typer.Exit(1)

    console.print(
        f"Wrote {len(result.base64_dependency_files)} dependency files to {output_path}",
        highlight=False,
    )
    if recorder is not None:
        print_summary(recorder)


@app.command()
def directories(
    job_path: Path = typer.Argument(help="Path to the job file"),
) -> None:
    """List the directories a job will process, in order."""
    settings = UpdaterSettings()
    try:
        job_file = read_job_file(job_path, WIRE_FORMAT, settings.package_manager)
    except UpdaterError as e:
        console.print(f"Error: {e}", style="red", highlight=False)
        raise typer.Exit(1)

    for directory in job_file.job.all_directories():
        console.print(directory, markup=False, highlight=False)


if __name__ == "__main__":
    app()
