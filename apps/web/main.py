"""FastAPI web application for DepRun."""

from pathlib import Path

from fastapi import FastAPI, HTTPException

from deprun.analysis import PypiAnalyzer
from deprun.api import RecordingApiHandler
from deprun.apply import RequirementsApplier
from deprun.discovery import RequirementsDiscoverer
from deprun.errors import UpdaterError
from deprun.job import Job, JobFile, check_package_manager
from deprun.models import WireModel
from deprun.pipeline import UpdateRunner
from deprun.serialization import WireFormat

WIRE_FORMAT = WireFormat()

app = FastAPI(
    title="DepRun",
    description="Run dependency update jobs and inspect what they would report",
    version="0.1.0",
)


class RunRequest(WireModel):
    """Request model for running a job against a local checkout."""

    job: Job
    repo_root: str
    base_commit_sha: str


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/directories")
async def list_directories(job_file: JobFile):
    """List the directories a job will process."""
    try:
        check_package_manager(job_file.job)
    except UpdaterError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"directories": job_file.job.all_directories()}


@app.post("/api/run")
async def run_job(request: RunRequest):
    """Run a job, recording reporting API calls instead of sending them."""
    try:
        check_package_manager(request.job)
    except UpdaterError as e:
        raise HTTPException(status_code=400, detail=str(e))

    repo_root = Path(request.repo_root)
    if not repo_root.is_dir():
        raise HTTPException(status_code=404, detail=f"Repository root {repo_root} not found")

    recorder = RecordingApiHandler()
    runner = UpdateRunner(
        api=recorder,
        discoverer=RequirementsDiscoverer(),
        analyzer=PypiAnalyzer(),
        applier=RequirementsApplier(),
        wire_format=WIRE_FORMAT,
    )

    try:
        result = await runner.run(request.job, repo_root, request.base_commit_sha)
    except UpdaterError as e:
        raise HTTPException(status_code=500, detail=f"Error running job: {str(e)}")

    return {
        "result": WIRE_FORMAT.to_data(result),
        "calls": [
            {"endpoint": endpoint, "data": WIRE_FORMAT.to_data(payload)}
            for endpoint, payload in recorder.calls
        ],
    }
