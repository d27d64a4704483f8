import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from planetbuilder import glb as glb_mod

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    result: Optional[dict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _safe_filename(name: str) -> str:
    """Filename-safe ``.glb`` name derived from user input."""
    stem = (
        name.lower()
        .replace(".glb", "")
        .replace(" ", "-")
        .replace("/", "-")
        .replace("\\", "-")
        .replace("..", "")
    )
    return f"{stem or 'planet'}.glb"


def _sync_export(snapshot, output_filename: str, planet_model=None,
                 progress_callback=None) -> dict:
    """Write a snapshot to GLB in a worker thread.

    Snapshots are immutable, so the export never races a settings update
    that lands while it runs.
    """
    glb_path = glb_mod.export_glb(snapshot, output_filename,
                                  planet_model=planet_model,
                                  progress_callback=progress_callback)
    return {
        "version": snapshot.version,
        "settings": snapshot.settings.to_dict(),
        "instances": snapshot.counts(),
        "format": "glb",
        "filename": output_filename,
        "glb_path": glb_path,
        "model_url": f"/output/{output_filename}",
    }


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}
        self._tasks: set = set()
        # filename -> result of the latest completed export
        self.exports: dict[str, dict] = {}

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    def start_export(self, snapshot, name: str, planet_model=None) -> Job:
        """Create a job and schedule its export on the running loop."""
        job = self.create_job()
        task = asyncio.create_task(
            self.run_export(job, snapshot, name, planet_model=planet_model))
        # the loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job

    async def run_export(self, job: Job, snapshot, name: str,
                         planet_model=None) -> None:
        """Export *snapshot*, updating *job* with progress."""
        try:
            job.status = JobStatus.running
            job.progress = 5.0
            job.message = "Preparing export..."

            def _update_progress(pct: float, msg: str) -> None:
                job.progress = pct
                job.message = msg

            result = await asyncio.to_thread(
                _sync_export,
                snapshot,
                _safe_filename(name),
                planet_model=planet_model,
                progress_callback=_update_progress,
            )

            job.progress = 100.0
            job.message = "Export complete"
            job.status = JobStatus.completed
            job.result = result
            self.exports[result["filename"]] = result

        except Exception as exc:
            logger.exception("Export failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            job.message = f"Export failed: {exc}"


# Singleton instance used across the application
job_manager = JobManager()
