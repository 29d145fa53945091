"""Fake job queue for testing."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from eventrelay.core.protocols.job_queue import JobHandler


@dataclass
class EnqueuedJob:
    """Single recorded enqueue call."""

    job_name: str
    args: Dict[str, Any] = field(default_factory=dict)


class FakeJobQueue:
    """In-memory test double for JobQueue.

    Records enqueued jobs without running them; ``run_pending`` executes them
    synchronously on the calling thread.

    Usage:
        queue = FakeJobQueue()
        queue.register("identify", job.handle)
        subscriber.on_lifecycle_event("user.created", actor)
        assert queue.has("identify")
        queue.run_pending()
    """

    def __init__(self) -> None:
        """Initialize with no jobs."""
        self.handlers: Dict[str, JobHandler] = {}
        self.enqueued: List[EnqueuedJob] = []
        self.pending: List[EnqueuedJob] = []
        self.closed = False

    def register(self, job_name: str, handler: JobHandler) -> None:
        """Record the handler for ``job_name``."""
        self.handlers[job_name] = handler

    def enqueue(self, job_name: str, args: Dict[str, Any]) -> EnqueuedJob:
        """Record the job; it runs only when ``run_pending`` is called."""
        job = EnqueuedJob(job_name=job_name, args=dict(args))
        self.enqueued.append(job)
        self.pending.append(job)
        return job

    def run_pending(self) -> int:
        """Run queued jobs in order. Returns how many ran."""
        ran = 0
        while self.pending:
            job = self.pending.pop(0)
            self.handlers[job.job_name](job.args)
            ran += 1
        return ran

    def shutdown(self, wait: bool = True) -> None:
        self.closed = True

    # Test helpers

    def has(self, job_name: str) -> bool:
        """Return True if a job with the given name was enqueued."""
        return any(j.job_name == job_name for j in self.enqueued)

    def get_all(self, job_name: str) -> List[EnqueuedJob]:
        """Return all enqueued jobs with the given name."""
        return [j for j in self.enqueued if j.job_name == job_name]

    def clear(self) -> None:
        """Reset recorded jobs."""
        self.enqueued.clear()
        self.pending.clear()
