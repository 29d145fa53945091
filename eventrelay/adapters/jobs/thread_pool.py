"""Worker-pool job queue.

Runs jobs on a ``concurrent.futures`` pool, off the request thread that
enqueued them. A failing job is retried with exponential backoff up to
``max_attempts`` times; after that the failure is logged and dropped.
Suitable for single-process deployments; hosts with a real queue (Celery,
RQ, ...) implement the JobQueue protocol on top of it instead.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

from tenacity import Retrying, stop_after_attempt, wait_exponential

from eventrelay.core.logging import logger
from eventrelay.core.protocols.job_queue import JobHandler

jobs_logger = logger.with_context(component="jobs")


class ThreadPoolJobQueue:
    """In-process implementation of the JobQueue protocol."""

    def __init__(
        self,
        max_workers: int = 2,
        max_attempts: int = 3,
        backoff: float = 0.5,
    ) -> None:
        """Start the worker pool.

        Args:
            max_workers: Worker threads.
            max_attempts: Attempts per job, including the first.
            backoff: Multiplier for the exponential wait between attempts,
                in seconds. 0 retries immediately.
        """
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="eventrelay-jobs"
        )
        self._handlers: Dict[str, JobHandler] = {}
        self._max_attempts = max_attempts
        self._backoff = backoff

    def register(self, job_name: str, handler: JobHandler) -> None:
        """Bind ``job_name`` to ``handler``."""
        self._handlers[job_name] = handler
        jobs_logger.debug(f"Registered job '{job_name}'")

    def enqueue(self, job_name: str, args: Dict[str, Any]) -> Optional[Future]:
        """Schedule ``job_name``. Returns the future, or None if it was not scheduled."""
        handler = self._handlers.get(job_name)
        if handler is None:
            jobs_logger.warning(f"No handler registered for job '{job_name}'; dropping")
            return None
        try:
            return self._executor.submit(self._run, job_name, handler, dict(args))
        except RuntimeError as e:
            # Raised once the pool is shut down.
            jobs_logger.warning(f"Job queue closed; dropping '{job_name}': {e}")
            return None

    def _run(self, job_name: str, handler: JobHandler, args: Dict[str, Any]) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff, max=30),
            reraise=True,
        )
        try:
            retrying(handler, args)
        except Exception as e:
            jobs_logger.error(
                f"Job '{job_name}' failed after {self._max_attempts} attempts: {e}",
                exc_info=True,
            )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting jobs; optionally wait for running ones."""
        self._executor.shutdown(wait=wait)
