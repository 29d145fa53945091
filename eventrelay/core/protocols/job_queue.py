"""Protocol for background job execution.

eventrelay never assumes a particular queue. The host binds this to
whatever it runs (a worker pool, Celery, RQ, ...); the only guarantee
required is "eventually, on some thread, run the registered handler at
least once".
"""

from typing import Any, Callable, Dict, Protocol, runtime_checkable

JobHandler = Callable[[Dict[str, Any]], None]


@runtime_checkable
class JobQueue(Protocol):
    """Enqueue named jobs with JSON-serializable args."""

    def register(self, job_name: str, handler: JobHandler) -> None:
        """Bind ``job_name`` to the callable that executes it."""
        ...

    def enqueue(self, job_name: str, args: Dict[str, Any]) -> Any:
        """Schedule ``job_name`` to run with ``args``."""
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting jobs and release workers."""
        ...
