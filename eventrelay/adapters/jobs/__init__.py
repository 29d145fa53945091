"""Background job queue adapters."""

from eventrelay.adapters.jobs.fake import EnqueuedJob, FakeJobQueue
from eventrelay.adapters.jobs.thread_pool import ThreadPoolJobQueue

__all__ = ["EnqueuedJob", "FakeJobQueue", "ThreadPoolJobQueue"]
