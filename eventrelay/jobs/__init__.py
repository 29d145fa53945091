"""Background jobs."""

from eventrelay.jobs.identify import (
    IDENTIFY_JOB,
    IdentifyActorJob,
    backfill_identify,
    enqueue_identify,
)

__all__ = ["IDENTIFY_JOB", "IdentifyActorJob", "backfill_identify", "enqueue_identify"]
