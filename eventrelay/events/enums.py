"""Lifecycle event names the default subscriber maps to analytics calls.

Convention: {domain}.{action}. Hosts may emit names outside this enum; they
are tracked under the name as given.
"""

from enum import Enum


class LifecycleEventType(str, Enum):
    """Host lifecycle points with a default analytics mapping."""

    USER_CREATED = "user.created"
    POST_CREATED = "post.created"
    TOPIC_CREATED = "topic.created"
    TAG_CREATED = "tag.created"
    REACTION_CREATED = "reaction.created"
    PAGE_VIEWED = "page.viewed"
