"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class LockState(StrEnum):
    """
    Lock lifecycle states for a single job signature.

    State transitions:
    - FREE -> ADMITTED (before_enqueue succeeds)
    - ADMITTED -> RUNNING (around_perform entry)
    - RUNNING -> FREE (around_perform exit, success or failure)
    - ADMITTED -> FREE (after_dequeue)
    - RUNNING -> ADMITTED (stale lock stolen by a later before_enqueue)
    """

    FREE = "free"
    ADMITTED = "admitted"
    RUNNING = "running"


class AdmissionOutcome(StrEnum):
    """Result of a before_enqueue call."""

    ACQUIRED = "acquired"
    STOLEN = "stolen"
    DENIED = "denied"


# Lock key prefixes. These define interoperability with other producers
# of the same keys and must never change.
LOCK_NAME_PREFIX = "lock"
RUN_LOCK_NAME_PREFIX = "running_"

# Default worker registry namespace
DEFAULT_REGISTRY_NAMESPACE = "resque"

# Metrics names
METRIC_LOCK_ADMISSIONS = "lock_admissions_total"
METRIC_LOCK_STEAL_ATTEMPTS = "lock_steal_attempts_total"
METRIC_LOCK_EXPIRED = "lock_expired_total"
METRIC_LOCK_RELEASES = "lock_releases_total"
METRIC_LOCK_HELD = "lock_held_seconds"
METRIC_REGISTRY_SKIPPED = "registry_entries_skipped_total"

# Trace span names
SPAN_BEFORE_ENQUEUE = "lock.before_enqueue"
SPAN_AROUND_PERFORM = "lock.around_perform"
SPAN_AFTER_DEQUEUE = "lock.after_dequeue"
SPAN_RECLAIM = "lock.reclaim"
