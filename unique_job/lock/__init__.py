"""
Lock module.
Contains signature encoding, lease evaluation, stale lock detection and
theft, and the lifecycle hooks tying them together.
"""

from unique_job.lock.identity import (
    encode_args,
    lock_key,
    lock_key_from_run_lock,
    run_lock_key,
)
from unique_job.lock.lease import apply_lease
from unique_job.lock.policy import LockPolicy, create_policy
from unique_job.lock.reclaim import AtomicReclaimer, next_lock_value
from unique_job.lock.staleness import StalenessResolver
from unique_job.lock.state import LockStateEvaluator

__all__ = [
    "encode_args",
    "lock_key",
    "run_lock_key",
    "lock_key_from_run_lock",
    "apply_lease",
    "LockStateEvaluator",
    "StalenessResolver",
    "AtomicReclaimer",
    "next_lock_value",
    "LockPolicy",
    "create_policy",
]
