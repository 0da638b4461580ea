"""
Unique Job Locks

Redis-backed admission and run locks guaranteeing that at most one instance of
a job type with the same arguments is queued or executing across all workers.
"""

__version__ = "1.0.0"
