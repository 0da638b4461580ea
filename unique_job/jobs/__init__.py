"""
Jobs module.
Contains the catalog of job types guarded by unique locks.
"""

from unique_job.jobs.catalog import JobCatalog

__all__ = ["JobCatalog"]
