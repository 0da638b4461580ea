"""
Worker registry type definitions.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WorkerRegistryEntry(BaseModel):
    """
    An in-flight item reported by the host's worker registry.
    Carries enough to recompute the item's run lock key.
    """

    model_config = ConfigDict(frozen=True)

    worker_id: str
    job_type: str
    args: list[Any] = Field(default_factory=list)
    queue: str | None = None


class ResquePayload(BaseModel):
    """
    Job payload as stored by Resque-compatible queues.
    """

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(alias="class")
    args: list[Any] = Field(default_factory=list)


class ResqueWorkerJob(BaseModel):
    """
    The document a Resque-compatible worker stores while it is working.
    """

    queue: str | None = None
    run_at: str | None = None
    payload: ResquePayload
