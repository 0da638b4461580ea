"""
Key-value store interface required by the lock protocol.
"""

from collections.abc import Sequence
from typing import Any, Protocol


class LockStore(Protocol):
    """
    Primitive operations the lock protocol needs from the shared store.

    ``eval_atomic`` is mandatory: lease expiry and stale lock theft are only
    safe when executed as one indivisible step on the store side.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def setnx(self, key: str, value: Any) -> bool: ...

    async def delete(self, key: str) -> int: ...

    async def expire(self, key: str, seconds: int) -> bool: ...

    async def eval_atomic(
        self,
        script: str,
        keys: Sequence[str],
        args: Sequence[Any],
    ) -> Any: ...

    async def close(self) -> None: ...
