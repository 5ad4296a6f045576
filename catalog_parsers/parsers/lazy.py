"""Memoized holder for values that are expensive to fetch."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncLazy(Generic[T]):
    """
    Computes a value once and hands the same value to every caller.

    Concurrent first calls wait on a lock so the factory runs a single
    time. A failing factory stores nothing: the error propagates to the
    caller that triggered it and the next call tries again.

    Example:
        self._tags = AsyncLazy(self._load_tags)
        tags = await self._tags.get()
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._value: T | None = None
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def get(self) -> T:
        if self._loaded:
            return self._value  # type: ignore[return-value]
        async with self._lock:
            if not self._loaded:
                self._value = await self._factory()
                self._loaded = True
            return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        """Drop the cached value; the next get() runs the factory again."""
        self._value = None
        self._loaded = False
