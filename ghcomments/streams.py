"""Adapters between awaitables and async-iterator streams."""

from contextlib import aclosing
from typing import Any, TypeVar
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable

T = TypeVar("T")


async def single(func: Callable[..., Awaitable[T]], *args: Any) -> AsyncGenerator[T, None]:
    """Yield the result of ``func(*args)`` exactly once.

    The call is made on the first advance of the stream, so nothing runs until
    a consumer starts iterating. Exceptions propagate unchanged.
    """
    yield await func(*args)


async def empty(func: Callable[..., Awaitable[object]], *args: Any) -> AsyncGenerator[Any, None]:
    """Await ``func(*args)`` and complete without emitting a value."""
    await func(*args)
    return
    yield  # pragma: no cover - marks this function as an async generator


async def to_list(stream: AsyncIterator[T]) -> list[T]:
    """Drain a stream into a list, closing it afterwards."""
    if isinstance(stream, AsyncGenerator):
        async with aclosing(stream) as closing:
            return [item async for item in closing]
    return [item async for item in stream]
