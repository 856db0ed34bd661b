"""Tests for the awaitable-to-stream adapters."""

import pytest

from ghcomments.streams import empty, single, to_list


@pytest.mark.asyncio
async def test_single_defers_call_until_iterated() -> None:
    """The wrapped coroutine function should not run before the first advance."""
    calls: list[int] = []

    async def fetch(value: int) -> int:
        calls.append(value)
        return value * 2

    stream = single(fetch, 21)

    assert calls == []
    assert await to_list(stream) == [42]
    assert calls == [21]


@pytest.mark.asyncio
async def test_single_reraises_unchanged() -> None:
    """Errors from the awaited call should surface as-is."""
    error = LookupError("missing")

    async def fail() -> int:
        raise error

    with pytest.raises(LookupError) as excinfo:
        await to_list(single(fail))

    assert excinfo.value is error


@pytest.mark.asyncio
async def test_empty_awaits_and_emits_nothing() -> None:
    """empty should run the call and complete without values."""
    calls: list[str] = []

    async def remove(name: str) -> None:
        calls.append(name)

    assert await to_list(empty(remove, "comment")) == []
    assert calls == ["comment"]


@pytest.mark.asyncio
async def test_to_list_closes_generator() -> None:
    """to_list should close the stream once drained."""
    closed: list[bool] = []

    async def numbers():  # type: ignore[no-untyped-def]
        try:
            yield 1
            yield 2
        finally:
            closed.append(True)

    assert await to_list(numbers()) == [1, 2]
    assert closed == [True]
