from __future__ import annotations

import asyncio as _asyncio
from collections.abc import Coroutine
from contextlib import suppress
from typing import Any, TypeVar

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from the synchronous CLI.

    Drives the coroutine with ``asyncio.run`` when no loop is running in the
    current thread. Inside an active loop the coroutine is closed (no
    "never awaited" warning) and RuntimeError is raised; async callers should
    await the SDK directly.
    """
    try:
        _asyncio.get_running_loop()
    except RuntimeError:
        return _asyncio.run(coro)
    with suppress(Exception):
        coro.close()
    raise RuntimeError(
        "run_sync() cannot be used inside an active event loop. "
        "Await the async API directly from async code."
    )
