from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable


def run_together(*calls: Callable[[], Any]) -> list[Any]:
    """Run independent backend calls concurrently and return results in order.

    Each call runs inside a copy of the caller's context so the Flask request
    (and the tokens in its session) stays visible to the worker thread. The
    first failure is re-raised once every call has finished.
    """
    if len(calls) < 2:
        return [call() for call in calls]
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(contextvars.copy_context().run, call) for call in calls]
        return [f.result() for f in futures]
