# webapp_publisher/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import functools
from typing import Any, Awaitable, Callable, Coroutine, Iterable, List, Optional, TypeVar

T = TypeVar('T')
R = TypeVar('R')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a fresh loop in a worker thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking callable in the default executor

    Args:
        func: Blocking function
        *args: Function arguments
        **kwargs: Function keyword arguments

    Returns:
        Function result
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


async def run_phase(items: Iterable[T],
                    worker: Callable[[T], Awaitable[R]],
                    concurrency: int = 10) -> List[R]:
    """
    Run worker over items concurrently as one synchronization barrier

    At most ``concurrency`` workers run at a time. The first failure cancels
    every operation still pending and is re-raised once they have all
    settled, so nothing from this phase is still running when the caller
    moves on.

    Args:
        items: Items to process
        worker: Async processor function
        concurrency: Maximum number of concurrent workers

    Returns:
        Worker results in item order
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def bounded(item):
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(bounded(item)) for item in items]
    if not tasks:
        return []

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    # Report the first failure in item order
    for task in tasks:
        if task.done() and not task.cancelled() and task.exception() is not None:
            raise task.exception()

    return [task.result() for task in tasks]


async def poll_until(check: Callable[[], Awaitable[T]],
                     is_done: Callable[[T], bool],
                     interval: float,
                     max_attempts: int,
                     cancel_event: Optional[asyncio.Event] = None,
                     on_pending: Optional[Callable[[int, T], None]] = None) -> tuple:
    """
    Poll ``check`` until ``is_done`` accepts its result

    Sleeps ``interval`` seconds before each attempt. Exceptions raised by
    ``check`` stop polling immediately and propagate.

    Args:
        check: Coroutine function returning the observed value
        is_done: Predicate deciding whether polling is finished
        interval: Seconds to wait before each attempt
        max_attempts: Upper bound on attempts
        cancel_event: Optional event that stops polling when set
        on_pending: Called with (attempt, value) after each unfinished attempt

    Returns:
        Tuple of (finished, last value, attempts made); ``finished`` is False
        when the attempt bound was reached or the cancel event was set
    """
    last = None
    for attempt in range(1, max_attempts + 1):
        if await _wait_or_cancel(interval, cancel_event):
            return False, last, attempt - 1

        last = await check()
        if is_done(last):
            return True, last, attempt

        if on_pending:
            on_pending(attempt, last)

    return False, last, max_attempts


async def _wait_or_cancel(delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
    """Sleep for delay seconds; return True if cancelled meanwhile"""
    if cancel_event is None:
        await asyncio.sleep(delay)
        return False

    if cancel_event.is_set():
        return True

    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        return True
    except asyncio.TimeoutError:
        return False
