"""Thread single-flight helper.

Used to coordinate concurrent requests for the same key so only one thread
performs the work, while others wait on the same Future.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable
    import threading

K = TypeVar("K")
T = TypeVar("T")


def singleflight_cached(
    key: K,
    *,
    lock: threading.Lock,
    inflight: dict[K, Future[T]],
    cache_get: Callable[[K], T | None],
    cache_set: Callable[[K, T], None],
    work: Callable[[], T],
) -> T:
    """Return cached value for key, or compute it once with single-flight.

    - If cached, returns immediately.
    - If inflight, waits on the existing Future.
    - Otherwise, creates a Future and runs *work* as the single creator.

    *lock* only guards the cache and inflight maps; *work* runs outside it.
    Failures reach the creator and every waiter, and nothing is cached, so the
    next call tries again.
    """
    cached = cache_get(key)
    if cached is not None:
        return cached

    with lock:
        cached = cache_get(key)
        if cached is not None:
            return cached

        fut = inflight.get(key)
        if fut is None:
            fut = Future()
            inflight[key] = fut
            creator = True
        else:
            creator = False

    if not creator:
        return fut.result()

    try:
        value = work()
    except Exception as e:
        fut.set_exception(e)
        raise
    except BaseException:
        fut.cancel()
        raise
    else:
        with lock:
            cache_set(key, value)
        fut.set_result(value)
        return value
    finally:
        with lock:
            inflight.pop(key, None)
