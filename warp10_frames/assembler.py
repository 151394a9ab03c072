"""
Ordered parallel fan-out for warp10-frames.

Both fan-out levels (one task per series inside a response, one task per
query inside a request) need the same thing: run independent conversions
on a thread pool and get the results back in input order, whatever order
they finish in.

``ConcurrentFrameAssembler.map_ordered()`` pre-sizes one slot per input,
submits every task, joins, and writes each result into the slot of its
input index. Writes happen on the calling thread after the join, so the
workers share no mutable state.

An optional deadline bounds the join. When it expires, tasks that have
not started are cancelled, the pool is released without waiting for
running ones, and the unfinished slots are either filled by a fallback
or reported as ``ConversionTimeoutError``. A task that is already running
cannot be interrupted; its result is discarded when it finishes.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Sequence, TypeVar

from warp10_frames.exceptions import ConversionTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ConcurrentFrameAssembler:
    """Run conversions in parallel and collect results by input index.

    Args:
        max_workers: Thread pool size. ``None`` uses the
            ``ThreadPoolExecutor`` default.
        timeout: Seconds to wait for all tasks. ``None`` waits forever.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.max_workers = max_workers
        self.timeout = timeout

    def map_ordered(
        self,
        func: Callable[[T], R],
        items: Sequence[T],
        fallback: Callable[[T], R] | None = None,
    ) -> list[R]:
        """Apply *func* to every item; results are in the order of *items*.

        Args:
            func: The per-item conversion. Exceptions it raises propagate
                to the caller (the first failing slot, in input order).
            items: Inputs; one task per item.
            fallback: Produces the result for an item whose task did not
                finish before the deadline. If ``None``, a missed deadline
                raises instead.

        Returns:
            One result per item, in input order.

        Raises:
            ConversionTimeoutError: If the deadline expires and no
                *fallback* was given.
        """
        if not items:
            return []

        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="warp10-frames"
        )
        try:
            futures: list[Future] = [executor.submit(func, item) for item in items]
            done, not_done = wait(futures, timeout=self.timeout)
        finally:
            # Never block on stragglers once the deadline has passed
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            logger.warning(
                "%d of %d task(s) missed the %.3fs deadline",
                len(not_done), len(futures), self.timeout,
            )
            if fallback is None:
                raise ConversionTimeoutError(
                    f"{len(not_done)} of {len(futures)} conversion(s) did not "
                    f"finish within {self.timeout}s"
                )

        slots: list[R] = [None] * len(items)  # type: ignore[list-item]
        for index, future in enumerate(futures):
            if future in done:
                slots[index] = future.result()
            else:
                slots[index] = fallback(items[index])  # type: ignore[misc]
        return slots
