# lib/simgraph/parallel.py
from __future__ import annotations
import logging
import os
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from .progress import pbar

logger = logging.getLogger(__name__)


def choose_workers(max_workers: int | None, tasks: int) -> int:
    if tasks <= 1:
        return 1
    if max_workers is None or max_workers <= 0:
        return min(os.cpu_count() or 1, tasks)
    return min(max_workers, tasks)


def map_threads(
    fn,
    tasks,
    max_workers: int | None = None,
    desc: str | None = None,
    progress: bool = False,
):
    """
    Run fn over tasks on a thread pool and preserve input order.
    The first task that raises cancels everything still pending and the
    exception is re-raised in the caller; there are no partial results.
    With a single worker the tasks run inline in the calling thread.
    """
    tasks = list(tasks)
    n = len(tasks)
    results = [None] * n
    if n == 0:
        return results

    workers = choose_workers(max_workers, n)
    desc = desc or "tasks"
    logger.debug("%s: %d tasks on %d worker(s)", desc, n, workers)

    with pbar(total=n, desc=desc, enabled=progress) as bar:
        if workers <= 1:
            for i, task in enumerate(tasks):
                results[i] = fn(task)
                bar.update(1)
            return results

        def _run(i):
            results[i] = fn(tasks[i])
            bar.update(1)

        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = [ex.submit(_run, i) for i in range(n)]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for fut in pending:
                fut.cancel()
            for fut in futures:
                if fut in done and fut.exception() is not None:
                    raise fut.exception()
    return results
