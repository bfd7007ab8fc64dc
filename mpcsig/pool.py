"""A pool of worker threads for parallel searches and maps."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, BinaryIO, Callable


class Pool:
    """A fixed set of worker threads; count <= 0 uses the number of CPUs."""

    def __init__(self, count: int = 0) -> None:
        if count <= 0:
            count = os.cpu_count() or 1
        self.workers = count
        self._executor = ThreadPoolExecutor(max_workers=count)

    def search(self, count: int, func: Callable[[], Any]) -> list[Any]:
        """Call func until it has returned count non-None results, and return them."""
        if count <= 0:
            return []
        results: list[Any] = []
        lock = threading.Lock()
        done = threading.Event()

        def work() -> None:
            try:
                while not done.is_set():
                    found = func()
                    if found is None:
                        continue
                    with lock:
                        if len(results) < count:
                            results.append(found)
                        if len(results) >= count:
                            done.set()
            except BaseException:
                done.set()
                raise

        futures = [self._executor.submit(work) for _ in range(self.workers)]
        for future in futures:
            future.result()
        return results

    def parallelize(self, count: int, func: Callable[[int], Any]) -> list[Any]:
        """Return [func(0), …, func(count - 1)], computed on the workers."""
        return list(self._executor.map(func, range(count)))

    def close(self) -> None:
        """Shut the workers down."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> Pool:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class LockedReader:
    """Wraps a binary stream so that reads from several threads are serialised."""

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader
        self._lock = threading.Lock()

    def read(self, size: int = -1) -> bytes:
        with self._lock:
            return self._reader.read(size)