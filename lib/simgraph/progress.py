# lib/simgraph/progress.py
from __future__ import annotations
from contextlib import contextmanager
import sys, threading, time

class _Bar:
    def __init__(self, total=None, desc="", stream=None):
        self.total = total
        self.desc = desc
        self.n = 0
        self.stream = stream if stream is not None else sys.stderr
        self._last = time.time()
        self._lock = threading.Lock()

    def update(self, n=1):
        # worker threads report concurrently
        with self._lock:
            self.n += n
            now = time.time()
            if now - self._last >= 0.1 or (self.total and self.n >= self.total):
                if self.total:
                    pct = (100.0 * self.n / max(1, self.total))
                    self.stream.write(f"\r{self.desc} [{self.n}/{self.total}] {pct:5.1f}%")
                else:
                    self.stream.write(f"\r{self.desc} {self.n}")
                self.stream.flush()
                self._last = now
            if self.total and self.n >= self.total:
                self.stream.write("\n"); self.stream.flush()

class _NullBar:
    n = 0

    def update(self, n=1):
        self.n += n

@contextmanager
def pbar(total=None, desc="", enabled=True, stream=None):
    if not enabled:
        yield _NullBar()
        return
    bar = _Bar(total=total, desc=desc, stream=stream)
    try:
        yield bar
    finally:
        # always finalize cleanly, even on exceptions
        if total is not None and bar.n < total:
            bar.stream.write(f"\r{desc} [{bar.n}/{total}] ...\n")
            bar.stream.flush()
