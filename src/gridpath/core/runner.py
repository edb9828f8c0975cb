# src/gridpath/core/runner.py
#!/usr/bin/env python3
"""
Driving API for hosts.

    handle = start_search(grid, "astar", diagonal=True, heuristic="octile")
    ...
    res = poll(handle)          # running | done | no_path | cancelled
    cancel(handle)

Threaded handles step the algorithm on a daemon worker; the worker hands the
final StepResult back through a queue and watches a cancellation event
between steps. Unthreaded handles are advanced by the host with
handle.step(), which is how the viewer animates a run.

The grid must not be edited while a run is in flight.
"""

import logging
import queue
import random
import threading
import time
from typing import Optional

from gridpath.core.algorithms import AlgorithmKind, make_algorithm
from gridpath.core.costs import Heuristic
from gridpath.core.maze import generate_maze as _generate_maze
from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import Grid, Cell, StepResult, RUNNING, CANCELLED

log = logging.getLogger(__name__)


class SearchHandle:
    def __init__(self, algo: SearchAlgo, *, step_delay: float = 0.0):
        self.algo = algo
        self.step_delay = max(0.0, float(step_delay))
        self.cancel_event = threading.Event()
        self.result_queue: "queue.Queue" = queue.Queue()
        self.worker_thread: Optional[threading.Thread] = None
        self._result: Optional[StepResult] = None
        self._error: Optional[BaseException] = None

    # -------------------- worker --------------------

    def start(self) -> "SearchHandle":
        self.worker_thread = threading.Thread(target=self._worker_run, name=f"search-{self.algo.name}", daemon=True)
        self.worker_thread.start()
        return self

    def _worker_run(self) -> None:
        try:
            res = self.algo.step()
            while not res.finished:
                if self.cancel_event.is_set():
                    self.algo.cancel()
                if self.step_delay:
                    self.cancel_event.wait(self.step_delay)
                res = self.algo.step()
            self.result_queue.put(("done", res))
        except Exception as ex:  # handed to the host through poll()/wait()
            log.exception("search worker failed")
            self.result_queue.put(("error", ex))

    def _drain(self, block: bool, timeout: Optional[float]) -> None:
        if self._result is not None or self._error is not None:
            return
        try:
            kind, payload = self.result_queue.get(block=block, timeout=timeout)
        except queue.Empty:
            return
        if kind == "error":
            self._error = payload
        else:
            self._result = payload

    # -------------------- host side --------------------

    @property
    def threaded(self) -> bool:
        return self.worker_thread is not None

    def step(self) -> StepResult:
        """Advance an unthreaded run by one expansion."""
        if self.threaded:
            raise RuntimeError("a threaded search is stepped by its worker")
        if self.cancel_event.is_set():
            self.algo.cancel()
        res = self.algo.step()
        if res.finished:
            self._result = res
        return res

    def cancel(self) -> None:
        self.cancel_event.set()
        self.algo.cancel()

    def poll(self) -> StepResult:
        """Latest known state, never blocks."""
        self._drain(block=False, timeout=None)
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result
        if self.cancel_event.is_set() and not self.threaded:
            return self.step()
        return StepResult(status=RUNNING, metrics={"algo": self.algo.name})

    def wait(self, timeout: Optional[float] = None) -> StepResult:
        """Block until the run is terminal (threaded) or run it out (unthreaded)."""
        if not self.threaded:
            if self._result is None:
                self._result = self.algo.run()
            return self._result
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._result is None and self._error is None:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            self._drain(block=True, timeout=remaining)
            if deadline is not None and time.monotonic() >= deadline:
                break
        if self._error is not None:
            raise self._error
        return self.poll()

    @property
    def cancelled(self) -> bool:
        return self._result is not None and self._result.status == CANCELLED


def start_search(
    grid: Grid,
    kind: "str | AlgorithmKind",
    diagonal: bool = True,
    heuristic: "str | Heuristic" = Heuristic.MANHATTAN,
    *,
    beam_width: Optional[int] = None,
    threaded: bool = True,
    step_delay: float = 0.0,
) -> SearchHandle:
    """Validate the grid, reset its search state and start a run."""
    algo = make_algorithm(kind, grid, diagonal=diagonal, heuristic=heuristic, beam_width=beam_width)
    log.debug("starting %s (diagonal=%s, heuristic=%s)", algo.name, diagonal, algo.heuristic.value)
    handle = SearchHandle(algo, step_delay=step_delay)
    if threaded:
        handle.start()
    return handle


def cancel(handle: SearchHandle) -> None:
    handle.cancel()


def poll(handle: SearchHandle) -> StepResult:
    return handle.poll()


def generate_maze(grid: Grid, rng: Optional[random.Random] = None) -> Cell:
    return _generate_maze(grid, rng)
