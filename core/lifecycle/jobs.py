"""
Module 04 - Job Lifecycle
File: jobs.py

A RunningJob pairs work that is already executing on its own thread with
the procedure that stops it. Jobs compose: ``combine_jobs`` returns a job
whose shutdown stops every constituent, so a process holds one handle
regardless of how many listeners it runs.

Ordering:
- Constituent shutdowns run sequentially in registration order.
- Every shutdown procedure runs at most once, however many times (or from
  however many threads) ``shutdown()`` is called.
- A failing shutdown does not stop the remaining ones; the first error is
  re-raised after all of them have been attempted.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)


class RunningJob:
    """Handle on one or more concurrent tasks plus their teardown."""

    def __init__(
        self,
        threads: Sequence[threading.Thread],
        shutdowns: Sequence[Callable[[], None]],
        name: str = "job",
        children: Sequence["RunningJob"] = (),
    ) -> None:
        self.name = name
        self.children = list(children)
        self._threads = list(threads)
        self._shutdowns = list(shutdowns)
        self._lock = threading.Lock()
        self._shut_down = False
        self._errors: list[BaseException] = []

    @property
    def errors(self) -> list[BaseException]:
        """Exceptions that escaped the started work, own and constituents'."""
        return self._errors + [e for child in self.children for e in child.errors]

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    @property
    def is_running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def shutdown(self) -> None:
        """Run every registered teardown once, in registration order."""
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True

        first_error: Optional[Exception] = None
        for step in self._shutdowns:
            try:
                step()
            except Exception as e:
                logger.exception(f"Shutdown step failed for {self.name}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the started work to finish.

        Returns:
            True if every task exited within ``timeout``
        """
        for thread in self._threads:
            thread.join(timeout)
        return not self.is_running


def spawn_job(
    start: Callable[[], None],
    shutdown: Callable[[], None],
    name: str = "job",
) -> RunningJob:
    """
    Begin running ``start`` on a new thread and return without waiting.

    An exception escaping ``start`` is logged and kept on ``job.errors``.
    """
    job: RunningJob

    def _run() -> None:
        try:
            start()
        except BaseException as e:
            logger.exception(f"{name} failed")
            job._errors.append(e)

    thread = threading.Thread(target=_run, name=name, daemon=True)
    job = RunningJob([thread], [shutdown], name=name)
    thread.start()
    return job


def combine_jobs(*jobs: RunningJob, name: str = "combined") -> RunningJob:
    """Composite job whose shutdown shuts down ``jobs`` in the order given."""
    threads = [t for job in jobs for t in job._threads]
    return RunningJob(
        threads,
        [job.shutdown for job in jobs],
        name=name,
        children=jobs,
    )
