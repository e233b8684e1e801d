"""Background token counting and per-tick result aggregation.

``TokenCountDispatcher.dispatch`` marks files ``Counting`` synchronously and
queues one job per file for daemon worker threads. Workers push one
``TokenCountResult`` per job onto a queue that the UI thread drains without
blocking once per frame. Job failures are converted into error results at the
worker boundary.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from queue import Empty, Queue

from ..sources import SourceFile, TextSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class NotCounted:
    pass


@dataclass(frozen=True)
class Counting:
    pass


@dataclass(frozen=True)
class Counted:
    count: int


@dataclass(frozen=True)
class Failed:
    message: str


TokenStatus = NotCounted | Counting | Counted | Failed

NOT_COUNTED = NotCounted()
COUNTING = Counting()


@dataclass(frozen=True)
class TokenCountResult:
    """Outcome of one background job, tagged with the load it belongs to."""

    path: str
    generation: int
    count: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.count is not None


@dataclass(frozen=True)
class TokenSummary:
    """Aggregate over the current selection."""

    total: int = 0
    counted: int = 0
    pending: int = 0
    failed: int = 0

    def describe(self) -> str:
        """Return a short title fragment such as ``1,204 tokens (2 pending)``."""
        if not (self.counted or self.pending or self.failed):
            return ""
        text = f"{self.total:,} tokens"
        extras: list[str] = []
        if self.pending:
            extras.append(f"{self.pending} pending")
        if self.failed:
            extras.append(f"{self.failed} failed")
        if extras:
            text += f" ({', '.join(extras)})"
        return text


def summarize_token_counts(
    statuses: Mapping[str, TokenStatus],
    selected_files: Iterable[str],
) -> TokenSummary:
    """Sum ``Counted`` values over selected paths; other statuses add zero."""
    total = counted = pending = failed = 0
    for path in selected_files:
        status = statuses.get(path)
        if isinstance(status, Counted):
            total += status.count
            counted += 1
        elif isinstance(status, Counting):
            pending += 1
        elif isinstance(status, Failed):
            failed += 1
    return TokenSummary(total=total, counted=counted, pending=pending, failed=failed)


def apply_token_count_result(
    statuses: MutableMapping[str, TokenStatus],
    result: TokenCountResult,
    generation: int,
) -> bool:
    """Apply one result as ``Counting -> Counted | Failed``.

    Results for unknown paths, for an earlier load generation, or for a path
    that is not currently ``Counting`` are dropped. Returns whether state
    changed.
    """
    if result.generation != generation:
        return False
    if not isinstance(statuses.get(result.path), Counting):
        return False
    if result.ok:
        statuses[result.path] = Counted(int(result.count or 0))
    else:
        statuses[result.path] = Failed(result.error or "unknown error")
    return True


@dataclass(frozen=True)
class _TokenCountJob:
    source: TextSource
    source_file: SourceFile
    generation: int


class TokenCountDispatcher:
    """Fire-and-forget token counting on a small set of daemon threads.

    Workers start on demand and exit when no jobs remain, so an idle
    dispatcher holds no threads. Unfinished jobs never block interpreter exit.
    """

    def __init__(
        self,
        count_tokens: Callable[[str], int],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._count_tokens = count_tokens
        self._max_workers = max(1, max_workers)
        self._lock = threading.Lock()
        self._pending: deque[_TokenCountJob] = deque()
        self._running = 0
        self._results: Queue[TokenCountResult] = Queue()

    def _run_job(self, job: _TokenCountJob) -> TokenCountResult:
        path = job.source_file.path
        try:
            content = job.source.fetch_content(job.source_file)
            count = self._count_tokens(content)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.warning("token count failed for %s: %s", path, message)
            return TokenCountResult(path=path, generation=job.generation, error=message)
        return TokenCountResult(path=path, generation=job.generation, count=int(count))

    def _worker(self) -> None:
        """Run queued jobs until none remain."""
        while True:
            with self._lock:
                if not self._pending:
                    self._running -= 1
                    return
                job = self._pending.popleft()
            self._results.put(self._run_job(job))

    def _submit(self, job: _TokenCountJob) -> None:
        with self._lock:
            self._pending.append(job)
            if self._running >= self._max_workers:
                return
            self._running += 1

        worker = threading.Thread(
            target=self._worker,
            name="lazymerge-token-count",
            daemon=True,
        )
        worker.start()

    def dispatch(
        self,
        selected_files: Iterable[str],
        loaded_files: Iterable[SourceFile],
        text_source: TextSource | None,
        statuses: MutableMapping[str, TokenStatus],
        generation: int = 0,
    ) -> list[str]:
        """Start counting every selected, loaded, ``NotCounted`` file.

        Status flips to ``Counting`` before the job is queued, so calling this
        again for the same paths is a no-op. Returns dispatched paths.
        """
        if text_source is None:
            return []
        by_path = {source_file.path: source_file for source_file in loaded_files}
        dispatched: list[str] = []
        for path in sorted(selected_files):
            if not isinstance(statuses.get(path), NotCounted):
                continue
            source_file = by_path.get(path)
            if source_file is None:
                continue
            statuses[path] = COUNTING
            self._submit(_TokenCountJob(source=text_source, source_file=source_file, generation=generation))
            dispatched.append(path)
        if dispatched:
            logger.debug("dispatched %d token count job(s)", len(dispatched))
        return dispatched

    def drain_results(self) -> list[TokenCountResult]:
        """Return every result queued so far without waiting."""
        out: list[TokenCountResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "COUNTING",
    "NOT_COUNTED",
    "Counted",
    "Counting",
    "Failed",
    "NotCounted",
    "TokenCountDispatcher",
    "TokenCountResult",
    "TokenStatus",
    "TokenSummary",
    "apply_token_count_result",
    "summarize_token_counts",
]
