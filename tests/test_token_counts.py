"""Tests for background token counting and result aggregation.

Workers are real daemon threads; gated sources hold individual jobs open so
arrival order can be forced. A word-count tokenizer keeps results exact.
"""

from __future__ import annotations

import threading
import time
import unittest

from lazymerge.runtime.token_counts import (
    COUNTING,
    NOT_COUNTED,
    Counted,
    Counting,
    Failed,
    TokenCountDispatcher,
    TokenCountResult,
    apply_token_count_result,
    summarize_token_counts,
)
from lazymerge.sources import MemoryTextSource, SourceFile


def word_count(text: str) -> int:
    return len(text.split())


class GatedSource(MemoryTextSource):
    """Memory source whose fetches for ``gated`` paths wait for a release."""

    def __init__(self, contents: dict[str, object], gated: tuple[str, ...] = ()) -> None:
        super().__init__(contents)
        self.gates = {path: threading.Event() for path in gated}
        self.fetch_calls: list[str] = []
        self._calls_lock = threading.Lock()

    def release(self, path: str) -> None:
        self.gates[path].set()

    def fetch_content(self, source_file: SourceFile) -> str:
        with self._calls_lock:
            self.fetch_calls.append(source_file.path)
        gate = self.gates.get(source_file.path)
        if gate is not None:
            gate.wait(5.0)
        return super().fetch_content(source_file)


def drain_until(dispatcher: TokenCountDispatcher, expected: int, timeout: float = 5.0) -> list[TokenCountResult]:
    results: list[TokenCountResult] = []
    deadline = time.monotonic() + timeout
    while len(results) < expected and time.monotonic() < deadline:
        results.extend(dispatcher.drain_results())
        time.sleep(0.005)
    return results


class TokenCountDispatcherTests(unittest.TestCase):
    def test_dispatch_marks_counting_and_reports_each_file_once(self) -> None:
        source = GatedSource({"a.txt": "token token", "b.txt": "one"}, gated=("a.txt", "b.txt"))
        files = [SourceFile("a.txt"), SourceFile("b.txt")]
        statuses = {"a.txt": NOT_COUNTED, "b.txt": NOT_COUNTED}
        dispatcher = TokenCountDispatcher(word_count)

        first = dispatcher.dispatch({"a.txt", "b.txt"}, files, source, statuses)
        second = dispatcher.dispatch({"a.txt", "b.txt"}, files, source, statuses)

        self.assertEqual(first, ["a.txt", "b.txt"])
        self.assertEqual(second, [])
        self.assertEqual(statuses, {"a.txt": COUNTING, "b.txt": COUNTING})

        source.release("a.txt")
        source.release("b.txt")
        results = drain_until(dispatcher, 2)
        time.sleep(0.05)
        results.extend(dispatcher.drain_results())

        self.assertEqual(sorted(result.path for result in results), ["a.txt", "b.txt"])
        self.assertEqual(sorted(source.fetch_calls), ["a.txt", "b.txt"])

    def test_dispatch_skips_unselected_unloaded_and_already_counted_paths(self) -> None:
        source = MemoryTextSource({"a.txt": "x", "b.txt": "y", "c.txt": "z"})
        files = [SourceFile("a.txt"), SourceFile("b.txt")]
        statuses = {"a.txt": Counted(4), "b.txt": NOT_COUNTED}
        dispatcher = TokenCountDispatcher(word_count)

        dispatched = dispatcher.dispatch({"a.txt", "b.txt", "c.txt"}, files, source, statuses)

        self.assertEqual(dispatched, ["b.txt"])
        self.assertEqual(statuses["a.txt"], Counted(4))
        self.assertNotIn("c.txt", statuses)
        drain_until(dispatcher, 1)

    def test_dispatch_without_source_is_noop(self) -> None:
        statuses = {"a.txt": NOT_COUNTED}
        dispatcher = TokenCountDispatcher(word_count)

        dispatched = dispatcher.dispatch({"a.txt"}, [SourceFile("a.txt")], None, statuses)

        self.assertEqual(dispatched, [])
        self.assertEqual(statuses, {"a.txt": NOT_COUNTED})

    def test_drain_with_nothing_queued_returns_empty_list(self) -> None:
        dispatcher = TokenCountDispatcher(word_count)
        self.assertEqual(dispatcher.drain_results(), [])
        self.assertEqual(dispatcher.drain_results(), [])

    def test_fetch_failure_becomes_error_result(self) -> None:
        source = MemoryTextSource({"bad.txt": OSError("permission denied")})
        statuses = {"bad.txt": NOT_COUNTED}
        dispatcher = TokenCountDispatcher(word_count)

        dispatcher.dispatch({"bad.txt"}, [SourceFile("bad.txt")], source, statuses, generation=3)
        results = drain_until(dispatcher, 1)

        self.assertEqual(len(results), 1)
        self.assertFalse(results[0].ok)
        self.assertEqual(results[0].generation, 3)
        self.assertIn("permission denied", results[0].error or "")
        self.assertTrue(apply_token_count_result(statuses, results[0], 3))
        self.assertIsInstance(statuses["bad.txt"], Failed)

    def test_tokenizer_failure_becomes_error_result(self) -> None:
        def broken(_text: str) -> int:
            raise RuntimeError("encoder missing")

        source = MemoryTextSource({"a.txt": "hello"})
        dispatcher = TokenCountDispatcher(broken)
        dispatcher.dispatch({"a.txt"}, [SourceFile("a.txt")], source, {"a.txt": NOT_COUNTED})

        results = drain_until(dispatcher, 1)

        self.assertEqual(results[0].error, "encoder missing")


class TokenCountAggregationTests(unittest.TestCase):
    def test_results_apply_only_to_counting_paths_of_current_generation(self) -> None:
        statuses = {"a.txt": COUNTING, "b.txt": NOT_COUNTED, "c.txt": Counted(7)}

        self.assertFalse(apply_token_count_result(statuses, TokenCountResult("a.txt", 1, count=5), 2))
        self.assertFalse(apply_token_count_result(statuses, TokenCountResult("b.txt", 2, count=5), 2))
        self.assertFalse(apply_token_count_result(statuses, TokenCountResult("c.txt", 2, count=5), 2))
        self.assertFalse(apply_token_count_result(statuses, TokenCountResult("gone.txt", 2, count=5), 2))
        self.assertEqual(statuses, {"a.txt": COUNTING, "b.txt": NOT_COUNTED, "c.txt": Counted(7)})

        self.assertTrue(apply_token_count_result(statuses, TokenCountResult("a.txt", 2, count=5), 2))
        self.assertEqual(statuses["a.txt"], Counted(5))

    def test_summary_is_independent_of_arrival_order(self) -> None:
        results = [
            TokenCountResult("a.txt", 0, count=2),
            TokenCountResult("b.txt", 0, count=1),
            TokenCountResult("c.txt", 0, error="boom"),
        ]
        summaries = []
        for ordered in (results, list(reversed(results)), [results[1], results[2], results[0]]):
            statuses = {path: COUNTING for path in ("a.txt", "b.txt", "c.txt")}
            for result in ordered:
                apply_token_count_result(statuses, result, 0)
            summaries.append(summarize_token_counts(statuses, {"a.txt", "b.txt", "c.txt"}))

        self.assertEqual(summaries[0], summaries[1])
        self.assertEqual(summaries[0], summaries[2])
        self.assertEqual(summaries[0].total, 3)
        self.assertEqual(summaries[0].failed, 1)

    def test_summary_counts_only_selected_files(self) -> None:
        statuses = {"a.txt": Counted(10), "b.txt": Counted(5), "c.txt": Counting()}

        summary = summarize_token_counts(statuses, {"a.txt", "c.txt"})

        self.assertEqual(summary.total, 10)
        self.assertEqual(summary.pending, 1)
        self.assertEqual(summary.describe(), "10 tokens (1 pending)")

    def test_empty_summary_describes_as_blank(self) -> None:
        self.assertEqual(summarize_token_counts({}, set()).describe(), "")


if __name__ == "__main__":
    unittest.main()
