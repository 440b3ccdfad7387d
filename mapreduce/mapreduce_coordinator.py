"""MapReduce coordinator that orchestrates the two phases."""

from asimpy import Environment, Queue
from typing import List, Optional

from mapreduce_collector import collect
from mapreduce_types import (
    AggregatedMapping,
    Entry,
    JobStats,
    PhaseStats,
    TaskFn,
    check_options,
    report,
    to_entries,
)
from mapreduce_worker import MapReduceWorker, TaskProcess


class MapReduceCoordinator:
    """Coordinates a map phase and a reduce phase through two barriers."""

    def __init__(
        self,
        env: Environment,
        map_fn: TaskFn,
        reduce_fn: TaskFn,
        max_parallel: Optional[int] = None,
        phase_timeout: Optional[float] = None,
        verbose: bool = False,
    ):
        check_options(max_parallel, phase_timeout)

        self.env = env
        self.map_fn = map_fn
        self.reduce_fn = reduce_fn
        self.max_parallel = max_parallel
        self.phase_timeout = phase_timeout
        self.verbose = verbose

        # Statistics
        self.stats = JobStats()
        self.current_phase: Optional[PhaseStats] = None
        self.workers: List[MapReduceWorker] = []

    def run(self, inputs: List[Entry], result_channel: Queue):
        """Run the job and put the final mapping on `result_channel` - returns a coroutine."""

        async def _execute():
            self.stats.start_time = self.env.now
            self._log(f"Starting MapReduce job with {len(inputs)} inputs")

            intermediate = await self._run_phase(
                self.stats.map_phase, self.map_fn, list(inputs)
            )

            self._log(
                f"Map phase complete with {len(intermediate)} keys, "
                "starting reduce phase"
            )

            final = await self._run_phase(
                self.stats.reduce_phase, self.reduce_fn, to_entries(intermediate)
            )

            self.stats.end_time = self.env.now
            self.current_phase = None
            self._log(
                f"MapReduce job complete in {self.stats.elapsed:.1f}s, "
                f"{len(final)} keys"
            )

            await result_channel.put(final)

        return _execute()

    async def _run_phase(
        self, stats: PhaseStats, fn: TaskFn, entries: List[Entry]
    ) -> AggregatedMapping:
        """Fan out one task per entry, then wait at the barrier."""
        self.current_phase = stats
        stats.tasks = len(entries)
        stats.started_at = self.env.now

        # Fresh channels per phase so nothing leaks between phases.
        results = Queue(self.env)
        done = Queue(self.env)

        if self.max_parallel is None:
            self._spawn_tasks(stats.name, fn, entries, results, done)
        else:
            await self._dispatch_to_pool(stats.name, fn, entries, results, done)

        mapping = await collect(
            self.env,
            results,
            done,
            len(entries),
            phase=stats.name,
            timeout=self.phase_timeout,
            stats=stats,
        )

        stats.finished_at = self.env.now
        self._log(f"{stats} finished")
        return mapping

    def _spawn_tasks(
        self, phase: str, fn: TaskFn, entries: List[Entry], results: Queue, done: Queue
    ):
        """Start one process per entry, with no concurrency ceiling."""
        for i, entry in enumerate(entries):
            TaskProcess(self.env, f"{phase}_{i}", fn, entry, results, done)
        self._log(f"Spawned {len(entries)} {phase} tasks")

    async def _dispatch_to_pool(
        self, phase: str, fn: TaskFn, entries: List[Entry], results: Queue, done: Queue
    ):
        """Queue entries for a pool of at most `max_parallel` workers."""
        task_queue = Queue(self.env)
        num_workers = min(self.max_parallel, len(entries))

        for _ in range(num_workers):
            worker = MapReduceWorker(
                self.env, len(self.workers), fn, task_queue, results, done, self.verbose
            )
            self.workers.append(worker)

        for entry in entries:
            await task_queue.put(entry)
        for _ in range(num_workers):
            await task_queue.put(None)

        self._log(f"Queued {len(entries)} {phase} tasks for {num_workers} workers")

    def _log(self, message: str):
        report(self.env, "Coordinator", message, self.verbose)
