"""Processes that run map and reduce tasks."""

from asimpy import Process, Queue
from typing import Optional

from mapreduce_types import Entry, TaskFn, report


class TaskProcess(Process):
    """Runs a single task invocation: one process per entry."""

    def init(self, task_id: str, fn: TaskFn, entry: Entry, results: Queue, done: Queue):
        self.task_id = task_id
        self.fn = fn
        self.entry = entry
        self.results = results
        self.done = done

    async def run(self):
        await self.fn(self.entry, self.results, self.done)

    def __str__(self):
        return f"TaskProcess({self.task_id})"


class MapReduceWorker(Process):
    """Pool worker that runs tasks taken from a shared task queue.

    A None on the task queue tells the worker to exit.
    """

    def init(
        self,
        worker_id: int,
        fn: TaskFn,
        task_queue: Queue,
        results: Queue,
        done: Queue,
        verbose: bool = False,
    ):
        self.worker_id = worker_id
        self.fn = fn
        self.task_queue = task_queue
        self.results = results
        self.done = done
        self.verbose = verbose

        # Statistics
        self.tasks_executed = 0
        self.current_task: Optional[Entry] = None

    async def run(self):
        """Main worker loop: fetch and execute tasks."""
        while True:
            entry = await self.task_queue.get()
            if entry is None:
                break

            self.current_task = entry
            report(self._env, f"Worker {self.worker_id}", f"Starting {entry}", self.verbose)
            await self.fn(entry, self.results, self.done)
            self.tasks_executed += 1
            self.current_task = None

        report(
            self._env,
            f"Worker {self.worker_id}",
            f"Exiting after {self.tasks_executed} tasks",
            self.verbose,
        )
