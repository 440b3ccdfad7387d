"""Synchronous entry point for running a MapReduce job."""

from asimpy import Environment, Process, Queue, QueueEmpty
from typing import Iterable, Optional

from mapreduce_coordinator import MapReduceCoordinator
from mapreduce_types import (
    AggregatedMapping,
    Entry,
    JobStats,
    StalledJobError,
    TaskFn,
    check_options,
)


class MapReduceJob(Process):
    """Process that runs the coordinator and delivers its result."""

    def init(
        self,
        coordinator: MapReduceCoordinator,
        inputs: Iterable[Entry],
        result_channel: Queue,
    ):
        self.coordinator = coordinator
        self.inputs = list(inputs)
        self.result_channel = result_channel

    async def run(self):
        await self.coordinator.run(self.inputs, self.result_channel)


class MapReduce:
    """A configured map/reduce pair that can be executed on inputs.

    By default every call to execute() gets a fresh Environment. Pass `env`
    to share a simulation clock with other processes; execute() then runs
    that environment until nothing is left to do.
    """

    def __init__(
        self,
        map_fn: TaskFn,
        reduce_fn: TaskFn,
        *,
        env: Optional[Environment] = None,
        max_parallel: Optional[int] = None,
        phase_timeout: Optional[float] = None,
        verbose: bool = False,
    ):
        check_options(max_parallel, phase_timeout)
        self.map_fn = map_fn
        self.reduce_fn = reduce_fn
        self.env = env
        self.max_parallel = max_parallel
        self.phase_timeout = phase_timeout
        self.verbose = verbose
        self.coordinator: Optional[MapReduceCoordinator] = None

    @property
    def stats(self) -> Optional[JobStats]:
        """Statistics of the most recent execution."""
        return self.coordinator.stats if self.coordinator is not None else None

    def execute(self, inputs: Iterable[Entry]) -> AggregatedMapping:
        """Run both phases and return the final mapping.

        Raises StalledJobError if the scheduler runs out of work before the
        final mapping is delivered, which happens when a task never sends
        its completion signal.
        """
        env = self.env if self.env is not None else Environment()
        result_channel = Queue(env, capacity=1)

        self.coordinator = MapReduceCoordinator(
            env,
            self.map_fn,
            self.reduce_fn,
            max_parallel=self.max_parallel,
            phase_timeout=self.phase_timeout,
            verbose=self.verbose,
        )
        MapReduceJob(env, self.coordinator, inputs, result_channel)

        env.run()

        try:
            return result_channel.try_get()
        except QueueEmpty:
            phase = self.coordinator.current_phase
            raise StalledJobError(phase.name, phase.outstanding) from None


def run(
    inputs: Iterable[Entry],
    map_fn: TaskFn,
    reduce_fn: TaskFn,
    *,
    env: Optional[Environment] = None,
    max_parallel: Optional[int] = None,
    phase_timeout: Optional[float] = None,
    verbose: bool = False,
) -> AggregatedMapping:
    """Run `map_fn` over `inputs`, then `reduce_fn` over the grouped results."""
    job = MapReduce(
        map_fn,
        reduce_fn,
        env=env,
        max_parallel=max_parallel,
        phase_timeout=phase_timeout,
        verbose=verbose,
    )
    return job.execute(inputs)
