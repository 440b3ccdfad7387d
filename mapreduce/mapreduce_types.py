"""Core data structures for the in-process MapReduce primitive."""

from asimpy import Environment, Queue
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

# Key -> ordered values, built by one Collector for one phase.
AggregatedMapping = Dict[str, List[str]]

# async def task(entry, results, done): put Entries on results, then one None on done.
TaskFn = Callable[["Entry", Queue, Queue], Awaitable[Any]]


@dataclass
class Entry:
    """A key paired with an ordered sequence of values."""

    key: str
    values: List[str] = field(default_factory=list)

    def __str__(self):
        return f"Entry({self.key!r}, {len(self.values)} values)"


@dataclass
class PhaseStats:
    """Counters for one map or reduce phase."""

    name: str
    tasks: int = 0
    messages: int = 0
    completions: int = 0
    keys: int = 0
    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    @property
    def outstanding(self) -> int:
        """Tasks that have not signalled completion yet."""
        return self.tasks - self.completions

    def __str__(self):
        return (
            f"{self.name}(tasks={self.tasks}, messages={self.messages}, "
            f"keys={self.keys})"
        )


@dataclass
class JobStats:
    """Statistics for a whole job."""

    map_phase: PhaseStats = field(default_factory=lambda: PhaseStats("map"))
    reduce_phase: PhaseStats = field(default_factory=lambda: PhaseStats("reduce"))
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def elapsed(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time


class MapReduceError(Exception):
    """Base class for errors raised by the MapReduce primitive."""


class StalledJobError(MapReduceError):
    """Raised when the scheduler goes quiet before a final result exists."""

    def __init__(self, phase: str, outstanding: int):
        self.phase = phase
        self.outstanding = outstanding
        super().__init__(
            f"job stalled in {phase} phase: "
            f"{outstanding} task(s) never signalled completion"
        )


class PhaseTimeoutError(MapReduceError):
    """Raised when a phase misses its deadline."""

    def __init__(self, phase: str, outstanding: int, timeout: float):
        self.phase = phase
        self.outstanding = outstanding
        self.timeout = timeout
        super().__init__(
            f"{phase} phase timed out after {timeout}: "
            f"{outstanding} task(s) still running"
        )


def check_options(max_parallel: Optional[int], phase_timeout: Optional[float]):
    """Reject option values no job can run with."""
    if max_parallel is not None and max_parallel < 1:
        raise ValueError(f"max_parallel must be at least 1, got {max_parallel}")
    if phase_timeout is not None and phase_timeout <= 0:
        raise ValueError(f"phase_timeout must be positive, got {phase_timeout}")


def report(env: Environment, name: str, message: str, verbose: bool = False):
    """Record a progress line in the environment log, echoing it if verbose."""
    env.log(name, message)
    if verbose:
        print(f"[{env.now:.1f}] {name}: {message}")


def to_entries(mapping: AggregatedMapping) -> List[Entry]:
    """One Entry per key, values taken verbatim. Order carries no meaning."""
    return [Entry(key, values) for key, values in mapping.items()]
