"""Barrier that drains result and completion channels for one phase."""

from asimpy import Environment, FirstOf, Queue, Timeout
from typing import Optional

from mapreduce_types import AggregatedMapping, PhaseStats, PhaseTimeoutError


async def collect(
    env: Environment,
    results: Queue,
    done: Queue,
    expected: int,
    *,
    phase: str = "map",
    timeout: Optional[float] = None,
    stats: Optional[PhaseStats] = None,
) -> AggregatedMapping:
    """Aggregate result messages by key until `expected` tasks have signalled.

    Result messages and completion signals are independent events: a task
    may send any number of results before its single completion signal.
    Only this loop touches the mapping, so it needs no lock.

    If `timeout` is given, the phase fails with PhaseTimeoutError once that
    much simulated time has passed without the barrier closing.
    """
    mapping: AggregatedMapping = {}
    remaining = expected
    deadline = None if timeout is None else env.now + timeout

    while remaining > 0:
        waits = {"result": results.get(), "done": done.get()}
        if deadline is not None:
            waits["timeout"] = Timeout(env, max(0, deadline - env.now))

        # Losing gets are cancelled and put their item back. Each pass leaves a
        # cancelled getter (and, with a deadline, a cancelled Timeout) that
        # asimpy discards lazily, so leftovers grow with the message count.
        # The deadline cannot be one shared Timeout: FirstOf cancels losers.
        name, value = await FirstOf(env, **waits)

        if name == "result":
            mapping.setdefault(value.key, []).extend(value.values)
            if stats is not None:
                stats.messages += 1
        elif name == "done":
            remaining -= 1
            if stats is not None:
                stats.completions += 1
        else:
            raise PhaseTimeoutError(phase, remaining, timeout)

    if stats is not None:
        stats.keys = len(mapping)
    return mapping
