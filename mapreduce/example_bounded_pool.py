"""Running the same job with one process per entry and with a worker pool."""

from asimpy import Environment, Queue
from mapreduce_job import MapReduce
from mapreduce_tasks import forward
from mapreduce_types import Entry


def make_slow_square(env: Environment, delay: float):
    """Map task: square each value after `delay` time units."""

    async def slow_square(entry: Entry, results: Queue, done: Queue):
        await env.timeout(delay)
        squares = [str(int(v) ** 2) for v in entry.values]
        await results.put(Entry("squares", squares))
        await done.put(None)

    return slow_square


def run_once(max_parallel):
    env = Environment()
    job = MapReduce(make_slow_square(env, 1.0), forward, env=env, max_parallel=max_parallel)
    inputs = [Entry(f"n{i}", [str(i)]) for i in range(1, 11)]
    result = job.execute(inputs)

    total = sum(int(v) for v in result["squares"])
    label = "unbounded" if max_parallel is None else f"max_parallel={max_parallel}"
    print(f"{label}: sum of squares {total}, job took {job.stats.elapsed:.1f}")


def run_bounded_pool():
    """Compare elapsed simulation time with and without a ceiling."""
    run_once(None)
    run_once(3)
    run_once(1)


if __name__ == "__main__":
    run_bounded_pool()
