"""What happens when a task breaks the completion contract."""

from asimpy import Environment, Queue
from mapreduce_job import run
from mapreduce_tasks import forward
from mapreduce_types import Entry, PhaseTimeoutError, StalledJobError


async def forgetful_map(entry: Entry, results: Queue, done: Queue):
    """Map task that never signals completion for 'bad' entries."""
    await results.put(entry)
    if entry.key != "bad":
        await done.put(None)


def make_sleepy_map(env: Environment):
    """Map task that takes far longer for 'slow' entries."""

    async def sleepy_map(entry: Entry, results: Queue, done: Queue):
        await env.timeout(100.0 if entry.key == "slow" else 1.0)
        await results.put(entry)
        await done.put(None)

    return sleepy_map


def run_stalled_task():
    """Show a stalled barrier and a phase timeout."""
    inputs = [Entry("good", ["1"]), Entry("bad", ["2"])]
    try:
        run(inputs, forgetful_map, forward, verbose=True)
    except StalledJobError as exc:
        print(f"\nStalled: {exc}")

    env = Environment()
    inputs = [Entry("fast", ["1"]), Entry("slow", ["2"])]
    try:
        run(inputs, make_sleepy_map(env), forward, env=env, phase_timeout=10.0, verbose=True)
    except PhaseTimeoutError as exc:
        print(f"\nTimed out at {env.now:.1f}: {exc}")


if __name__ == "__main__":
    run_stalled_task()
