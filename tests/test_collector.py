import pytest
from asimpy import Process, Queue

from mapreduce_collector import collect
from mapreduce_types import Entry, PhaseStats, PhaseTimeoutError


class Collecting(Process):
    """Runs collect() and keeps whatever it returns."""

    def init(self, results, done, expected, **kwargs):
        self.results = results
        self.done = done
        self.expected = expected
        self.kwargs = kwargs
        self.mapping = None
        self.finished_at = None

    async def run(self):
        self.mapping = await collect(
            self._env, self.results, self.done, self.expected, **self.kwargs
        )
        self.finished_at = self.now


class Sender(Process):
    """Sends results and completion signals after a delay."""

    def init(self, results, done, delay, messages, signals=1):
        self.results = results
        self.done = done
        self.delay = delay
        self.messages = messages
        self.signals = signals

    async def run(self):
        await self.timeout(self.delay)
        for message in self.messages:
            await self.results.put(message)
        for _ in range(self.signals):
            await self.done.put(None)


def test_zero_expected_returns_without_reading(env):
    results, done = Queue(env), Queue(env)
    results.try_put(Entry("k", ["v"]))
    done.try_put(None)

    collector = Collecting(env, results, done, 0)
    env.run()

    assert collector.mapping == {}
    assert results.size() == 1
    assert done.size() == 1


def test_same_key_values_are_concatenated(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 1.0, [Entry("x", ["1"])])
    Sender(env, results, done, 2.0, [Entry("x", ["2", "3"]), Entry("y", ["4"])])

    collector = Collecting(env, results, done, 2)
    env.run()

    assert collector.mapping == {"x": ["1", "2", "3"], "y": ["4"]}


def test_waits_for_every_completion_signal(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 1.0, [Entry("a", ["1"])])
    Sender(env, results, done, 2.0, [Entry("b", ["2"])])
    Sender(env, results, done, 3.0, [], signals=0)

    collector = Collecting(env, results, done, 3)
    env.run()

    assert collector.mapping is None


def test_returns_when_last_task_signals(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 1.0, [Entry("a", ["1"])])
    Sender(env, results, done, 5.0, [])

    collector = Collecting(env, results, done, 2)
    env.run()

    assert collector.mapping == {"a": ["1"]}
    assert collector.finished_at == 5.0


def test_result_ready_alongside_completion_is_kept(env):
    results, done = Queue(env), Queue(env)
    results.try_put(Entry("a", ["1"]))
    done.try_put(None)

    collector = Collecting(env, results, done, 1)
    env.run()

    assert collector.mapping == {"a": ["1"]}
    assert done.is_empty()


def test_stats_are_filled_in(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 1.0, [Entry("a", ["1"]), Entry("b", ["2"])])
    Sender(env, results, done, 1.0, [Entry("a", ["3"])])
    stats = PhaseStats("map", tasks=2)

    Collecting(env, results, done, 2, stats=stats)
    env.run()

    assert stats.messages == 3
    assert stats.completions == 2
    assert stats.keys == 2
    assert stats.outstanding == 0


def test_timeout_raises_with_outstanding_count(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 1.0, [Entry("a", ["1"])])
    Sender(env, results, done, 50.0, [])

    Collecting(env, results, done, 2, phase="reduce", timeout=10.0)
    with pytest.raises(PhaseTimeoutError) as info:
        env.run()

    assert info.value.phase == "reduce"
    assert info.value.outstanding == 1
    assert env.now == 10.0


def test_timeout_not_hit_when_tasks_finish_in_time(env):
    results, done = Queue(env), Queue(env)
    Sender(env, results, done, 4.0, [Entry("a", ["1"])])
    Sender(env, results, done, 9.0, [Entry("a", ["2"])])

    collector = Collecting(env, results, done, 2, timeout=10.0)
    env.run()

    assert collector.mapping == {"a": ["1", "2"]}
    assert collector.finished_at == 9.0
