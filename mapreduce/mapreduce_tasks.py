"""Helpers for writing tasks that honour the result/completion contract."""

from asimpy import Queue
from functools import wraps
from typing import Callable, Iterable, Optional, Tuple, Union

from mapreduce_types import Entry, TaskFn

Emitted = Union[Entry, Tuple[str, Union[str, Iterable[str]]]]


def _as_entry(item: Emitted) -> Entry:
    if isinstance(item, Entry):
        return item
    key, values = item
    if isinstance(values, str):
        return Entry(key, [values])
    return Entry(key, list(values))


def emitting(fn: Callable[[Entry], Optional[Iterable[Emitted]]]) -> TaskFn:
    """Turn a plain function or generator into a task.

    `fn(entry)` returns or yields Entries or (key, values) pairs; a bare
    string value counts as a single value. Each one is sent as a result
    message, then exactly one completion signal follows.
    """

    @wraps(fn)
    async def task(entry: Entry, results: Queue, done: Queue):
        for item in fn(entry) or ():
            await results.put(_as_entry(item))
        await done.put(None)

    return task


async def forward(entry: Entry, results: Queue, done: Queue):
    """Identity task: re-emit the entry unchanged."""
    await results.put(Entry(entry.key, list(entry.values)))
    await done.put(None)
