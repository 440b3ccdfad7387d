"""Classic word count MapReduce example."""

from asimpy import Environment, Queue
from mapreduce_job import run
from mapreduce_types import Entry


def make_word_count_map(env: Environment):
    """Map task: emit (word, ["1"]) for each word, taking time per word."""

    async def word_count_map(entry: Entry, results: Queue, done: Queue):
        for line in entry.values:
            for word in line.split():
                await env.timeout(0.1)
                await results.put(Entry(word.lower(), ["1"]))
        await done.put(None)

    return word_count_map


async def word_count_reduce(entry: Entry, results: Queue, done: Queue):
    """Reduce task: sum all counts for a word."""
    total = sum(int(v) for v in entry.values)
    await results.put(Entry(entry.key, [str(total)]))
    await done.put(None)


def run_word_count():
    """Run word count example."""
    env = Environment()

    # Input data: one document per entry, one line per value
    documents = [
        Entry("doc1", ["the quick brown fox", "jumps over the lazy dog"]),
        Entry("doc2", ["the dog was not amused"]),
        Entry("doc3", ["the quick brown fox jumps again"]),
        Entry("doc4", ["the lazy dog sleeps"]),
    ]

    results = run(
        documents, make_word_count_map(env), word_count_reduce, env=env, verbose=True
    )

    # Sort and display results
    counts = sorted(
        ((word, int(values[0])) for word, values in results.items()),
        key=lambda x: x[1],
        reverse=True,
    )
    print("\n=== Word Count Results ===")
    for word, count in counts:
        print(f"{word}: {count}")


if __name__ == "__main__":
    run_word_count()
