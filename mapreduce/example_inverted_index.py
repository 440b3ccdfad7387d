"""Inverted index construction for search engines."""

from mapreduce_job import MapReduce
from mapreduce_tasks import emitting
from mapreduce_types import Entry


@emitting
def inverted_index_map(entry: Entry):
    """Map function: entry is (doc_id, [text])."""
    seen = set()
    for text in entry.values:
        for word in text.split():
            word = word.lower()
            if word not in seen:
                seen.add(word)
                yield (word, entry.key)


@emitting
def inverted_index_reduce(entry: Entry):
    """Reduce function: collect unique document IDs."""
    return [(entry.key, sorted(set(entry.values)))]


def run_inverted_index():
    """Build inverted index for search."""
    documents = [
        Entry("doc1", ["the quick brown fox"]),
        Entry("doc2", ["the lazy dog"]),
        Entry("doc3", ["the quick dog"]),
        Entry("doc4", ["brown fox and lazy dog"]),
    ]

    job = MapReduce(inverted_index_map, inverted_index_reduce)
    index = job.execute(documents)

    print("\n=== Inverted Index ===")
    for word, docs in sorted(index.items()):
        print(f"{word}: {docs}")

    print(f"\n{job.stats.map_phase}")
    print(f"{job.stats.reduce_phase}")


if __name__ == "__main__":
    run_inverted_index()
