import example_bounded_pool
import example_inverted_index
import example_stalled_task
import example_word_count


def test_word_count_example(capsys):
    example_word_count.run_word_count()

    out = capsys.readouterr().out
    assert "=== Word Count Results ===" in out
    assert "the: 5" in out
    assert "dog: 3" in out


def test_inverted_index_example(capsys):
    example_inverted_index.run_inverted_index()

    out = capsys.readouterr().out
    assert "dog: ['doc2', 'doc3', 'doc4']" in out
    assert "fox: ['doc1', 'doc4']" in out


def test_bounded_pool_example(capsys):
    example_bounded_pool.run_bounded_pool()

    out = capsys.readouterr().out
    assert "unbounded: sum of squares 385, job took 1.0" in out
    assert "max_parallel=3: sum of squares 385, job took 4.0" in out
    assert "max_parallel=1: sum of squares 385, job took 10.0" in out


def test_stalled_task_example(capsys):
    example_stalled_task.run_stalled_task()

    out = capsys.readouterr().out
    assert "Stalled: job stalled in map phase: 1 task(s) never signalled completion" in out
    assert "Timed out at 10.0" in out
