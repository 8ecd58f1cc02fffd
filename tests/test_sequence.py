"""Unit tests for the sequence counter."""

import threading

from generation.sequence import SEQUENCE_SIZE, SequenceCounter


def run_concurrently(counter, millisecond, calls, threads=8):
    """Call next_sequence ``calls`` times from ``threads`` threads at once."""
    results = []
    results_lock = threading.Lock()
    start = threading.Barrier(threads)
    per_thread = [calls // threads + (1 if i < calls % threads else 0) for i in range(threads)]

    def worker(count):
        start.wait()
        local = [counter.next_sequence(millisecond) for _ in range(count)]
        with results_lock:
            results.extend(local)

    workers = [threading.Thread(target=worker, args=(count,)) for count in per_thread]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()
    return results


class TestSequenceCounter:
    """Tests for SequenceCounter."""

    def test_counts_up_within_a_millisecond(self):
        counter = SequenceCounter()
        assert [counter.next_sequence(100) for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_resets_on_new_millisecond(self):
        counter = SequenceCounter()
        counter.next_sequence(100)
        counter.next_sequence(100)
        assert counter.next_sequence(101) == 0
        assert counter.last_millisecond == 101

    def test_older_millisecond_keeps_counting(self):
        """Only an advancing millisecond restarts the count."""
        counter = SequenceCounter()
        counter.next_sequence(100)
        assert counter.next_sequence(101) == 0
        assert counter.next_sequence(100) == 1
        assert counter.last_millisecond == 101

    def test_late_caller_does_not_repeat_values(self):
        """Callers reaching the lock as 101, 100, 101 still get distinct values for 101."""
        counter = SequenceCounter()
        first = counter.next_sequence(101)
        counter.next_sequence(100)
        assert counter.next_sequence(101) != first

    def test_take_reads_clock_and_counts(self):
        readings = iter([100, 100, 101])
        counter = SequenceCounter()
        taken = [counter.take(lambda: next(readings)) for _ in range(3)]
        assert taken == [(100, 0), (100, 1), (101, 0)]

    def test_wraps_after_4096(self):
        """The 4097th call in a millisecond wraps to 0."""
        counter = SequenceCounter()
        values = [counter.next_sequence(7) for _ in range(SEQUENCE_SIZE + 1)]
        assert values[:SEQUENCE_SIZE] == list(range(SEQUENCE_SIZE))
        assert values[SEQUENCE_SIZE] == 0
        assert counter.wraps == 1

    def test_wrap_is_logged(self, capsys):
        counter = SequenceCounter()
        for _ in range(SEQUENCE_SIZE + 1):
            counter.next_sequence(7)
        assert "sequence wrapped" in capsys.readouterr().err

    def test_concurrent_callers_get_distinct_values(self):
        """4096 concurrent calls in one millisecond yield 0..4095 exactly once."""
        counter = SequenceCounter()
        results = run_concurrently(counter, 42, SEQUENCE_SIZE)
        assert sorted(results) == list(range(SEQUENCE_SIZE))
        assert counter.wraps == 0

    def test_concurrent_partial_load(self):
        """N < 4096 concurrent calls yield 0..N-1."""
        counter = SequenceCounter()
        results = run_concurrently(counter, 42, 1000)
        assert sorted(results) == list(range(1000))

    def test_5000_calls_repeat_values(self):
        """Past 4096 calls the values repeat: 4096 distinct, 904 duplicates."""
        counter = SequenceCounter()
        results = run_concurrently(counter, 42, 5000)
        assert len(results) == 5000
        assert len(set(results)) == SEQUENCE_SIZE
        assert counter.wraps == 1

    def test_first_4096_are_distinct_before_repeating(self):
        counter = SequenceCounter()
        values = [counter.next_sequence(9) for _ in range(5000)]
        assert len(set(values[:SEQUENCE_SIZE])) == SEQUENCE_SIZE
        assert values[SEQUENCE_SIZE:] == list(range(5000 - SEQUENCE_SIZE))
