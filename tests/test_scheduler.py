import threading

import numpy
import pytest

from linearcrf.scheduler import DocumentScheduler, mergeSparse


@pytest.mark.parametrize("threads", [1, 3])
def test_every_task_comes_back(threads):
    scheduler = DocumentScheduler(threads)
    results = list(scheduler.run(lambda n: n * n, range(50)))
    assert sorted(results) == [n * n for n in range(50)]


def test_tasks_run_on_worker_threads():
    seen = set()
    lock = threading.Lock()

    def process(n):
        with lock:
            seen.add(threading.current_thread().name)
        return n

    assert len(list(DocumentScheduler(4, maxPending=2).run(process, range(20)))) == 20
    assert threading.main_thread().name not in seen


@pytest.mark.parametrize("threads", [1, 2])
def test_worker_error_propagates(threads):
    def process(n):
        if n == 5:
            raise ValueError("bad document %d" % n)
        return n

    with pytest.raises(ValueError, match="bad document 5"):
        list(DocumentScheduler(threads).run(process, range(10)))


def test_thread_count_must_be_positive():
    with pytest.raises(ValueError):
        DocumentScheduler(0)


def test_merge_sparse():
    into = [numpy.zeros(2), numpy.zeros(3)]
    mergeSparse(into, {1: numpy.array([1.0, 2.0, 3.0])})
    mergeSparse(into, {1: numpy.ones(3), 0: numpy.ones(2)}, scale=0.5)
    mergeSparse(into, None)
    assert list(into[0]) == [0.5, 0.5]
    assert list(into[1]) == [1.5, 2.5, 3.5]
