"""Unit tests for the in-memory review store."""

import threading

from review_service.schemas import Review
from review_service.store import ReviewStore


def test_new_store_is_empty():
    store = ReviewStore()
    assert store.list() == []
    assert len(store) == 0


def test_append_keeps_insertion_order_and_duplicates():
    store = ReviewStore()
    first = Review(name="ann", review="great")
    second = Review(name="bob", review="meh")
    store.append(first)
    store.append(second)
    store.append(first)

    assert store.list() == [first, second, first]


def test_list_returns_a_snapshot():
    store = ReviewStore()
    store.append(Review(name="ann", review="great"))
    snapshot = store.list()
    snapshot.clear()
    store.append(Review(name="bob", review="fine"))

    assert snapshot == []
    assert [r.name for r in store.list()] == ["ann", "bob"]


def test_extend_appends_in_order_after_existing():
    store = ReviewStore()
    store.append(Review(name="a", review="1"))
    store.extend(Review(name=n, review="x") for n in ("b", "c"))

    assert [r.name for r in store.list()] == ["a", "b", "c"]


def test_concurrent_appends_are_not_lost():
    store = ReviewStore()
    writers, per_writer = 8, 500
    snapshots = []
    start = threading.Barrier(writers + 1)

    def write(worker: int) -> None:
        start.wait()
        for i in range(per_writer):
            store.append(Review(name=f"w{worker}", review=str(i)))

    def read() -> None:
        start.wait()
        for _ in range(200):
            snapshots.append(len(store.list()))

    threads = [threading.Thread(target=write, args=(w,)) for w in range(writers)]
    threads.append(threading.Thread(target=read))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    reviews = store.list()
    assert len(reviews) == writers * per_writer
    assert snapshots == sorted(snapshots)
    for worker in range(writers):
        own = [int(r.review) for r in reviews if r.name == f"w{worker}"]
        assert own == list(range(per_writer))
