"""In-memory, append-only review store shared by all request handlers."""

from __future__ import annotations

import threading
from typing import Iterable, List

from review_service.schemas import Review


class ReviewStore:
    """Ordered collection of reviews guarded by a single lock.

    The lock is held only to add elements or to copy the list, so callers of
    :meth:`list` get a snapshot they can use without further synchronisation.
    Reviews are immutable, which makes a shallow copy sufficient.
    """

    def __init__(self) -> None:
        self._reviews: List[Review] = []
        self._lock = threading.Lock()

    def append(self, review: Review) -> None:
        with self._lock:
            self._reviews.append(review)

    def extend(self, reviews: Iterable[Review]) -> None:
        """Append ``reviews`` in order under one lock acquisition."""
        items = list(reviews)
        with self._lock:
            self._reviews.extend(items)

    def list(self) -> List[Review]:
        with self._lock:
            return list(self._reviews)

    def __len__(self) -> int:
        with self._lock:
            return len(self._reviews)
