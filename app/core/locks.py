import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLock:
    """One mutex per key, alive only while someone holds or waits on it.

    Cart mutations run in worker threads (sync routes and the websocket
    dispatcher's thread pool calls), so these are thread locks.
    """

    def __init__(self) -> None:
        # key -> [lock, number of holders and waiters]
        self._locks: dict[Hashable, list] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
