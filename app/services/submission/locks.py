from contextlib import contextmanager
import threading
from typing import Dict, Generator


class KeyedLock:
    """
    In-process lock per key. Serializes submissions for the same CCN and CRID so the
    existence check and the patient create cannot interleave within this process.
    It does not protect against other processes writing to the same registry.

    A key's lock only lives while someone holds or waits for it.
    """

    def __init__(self) -> None:
        self.mutexes: Dict[str, threading.Lock] = {}
        self.holders: Dict[str, int] = {}
        self.registry_lock = threading.Lock()

    @contextmanager
    def hold(self, key: str) -> Generator[None, None, None]:
        lock = self.__checkout(key)
        try:
            with lock:
                yield
        finally:
            self.__release(key)

    def __checkout(self, key: str) -> threading.Lock:
        with self.registry_lock:
            lock = self.mutexes.get(key)
            if lock is None:
                lock = threading.Lock()
                self.mutexes[key] = lock
            self.holders[key] = self.holders.get(key, 0) + 1
            return lock

    def __release(self, key: str) -> None:
        with self.registry_lock:
            self.holders[key] -= 1
            if self.holders[key] == 0:
                del self.holders[key]
                del self.mutexes[key]
