"""Semaphores, locks and Mesa-style condition variables for threads."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any


class Semaphore:
    """A counting semaphore whose value is never negative.

    ``acquire`` waits until the value is positive and then decrements it;
    ``release`` increments it and wakes one waiter, if any.
    """

    def __init__(self, name: str, initial_value: int) -> None:
        if initial_value < 0:
            raise ValueError("semaphore initial value must be non-negative")
        self.name = name
        self._value = initial_value
        self._cond = threading.Condition(threading.Lock())

    def acquire(self) -> None:
        """Wait until the value is positive, then decrement it."""
        with self._cond:
            while self._value == 0:
                self._cond.wait()
            self._value -= 1

    def release(self) -> None:
        """Increment the value, waking a waiting thread if there is one."""
        with self._cond:
            self._value += 1
            self._cond.notify()

    def __repr__(self) -> str:
        return f"Semaphore({self.name!r})"


class Lock:
    """A mutual-exclusion lock that remembers which thread holds it.

    Only the holding thread may release it, and a thread may not acquire
    a lock it already holds.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._owner: int | None = None
        self._cond = threading.Condition(threading.Lock())

    def acquire(self) -> None:
        """Wait until the lock is free, then take it."""
        me = threading.get_ident()
        with self._cond:
            if self._owner == me:
                raise RuntimeError(f"lock {self.name!r} already held by this thread")
            while self._owner is not None:
                self._cond.wait()
            self._owner = me

    def release(self) -> None:
        """Free the lock, waking a thread waiting to acquire it."""
        with self._cond:
            if self._owner != threading.get_ident():
                raise RuntimeError(f"lock {self.name!r} not held by this thread")
            self._owner = None
            self._cond.notify()

    def is_held_by_current_thread(self) -> bool:
        """Return True if the calling thread holds this lock."""
        with self._cond:
            return self._owner == threading.get_ident()

    def __enter__(self) -> Lock:
        self.acquire()
        return self

    def __exit__(self, *args: Any) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Lock({self.name!r})"


class Condition:
    """A condition variable with Mesa semantics.

    Every operation must be made while holding the lock passed to it, and
    all operations on one condition must use the same lock. A woken thread
    re-acquires the lock inside ``wait`` before returning, so other threads
    may run in between; waiters should re-check their predicate in a loop.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock: Lock | None = None
        self._waiters: deque[threading.Event] = deque()

    def _check(self, condition_lock: Lock) -> None:
        if not condition_lock.is_held_by_current_thread():
            raise RuntimeError(
                f"condition {self.name!r} used without holding its lock"
            )
        if self._lock is None:
            self._lock = condition_lock
        elif self._lock is not condition_lock:
            raise ValueError(f"condition {self.name!r} used with a different lock")

    def wait(self, condition_lock: Lock) -> None:
        """Release the lock, sleep until signalled, then re-acquire it."""
        self._check(condition_lock)
        event = threading.Event()
        self._waiters.append(event)
        condition_lock.release()
        event.wait()
        condition_lock.acquire()

    def signal(self, condition_lock: Lock) -> None:
        """Wake the longest-waiting thread, if any."""
        self._check(condition_lock)
        if self._waiters:
            self._waiters.popleft().set()

    def broadcast(self, condition_lock: Lock) -> None:
        """Wake every waiting thread."""
        self._check(condition_lock)
        while self._waiters:
            self._waiters.popleft().set()

    def __repr__(self) -> str:
        return f"Condition({self.name!r})"