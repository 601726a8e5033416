"""
First-in-first-out lock

threading.Lock gives no guarantee about which waiter wins when the lock is
released. FifoLock hands the lock out in strict arrival order by issuing
tickets, so a queue of read-modify-write sequences is applied in the order
the callers asked for it.
"""
import threading


class FifoLock:
    """Ticket lock, non-reentrant"""

    def __init__(self):
        self._condition = threading.Condition()
        self._next_ticket = 0
        self._now_serving = 0

    def acquire(self):
        with self._condition:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._now_serving:
                self._condition.wait()

    def release(self):
        with self._condition:
            if self._now_serving >= self._next_ticket:
                raise RuntimeError("release unlocked FifoLock")
            self._now_serving += 1
            self._condition.notify_all()

    def locked(self) -> bool:
        with self._condition:
            return self._now_serving < self._next_ticket

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False
