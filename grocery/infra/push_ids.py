"""Chronologically sortable unique keys, in the format realtime database clients generate locally.

A key is 8 characters of millisecond timestamp followed by 12 random characters.
Keys created within the same millisecond reuse the random tail incremented by one,
so they still sort in creation order.
"""
import secrets
import time
from threading import Lock

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    def __init__(self, clock=None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last_ms = -1
        self._last_rand = [0] * 12
        self._lock = Lock()

    def __call__(self) -> str:
        with self._lock:
            now = self._clock()
            duplicate = now == self._last_ms
            self._last_ms = now

            ts_chars = []
            for _ in range(8):
                ts_chars.append(PUSH_CHARS[now % 64])
                now //= 64
            if now:
                raise ValueError("timestamp does not fit a push id")

            if not duplicate:
                self._last_rand = [secrets.randbelow(64) for _ in range(12)]
            else:
                i = 11
                while i >= 0 and self._last_rand[i] == 63:
                    self._last_rand[i] = 0
                    i -= 1
                if i >= 0:
                    self._last_rand[i] += 1
            return ''.join(reversed(ts_chars)) + ''.join(PUSH_CHARS[r] for r in self._last_rand)


new_push_id = PushIdGenerator()

__all__ = ['PushIdGenerator', 'new_push_id', 'PUSH_CHARS']
