"""In-memory monitoring counters, served as JSON at /debug/vars."""

import threading
from typing import Any, Dict


class Stats:
    """Monotonic counters plus the text of the last poll error.

    One instance per app; checkers and handlers get it passed in.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._hit_count = 0
        self._poll_count = 0
        self._poll_error_count = 0
        self._poll_error = ""
        self._lookup_count = 0
        self._lookup_error_count = 0

    def inc_hit(self) -> int:
        with self._lock:
            self._hit_count += 1
            return self._hit_count

    def inc_poll(self) -> int:
        with self._lock:
            self._poll_count += 1
            return self._poll_count

    def record_poll_error(self, err: str) -> None:
        with self._lock:
            self._poll_error_count += 1
            self._poll_error = err

    def inc_lookup(self) -> int:
        with self._lock:
            self._lookup_count += 1
            return self._lookup_count

    def inc_lookup_error(self) -> int:
        with self._lock:
            self._lookup_error_count += 1
            return self._lookup_error_count

    @property
    def hit_count(self) -> int:
        with self._lock:
            return self._hit_count

    @property
    def poll_count(self) -> int:
        with self._lock:
            return self._poll_count

    @property
    def poll_error_count(self) -> int:
        with self._lock:
            return self._poll_error_count

    @property
    def poll_error(self) -> str:
        with self._lock:
            return self._poll_error

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "hitCount": self._hit_count,
                "pollCount": self._poll_count,
                "pollError": self._poll_error,
                "pollErrorCount": self._poll_error_count,
                "lookupCount": self._lookup_count,
                "lookupErrorCount": self._lookup_error_count,
            }
