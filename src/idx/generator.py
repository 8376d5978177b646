"""ID generator."""

import threading
import time
from collections.abc import Callable

from ulid import ULID

from idx.identifier import ID
from idx.validator import BINARY_SIZE

_TIMESTAMP_SIZE = 6
_MAX_RANDOM = b"\xff" * (BINARY_SIZE - _TIMESTAMP_SIZE)


def _ulid_bytes() -> bytes:
    return ULID().bytes


class IDGenerator:
    """Monotonic, thread-safe ID generator.

    Values come from ``source`` (python-ulid by default). Every value sorts
    strictly after the previous one: when the source returns a value that
    does not (same millisecond, or the clock stepped back), the previous
    value plus one is used instead.
    """

    def __init__(self, source: Callable[[], bytes] | None = None):
        """Initialize generator.

        Args:
            source: No-argument callable returning 16 fresh bytes
        """
        self.source = source or _ulid_bytes
        self._lock = threading.Lock()
        self._last: bytes | None = None

    def generate(self) -> ID:
        """Generate an ID.

        Returns:
            New ID, greater than any earlier ID from this generator
        """
        with self._lock:
            while True:
                raw = self.source()
                last = self._last
                if last is not None and raw <= last:
                    if last[_TIMESTAMP_SIZE:] == _MAX_RANDOM:
                        # No room above last; wait for the source to pass it
                        time.sleep(0.001)
                        continue
                    raw = (int.from_bytes(last, "big") + 1).to_bytes(BINARY_SIZE, "big")
                self._last = raw
                return ID(raw)

    def generate_batch(self, count: int) -> list[ID]:
        """Generate batch of IDs.

        Args:
            count: Number of IDs to generate

        Returns:
            List of generated IDs in increasing order
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        return [self.generate() for _ in range(count)]


default_generator = IDGenerator()


def new_id() -> ID:
    """Generate an ID from the process-wide generator."""
    return default_generator.generate()
