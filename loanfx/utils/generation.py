"""Monotonic generation tokens for superseding async requests."""
import itertools


class GenerationCounter:
    """Issues increasing tokens; only the newest token is current.

    A result tagged with an older token belongs to a superseded request
    and must be dropped by its owner.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        self._current = next(self._counter)
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current
