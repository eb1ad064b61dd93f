"""Viewer Registry — per-viewer state with a per-viewer lock.

Invariants:
    - locked() is the only way to mutate a ViewerState
    - Unknown viewer ids get a default ViewerState on first touch (never "not found")
    - Lock is re-entrant: the activation watcher may run inside an intent expression
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from pairgate.core.viewer_state import ViewerState


class ViewerRegistry:
    def __init__(self):
        self._states: dict[str, ViewerState] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _entry(self, viewer_id: str) -> tuple[ViewerState, threading.RLock]:
        with self._guard:
            state = self._states.get(viewer_id)
            if state is None:
                state = self._states[viewer_id] = ViewerState(viewer_id=viewer_id)
                self._locks[viewer_id] = threading.RLock()
            return state, self._locks[viewer_id]

    @contextmanager
    def locked(self, viewer_id: str) -> Iterator[ViewerState]:
        state, lock = self._entry(viewer_id)
        with lock:
            yield state

    def all_states(self) -> list[ViewerState]:
        with self._guard:
            return list(self._states.values())
