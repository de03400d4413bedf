"""Published diagnostics for a workspace."""

from __future__ import annotations

import threading
from collections.abc import Callable

from verilint.lint.models import Diagnostic, DiagnosticSet

StoreListener = Callable[[DiagnosticSet], None]


class DiagnosticStore:
    """Diagnostics currently shown for a workspace, keyed by file path.

    Publishing replaces everything: entries from an earlier run are dropped
    even for files the new run does not mention. The state lock keeps
    clear-then-set atomic when runs complete on different threads; the
    publish lock is held from the change through its notification, so
    listeners see snapshots in the order the changes happened.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()  # listeners may publish again
        self._current = DiagnosticSet()
        self._listeners: list[StoreListener] = []

    def replace(self, diagnostics: DiagnosticSet) -> None:
        """Clear the store and publish one run's diagnostics."""
        self._publish(lambda _current: diagnostics.copy())

    def clear(self) -> None:
        self._publish(lambda _current: DiagnosticSet())

    def delete(self, path: str) -> None:
        """Drop one file's diagnostics, e.g. when its document is closed."""

        def without_path(current: DiagnosticSet) -> DiagnosticSet:
            remaining = DiagnosticSet()
            for file_path, diagnostics in current.items():
                if file_path == path:
                    continue
                for diagnostic in diagnostics:
                    remaining.add(diagnostic)
            return remaining

        self._publish(without_path)

    def get(self, path: str) -> list[Diagnostic]:
        with self._lock:
            return self._current.get(path)

    @property
    def files(self) -> list[str]:
        with self._lock:
            return self._current.files

    def snapshot(self) -> DiagnosticSet:
        with self._lock:
            return self._current.copy()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call listener with a snapshot after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, update: Callable[[DiagnosticSet], DiagnosticSet]) -> None:
        with self._publish_lock:
            with self._lock:
                self._current = update(self._current)
                snapshot = self._current.copy()
            for listener in list(self._listeners):
                listener(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._current)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._current
