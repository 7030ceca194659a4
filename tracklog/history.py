"""
tracklog.history — The operation log engine.

An Engine owns three things:

    base    the FeatureCollection it was created with, deep-copied and
            never modified afterwards
    log     the append-only list of operations (undo pops the last one)
    state   replay(base, log), recomputed in full after every mutation

Every mutation builds a candidate log, replays it, and only then commits
log and state together and notifies subscribers.  An operation that does
not apply raises from the mutating call and is never appended, so the
log and the cached state are either both updated or both untouched.

The engine is single-writer and synchronous: subscribers are called in
registration order before the mutating call returns.
"""

import copy
import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from . import formats
from .core import EditOp
from .errors import TrackLogError
from .operations import Edit, Merge, Operation, Split, replay
from .structure import FeatureCollection

logger = logging.getLogger(__name__)

Listener = Callable[[FeatureCollection], Any]


class Engine:
    """Edit history over a feature collection."""

    def __init__(self, base: FeatureCollection, saved_log: Optional[Iterable[Any]] = None):
        self._base = copy.deepcopy(base)
        log = [copy.deepcopy(formats.as_operation(op)) for op in (saved_log or [])]
        # A saved log that no longer applies fails here, not on first edit
        self._state = replay(self._base, log)
        self._log = log
        self._listeners: list[tuple[object, Listener]] = []
        logger.debug("Engine created: %d features, %d saved operations",
                     len(self._base["features"]), len(log))

    @classmethod
    def from_json(cls, collection_text: str, saved_log_text: Optional[str] = None) -> "Engine":
        """Rebuild a session from a dataset and the log stored for it."""
        return cls(formats.collection_from_json(collection_text),
                   formats.log_from_json(saved_log_text))

    # ─── read access ──────────────────────────────────────────────

    @property
    def log(self) -> tuple[Operation, ...]:
        return tuple(copy.deepcopy(self._log))

    @property
    def base(self) -> FeatureCollection:
        return copy.deepcopy(self._base)

    @property
    def initial_feature_count(self) -> int:
        return len(self._base["features"])

    def current_state(self) -> FeatureCollection:
        """The most recently replayed state (a copy the caller may keep)."""
        return copy.deepcopy(self._state)

    last = current_state

    def serialize(self) -> list[dict]:
        """The log as JSON-ready data, replayable against the same base."""
        return copy.deepcopy(formats.log_to_python(self._log))

    def to_json(self, **kwargs) -> str:
        return formats.log_to_json(self._log, **kwargs)

    # ─── mutations ────────────────────────────────────────────────

    def edit(self, feature_index: int, script: Sequence[EditOp]) -> FeatureCollection:
        return self._append(Edit(feature_index, script))

    def split(self, feature_index: int, point_index: int) -> FeatureCollection:
        return self._append(Split(feature_index, point_index))

    def merge(self, feature_indices: Sequence[int]) -> FeatureCollection:
        """Merge features; the first index is the primary one and sets the position."""
        return self._append(Merge(feature_indices))

    def undo(self) -> FeatureCollection:
        """Drop the last operation.  Undo on an empty log does nothing."""
        if not self._log:
            return self.current_state()
        return self._commit(self._log[:-1])

    def update(self) -> FeatureCollection:
        """Replay the current log and notify subscribers."""
        return self._commit(list(self._log))

    def _append(self, op: Operation) -> FeatureCollection:
        # Ops carry caller-owned coordinate lists; the log keeps its own
        return self._commit(self._log + [copy.deepcopy(op)])

    def _commit(self, log: list[Operation]) -> FeatureCollection:
        try:
            state = replay(self._base, log)
        except TrackLogError as exc:
            logger.warning("Rejected history change (last operation %r): %s",
                           log[-1] if log else None, exc)
            raise
        self._log = log
        self._state = state
        logger.debug("Replayed %d operations into %d features",
                     len(log), len(state["features"]))
        self._notify()
        return self.current_state()

    # ─── subscribers ──────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener(state)` after every successful replay.

        Returns a function that removes exactly this registration; calling
        it more than once is harmless.
        """
        entry = (object(), listener)
        self._listeners.append(entry)
        logger.debug("Subscriber added (%d total)", len(self._listeners))

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)
                logger.debug("Subscriber removed (%d left)", len(self._listeners))

        return unsubscribe

    def _notify(self) -> None:
        # Snapshot: listeners may unsubscribe while being called
        for _, listener in list(self._listeners):
            listener(copy.deepcopy(self._state))
