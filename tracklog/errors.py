"""
tracklog.errors — Failure taxonomy for the edit-history engine.

Every error raised by the operators, the applier, replay and the
deserialisers derives from TrackLogError, and also from the builtin
exception a caller would naturally expect (ValueError / IndexError).
"""


class TrackLogError(Exception):
    """Base class for all tracklog errors."""


class UnknownOperationKind(TrackLogError, ValueError):
    """An operation or edit-op tag outside the recognised set."""

    def __init__(self, kind):
        super().__init__(f"Unknown operation kind: {kind!r}")
        self.kind = kind


class MalformedOperation(TrackLogError, ValueError):
    """A recognised operation whose arguments cannot be used."""


class IndexOutOfRange(TrackLogError, IndexError):
    """A feature index that is invalid for the state it is applied to."""


class PointOutOfRange(IndexOutOfRange):
    """A split point outside the open interval (0, len(coordinates))."""


class MalformedScript(TrackLogError, ValueError):
    """An edit script whose positions do not fit the sequence it edits."""
