"""
tracklog.operations — History operations and replay.

The operation log is a list of three kinds of operation:

    Edit(feature_index, script)     apply an edit script to one feature
    Split(feature_index, point_index)
    Merge(feature_indices)          indices in caller order, primary first

The current state is always  replay(base, log): a left fold of the log
over a deep copy of the base collection.  Replay keeps no per-operation
cache; it is recomputed from scratch every time, which keeps it a pure
function of (base, log).
"""

import copy
from dataclasses import dataclass
from typing import Sequence, Union

from .core import EditOp, apply
from .errors import UnknownOperationKind
from .structure import (
    FeatureCollection,
    check_feature_index,
    coordinates_of,
    merge,
    split,
    with_coordinates,
)


@dataclass(frozen=True, slots=True)
class Edit:
    feature_index: int
    script: tuple[EditOp, ...]

    def __post_init__(self):
        object.__setattr__(self, "script", tuple(self.script))


@dataclass(frozen=True, slots=True)
class Split:
    feature_index: int
    point_index: int


@dataclass(frozen=True, slots=True)
class Merge:
    feature_indices: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "feature_indices", tuple(self.feature_indices))


Operation = Union[Edit, Split, Merge]


def apply_operation(state: FeatureCollection, op: Operation) -> FeatureCollection:
    """Apply a single operation, returning a new collection."""
    if isinstance(op, Edit):
        features = list(state["features"])
        check_feature_index(features, op.feature_index)
        feature = features[op.feature_index]
        features[op.feature_index] = with_coordinates(
            feature, apply(coordinates_of(feature), op.script)
        )
        return {**state, "features": features}
    if isinstance(op, Split):
        return split(state, op.feature_index, op.point_index)
    if isinstance(op, Merge):
        return merge(state, op.feature_indices)
    raise UnknownOperationKind(type(op).__name__)


def replay(base: FeatureCollection, log: Sequence[Operation]) -> FeatureCollection:
    """
    Reconstruct the current state from the base collection and the log.

    `base` is never modified.  The first failing operation aborts the
    whole replay and its error propagates; no partial state is returned.
    """
    state = copy.deepcopy(base)
    for op in log:
        state = apply_operation(state, op)
    return state
