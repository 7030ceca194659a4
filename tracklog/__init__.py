"""
tracklog — Edit history for map tracks
======================================

An append-only operation log over a collection of LineString features
(foot-path tracks), with a pure replay function and a coordinate diff
that turns any geometry edit into a small replayable script.

    diff([[0,0], [1,1], [2,2]], [[0,0], [9,9], [2,2]])
        → [Replace([9, 9], position=2)]

    engine = Engine(collection)
    engine.split(0, 2)          # feature 0 → features 0 and 1
    engine.merge([1, 0])        # back to one feature, primary first
    engine.undo()               # state as it was after the split

State is always replay(base, log): the base collection is never
modified and the log is the only thing that needs to be persisted.
"""

from tracklog.core import (
    # Edit scripts
    CoordinateTuple,
    EditOp,
    Insert,
    Delete,
    Replace,
    diff,
    apply,
    patch,
    edit_distance,
)
from tracklog.errors import (
    TrackLogError,
    UnknownOperationKind,
    MalformedOperation,
    IndexOutOfRange,
    PointOutOfRange,
    MalformedScript,
)
from tracklog.structure import DISTANCE_KEY, split, merge
from tracklog.operations import Operation, Edit, Split, Merge, replay
from tracklog.formats import (
    operation_from_python, operation_to_python,
    log_from_json, log_to_json, collection_from_json,
)
from tracklog.history import Engine
from tracklog.lineage import depths, tree_depth, touched_indices

__version__ = "0.1.0"
__all__ = [
    "CoordinateTuple", "EditOp", "Insert", "Delete", "Replace",
    "diff", "apply", "patch", "edit_distance",
    "TrackLogError", "UnknownOperationKind", "MalformedOperation",
    "IndexOutOfRange", "PointOutOfRange", "MalformedScript",
    "DISTANCE_KEY", "split", "merge",
    "Operation", "Edit", "Split", "Merge", "replay",
    "operation_from_python", "operation_to_python",
    "log_from_json", "log_to_json", "collection_from_json",
    "Engine",
    "depths", "tree_depth", "touched_indices",
]
