"""
tracklog.lineage — Lineage depth of each feature through the history.

The history view draws the log as a tree: one root, one node per
initial feature, and a new level every time a feature is edited, split
or merged.  Sizing that tree needs no geometry, only the initial
feature count and, per operation, its kind and the indices it touches:

    Edit(i)          depth[i] += 1
    Split(i, _)      depth[i] and the new depth[i + 1] become depth[i] + 1
    Merge(indices)   the merged feature gets max(depth[k] for k) + 1 and
                     takes position indices[0], exactly like the
                     structural merge, so positions stay in step with
                     the replayed collection
"""

from typing import Any, Iterable

from . import formats
from .errors import MalformedOperation, UnknownOperationKind
from .operations import Edit, Merge, Operation, Split
from .structure import check_feature_index


def touched_indices(op: Operation) -> tuple[int, ...]:
    """Feature indices (in the state before `op`) that `op` reads."""
    if isinstance(op, (Edit, Split)):
        return (op.feature_index,)
    if isinstance(op, Merge):
        return op.feature_indices
    raise UnknownOperationKind(type(op).__name__)


def depths(initial_count: int, log: Iterable[Any]) -> list[int]:
    """
    Lineage depth of every feature after replaying `log`.

    Log entries may be Operations or their saved {"name", "args"} form.
    """
    nodes = [0] * initial_count
    for entry in log:
        op = formats.as_operation(entry)
        for idx in touched_indices(op):
            check_feature_index(nodes, idx)

        if isinstance(op, Edit):
            nodes[op.feature_index] += 1
        elif isinstance(op, Split):
            depth = nodes[op.feature_index] + 1
            nodes[op.feature_index] = depth
            nodes.insert(op.feature_index + 1, depth)
        else:
            indices = op.feature_indices
            if not indices or len(set(indices)) != len(indices):
                raise MalformedOperation(f"merge indices must be distinct, got {list(indices)}")
            deepest = max(nodes[idx] for idx in indices)
            for removed, idx in enumerate(sorted(indices)):
                del nodes[idx - removed]
            nodes.insert(indices[0], deepest + 1)
    return nodes


def tree_depth(initial_count: int, log: Iterable[Any]) -> int:
    """Number of levels in the history tree, root and initial row included."""
    return 2 + max(depths(initial_count, log), default=0)
