"""
tracklog.core — Coordinate sequence diff / patch
=================================================

§1  THE PROBLEM
───────────────

A track is an ordered sequence of coordinates.  When a user drags,
adds or removes vertices on the map, the editor receives the whole new
sequence.  Storing whole sequences in the history would make the log
as large as the data, so instead every geometry edit is recorded as a
minimal EDIT SCRIPT: a list of Insert / Delete / Replace operations
that turns the previous sequence into the new one.

    diff([[0,0], [1,1], [2,2]], [[0,0], [9,9], [2,2]])
        → [Replace([9, 9], position=2)]


§2  EDIT OPERATIONS
───────────────────

    Insert(value, position)    insert value after source element `position`
    Delete(position)           delete source element `position`
    Replace(value, position)   overwrite source element `position`

Positions are 1-BASED and always refer to the ORIGINAL source
sequence, never to the partially edited one.  Insert(v, 0) inserts
before the first element.

Coordinates are compared by exact value (after normalising to tuples,
so [1, 2] and (1, 2) are the same coordinate).  No geographic
tolerance is applied.


§3  THE DIFF
────────────

Classic Levenshtein DP over coordinates with unit costs:

    D[i][0] = i
    D[0][j] = j
    D[i][j] = D[i-1][j-1]                                  if aᵢ = bⱼ
            = 1 + min(D[i-1][j-1], D[i-1][j], D[i][j-1])   otherwise

Trace back from (m, n) to (0, 0):

    • Diagonal when D[i-1][j-1] is ≤ D[i][j], D[i-1][j] and D[i][j-1].
      Emit Replace(bⱼ, i) iff D[i-1][j-1] = D[i][j] - 1; equal cost
      means the coordinates match and nothing is emitted.
    • Otherwise Delete(i) when D[i-1][j] ≤ D[i][j-1] or j = 0.
    • Otherwise Insert(bⱼ, i).

The trace-back collects ops right-to-left; they are reversed so the
script reads in application order.


§4  THE PATCH AND ITS OFFSET
────────────────────────────

Because positions are expressed against the original sequence, the
applier keeps a running `offset` while it walks the script:

    Delete(p)      remove index p - 1 - offset;   offset += 1
    Replace(v, p)  overwrite index p - 1 - offset
    Insert(v, p)   insert before index p - offset; offset -= 1

Every prior deletion shifts later original positions one slot left,
every prior insertion one slot right.  This convention is what makes
apply(a, diff(a, b)) == b hold for scripts that mix all three kinds;
changing either side of it breaks the round trip.
"""

from dataclasses import dataclass
from typing import Any, Sequence, Union

from .errors import MalformedScript, UnknownOperationKind


CoordinateTuple = Sequence[float]


# ═══════════════════════════════════════════════════════════════════
#  EDIT OPERATIONS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Insert:
    """Insert `value` after original element `position` (0 = at the start)."""
    value: Any
    position: int


@dataclass(frozen=True, slots=True)
class Delete:
    """Remove original element `position`."""
    position: int


@dataclass(frozen=True, slots=True)
class Replace:
    """Overwrite original element `position` with `value`."""
    value: Any
    position: int


EditOp = Union[Insert, Delete, Replace]


def _key(coord: CoordinateTuple) -> tuple:
    return tuple(coord)


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def _cost_table(source: Sequence[CoordinateTuple],
                target: Sequence[CoordinateTuple]) -> list[list[int]]:
    a = [_key(c) for c in source]
    b = [_key(c) for c in target]
    m, n = len(a), len(b)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j - 1], dp[i - 1][j], dp[i][j - 1])
    return dp


def edit_distance(source: Sequence[CoordinateTuple],
                  target: Sequence[CoordinateTuple]) -> int:
    """Minimum number of unit edits turning `source` into `target`."""
    return _cost_table(source, target)[len(source)][len(target)]


def diff(source: Sequence[CoordinateTuple],
         target: Sequence[CoordinateTuple]) -> list[EditOp]:
    """
    Compute the edit script that transforms `source` into `target`.

    The result satisfies:
        apply(source, diff(source, target)) == target
        diff(s, s) == []

    Positions in the returned ops are 1-based indices into `source`.
    """
    dp = _cost_table(source, target)

    ops: list[EditOp] = []
    i, j = len(source), len(target)
    while i > 0 or j > 0:
        if i > 0 and j > 0:
            diag = dp[i - 1][j - 1]
            if diag <= dp[i][j] and diag <= dp[i - 1][j] and diag <= dp[i][j - 1]:
                if diag == dp[i][j] - 1:
                    ops.append(Replace(target[j - 1], i))
                i -= 1
                j -= 1
                continue

        if i > 0 and (j == 0 or dp[i - 1][j] <= dp[i][j - 1]):
            ops.append(Delete(i))
            i -= 1
        else:
            ops.append(Insert(target[j - 1], i))
            j -= 1

    ops.reverse()
    return ops


# ═══════════════════════════════════════════════════════════════════
#  APPLY (patch)
# ═══════════════════════════════════════════════════════════════════

def apply(source: Sequence[CoordinateTuple], script: Sequence[EditOp]) -> list:
    """
    Replay an edit script against `source` and return the new sequence.

    `source` is not modified.  Raises MalformedScript as soon as an op
    points outside the sequence (after offset correction) or carries a
    non-integer position; nothing is returned for a partially applied
    script.
    """
    result = list(source)
    offset = 0

    for op in script:
        if isinstance(op, (Delete, Replace, Insert)) and (
                isinstance(op.position, bool) or not isinstance(op.position, int)):
            raise MalformedScript(f"position must be an integer, got {op.position!r}")
        if isinstance(op, Delete):
            index = op.position - 1 - offset
            if not 0 <= index < len(result):
                raise MalformedScript(
                    f"delete at position {op.position} out of range "
                    f"(offset {offset}, length {len(result)})"
                )
            del result[index]
            offset += 1
        elif isinstance(op, Replace):
            index = op.position - 1 - offset
            if not 0 <= index < len(result):
                raise MalformedScript(
                    f"replace at position {op.position} out of range "
                    f"(offset {offset}, length {len(result)})"
                )
            result[index] = op.value
        elif isinstance(op, Insert):
            index = op.position - offset
            if not 0 <= index <= len(result):
                raise MalformedScript(
                    f"insert at position {op.position} out of range "
                    f"(offset {offset}, length {len(result)})"
                )
            result.insert(index, op.value)
            offset -= 1
        else:
            raise UnknownOperationKind(type(op).__name__)

    return result


patch = apply
