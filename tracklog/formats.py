"""
tracklog.formats — Convert between JSON-shaped data and history types.

Supported conversions:
    • Edit ops   ↔ {"name": "insert"|"delete"|"replace", "args": [...]}
    • Operations ↔ {"name": "edit"|"split"|"merge", "args": ...}
    • Operation logs ↔ JSON arrays (a JSON null loads as the empty log)
    • GeoJSON FeatureCollection text → validated collection dict

This is the only place where tags arrive as strings; everything past
it works on the closed set of dataclasses.
"""

import json
from typing import Any, Optional

from .core import Delete, EditOp, Insert, Replace
from .errors import MalformedOperation, UnknownOperationKind
from .operations import Edit, Merge, Operation, Split
from .structure import FeatureCollection


def _tagged(obj: Any) -> tuple[str, Any]:
    if not isinstance(obj, dict) or "name" not in obj or "args" not in obj:
        raise MalformedOperation(f"expected {{'name', 'args'}} object, got {obj!r}")
    return obj["name"], obj["args"]


def _as_index(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedOperation(f"{what} must be an integer, got {value!r}")
    return value


def _args_list(args: Any, arity: int, name: str) -> list:
    if not isinstance(args, list) or len(args) != arity:
        raise MalformedOperation(f"{name} takes {arity} argument(s), got {args!r}")
    return args


# ═══════════════════════════════════════════════════════════════════
#  EDIT OPS
# ═══════════════════════════════════════════════════════════════════

def edit_op_from_python(obj: Any) -> EditOp:
    """Convert a {"name", "args"} dict into an edit op."""
    name, args = _tagged(obj)
    if name == "insert":
        value, position = _args_list(args, 2, name)
        return Insert(value, _as_index(position, "insert position"))
    if name == "delete":
        (position,) = _args_list(args, 1, name)
        return Delete(_as_index(position, "delete position"))
    if name == "replace":
        value, position = _args_list(args, 2, name)
        return Replace(value, _as_index(position, "replace position"))
    raise UnknownOperationKind(name)


def edit_op_to_python(op: EditOp) -> dict:
    if isinstance(op, Insert):
        return {"name": "insert", "args": [op.value, op.position]}
    if isinstance(op, Delete):
        return {"name": "delete", "args": [op.position]}
    if isinstance(op, Replace):
        return {"name": "replace", "args": [op.value, op.position]}
    raise UnknownOperationKind(type(op).__name__)


# ═══════════════════════════════════════════════════════════════════
#  OPERATIONS
# ═══════════════════════════════════════════════════════════════════

def operation_from_python(obj: Any) -> Operation:
    """
    Convert a saved log entry into an Operation.

    Mapping:
        {"name": "edit",  "args": {"idx": i, "edit": [...]}}  → Edit
        {"name": "split", "args": {"idx": i, "pointIdx": p}}  → Split
        {"name": "merge", "args": [i, j, ...]}                → Merge

    Raises UnknownOperationKind for any other name and
    MalformedOperation when the arguments have the wrong shape.
    """
    name, args = _tagged(obj)
    if name == "edit":
        if not isinstance(args, dict) or not isinstance(args.get("edit"), list):
            raise MalformedOperation(f"edit expects {{'idx', 'edit'}}, got {args!r}")
        return Edit(
            _as_index(args.get("idx"), "edit idx"),
            [edit_op_from_python(e) for e in args["edit"]],
        )
    if name == "split":
        if not isinstance(args, dict):
            raise MalformedOperation(f"split expects {{'idx', 'pointIdx'}}, got {args!r}")
        return Split(
            _as_index(args.get("idx"), "split idx"),
            _as_index(args.get("pointIdx"), "split pointIdx"),
        )
    if name == "merge":
        if not isinstance(args, list):
            raise MalformedOperation(f"merge expects a list of indices, got {args!r}")
        return Merge([_as_index(i, "merge index") for i in args])
    raise UnknownOperationKind(name)


def operation_to_python(op: Operation) -> dict:
    if isinstance(op, Edit):
        return {
            "name": "edit",
            "args": {
                "idx": op.feature_index,
                "edit": [edit_op_to_python(e) for e in op.script],
            },
        }
    if isinstance(op, Split):
        return {"name": "split", "args": {"idx": op.feature_index, "pointIdx": op.point_index}}
    if isinstance(op, Merge):
        return {"name": "merge", "args": list(op.feature_indices)}
    raise UnknownOperationKind(type(op).__name__)


def as_operation(obj: Any) -> Operation:
    """Pass Operations through; decode anything else as a saved entry."""
    if isinstance(obj, (Edit, Split, Merge)):
        return obj
    return operation_from_python(obj)


# ═══════════════════════════════════════════════════════════════════
#  LOGS
# ═══════════════════════════════════════════════════════════════════

def log_from_python(obj: Optional[list]) -> list[Operation]:
    if obj is None:
        return []
    if not isinstance(obj, list):
        raise MalformedOperation(f"operation log must be a list, got {type(obj).__name__}")
    return [operation_from_python(entry) for entry in obj]


def log_to_python(log: list[Operation]) -> list[dict]:
    return [operation_to_python(op) for op in log]


def log_from_json(text: Optional[str]) -> list[Operation]:
    """Parse a stored log.  Missing text or JSON null is the empty log."""
    if text is None:
        return []
    return log_from_python(json.loads(text))


def log_to_json(log: list[Operation], **kwargs) -> str:
    return json.dumps(log_to_python(log), **kwargs)


# ═══════════════════════════════════════════════════════════════════
#  FEATURE COLLECTIONS
# ═══════════════════════════════════════════════════════════════════

def validate_collection(obj: Any) -> FeatureCollection:
    """Check the GeoJSON shape the engine relies on and return `obj`."""
    if not isinstance(obj, dict) or obj.get("type") != "FeatureCollection":
        raise ValueError("expected a GeoJSON FeatureCollection")
    features = obj.get("features")
    if not isinstance(features, list):
        raise ValueError("FeatureCollection.features must be a list")
    for idx, feature in enumerate(features):
        geometry = feature.get("geometry") if isinstance(feature, dict) else None
        if not isinstance(geometry, dict) or not isinstance(geometry.get("coordinates"), list):
            raise ValueError(f"feature {idx} has no geometry.coordinates list")
    return obj


def collection_from_json(text: str) -> FeatureCollection:
    return validate_collection(json.loads(text))


def collection_to_json(collection: FeatureCollection, **kwargs) -> str:
    return json.dumps(collection, **kwargs)
