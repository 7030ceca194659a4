"""
tracklog.structure — Split and merge over a feature collection.

Both operators are pure: they take a GeoJSON-shaped FeatureCollection
and return a new one, leaving the input untouched.  Features have no
identity besides their position, so the operators are defined purely
in terms of indices.

SPLIT(idx, p):
    features[idx] keeps coordinates[0:p] and all of its properties.
    A new feature holding coordinates[p:] is inserted at idx + 1 with
    properties {DistanceMeters: 0} and nothing else.

MERGE(indices):
    The features at `indices` are concatenated in the order given.
    They are removed from the collection in ascending index order and
    the merged feature is inserted at indices[0] (a pre-removal index).
    Properties are the union in the given order, later keys winning,
    except DistanceMeters, which is summed.

Both conserve the total number of coordinates.
"""

from typing import Any, Sequence

from .errors import IndexOutOfRange, MalformedOperation, PointOutOfRange


DISTANCE_KEY = "DistanceMeters"
LINESTRING = "LineString"

Feature = dict[str, Any]
FeatureCollection = dict[str, Any]


def _is_index(value) -> bool:
    # bool is an int subclass; True is not a feature index
    return isinstance(value, int) and not isinstance(value, bool)


def check_feature_index(features: Sequence[Feature], idx) -> None:
    if not _is_index(idx) or not 0 <= idx < len(features):
        raise IndexOutOfRange(
            f"feature index {idx!r} out of range for {len(features)} features"
        )


def coordinates_of(feature: Feature) -> list:
    return feature["geometry"]["coordinates"]


def make_feature(properties: dict, coordinates: list) -> Feature:
    """Build a LineString feature."""
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": LINESTRING, "coordinates": coordinates},
    }


def with_coordinates(feature: Feature, coordinates: list) -> Feature:
    """Copy of `feature` with its geometry coordinates swapped out."""
    updated = dict(feature)
    updated["geometry"] = {**feature["geometry"], "coordinates": coordinates}
    return updated


def split(collection: FeatureCollection, idx: int, point_idx: int) -> FeatureCollection:
    """Split feature `idx` in two before coordinate `point_idx`."""
    features = list(collection["features"])
    check_feature_index(features, idx)

    coords = coordinates_of(features[idx])
    if not _is_index(point_idx) or not 0 < point_idx < len(coords):
        raise PointOutOfRange(
            f"split point {point_idx!r} out of range for feature {idx} "
            f"with {len(coords)} coordinates"
        )

    features[idx] = with_coordinates(features[idx], list(coords[:point_idx]))
    features.insert(idx + 1, make_feature({DISTANCE_KEY: 0}, list(coords[point_idx:])))
    return {**collection, "features": features}


def merge(collection: FeatureCollection, indices: Sequence[int]) -> FeatureCollection:
    """Merge the features at `indices`, in the given order, into one."""
    features = list(collection["features"])
    indices = list(indices)
    if not indices:
        raise MalformedOperation("merge needs at least one feature index")
    for idx in indices:
        check_feature_index(features, idx)
    if len(set(indices)) != len(indices):
        raise MalformedOperation(f"merge indices must be distinct, got {indices}")

    in_order = [features[idx] for idx in indices]

    # Ascending order; every earlier removal shifts later indices left by one
    for removed, idx in enumerate(sorted(indices)):
        del features[idx - removed]

    properties: dict[str, Any] = {}
    distance = 0
    coordinates: list = []
    for feature in in_order:
        props = feature.get("properties") or {}
        properties.update(props)
        distance += props.get(DISTANCE_KEY) or 0
        coordinates.extend(coordinates_of(feature))
    properties[DISTANCE_KEY] = distance

    # list.insert clamps, so a pre-removal index past the end appends
    features.insert(indices[0], make_feature(properties, coordinates))
    return {**collection, "features": features}
