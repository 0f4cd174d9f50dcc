"""Shared helper utilities for interacting with the FBX SDK."""

from __future__ import annotations

import numbers
from typing import Any, Tuple

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]
Vector4 = Tuple[float, float, float, float]


def resolve_enum_value(enum_holder: Any, target_name: str) -> Any:
    """Return an enum value by name, handling SDK layout differences.

    Autodesk regularly shuffles where enumeration members live between
    releases.  Sometimes they are attributes on the class, other times they
    are nested under helper containers such as ``EMappingMode`` or
    ``EPivotSet``.  This helper performs a best-effort lookup so callers can
    request an enum using a friendly name without needing to know the exact
    SDK flavour they are running against.
    """

    if hasattr(enum_holder, target_name):
        return getattr(enum_holder, target_name)

    for attr_name in dir(enum_holder):
        if attr_name.lower() == target_name.lower():
            return getattr(enum_holder, attr_name)

    for container_name in dir(enum_holder):
        if not container_name.startswith("E"):
            continue
        nested = getattr(enum_holder, container_name, None)
        if nested is None or not hasattr(nested, target_name):
            continue
        return getattr(nested, target_name)

    raise AttributeError(
        f"Unable to resolve enum value '{target_name}' from {enum_holder!r}"
    )


def is_real(value: Any) -> bool:
    """``True`` for ints and floats that convert to a float, ``False`` for bools and everything else."""

    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        return False
    try:
        float(value)
    except OverflowError:
        return False
    return True


def is_index(value: Any) -> bool:
    """``True`` for non-negative integers (bools excluded)."""

    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0


def vector_to_tuple(vector: Any, size: int) -> Tuple[float, ...]:
    """Convert ``FbxDouble3``/``FbxVector4``/``FbxQuaternion`` style objects into a tuple.

    SDK vectors are indexable but not always iterable, so components are read
    by position.
    """

    return tuple(float(vector[index]) for index in range(size))


def format_version(code: int) -> str:
    """Format an FBX file version code such as ``7400`` as ``"FBX 7.4"``."""

    code = int(code)
    return f"FBX {code // 1000}.{(code % 1000) // 100}"
