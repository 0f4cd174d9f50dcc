"""Flat numeric array packing for mesh attributes and transform vectors.

Mesh attributes cross the scene term boundary as one flat list of floats
(``[x1, y1, z1, x2, ...]``) and are regrouped by arity on the way back in.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..utils import is_index, is_real
from .exceptions import ArityError, MalformedInputError

SUPPORTED_ARITIES = (2, 3, 4)


def pack(groups: Iterable[Sequence[float]]) -> List[float]:
    """Concatenate fixed-arity groups into one flat list of floats."""

    flat: List[float] = []
    for group in groups:
        flat.extend(float(value) for value in group)
    return flat


def unpack(flat: Sequence[float], arity: int) -> List[Tuple[float, ...]]:
    """Split ``flat`` into tuples of ``arity`` floats.

    Raises :class:`ArityError` when the length is not a multiple of ``arity``
    and :class:`MalformedInputError` when an element is not a real number.
    """

    if arity not in SUPPORTED_ARITIES:
        raise ArityError(f"Unsupported arity {arity}; expected one of {SUPPORTED_ARITIES}")
    if isinstance(flat, (str, bytes)) or not isinstance(flat, Sequence):
        raise MalformedInputError(f"Expected a sequence of numbers, got {type(flat).__name__}")
    if len(flat) % arity != 0:
        raise ArityError(f"Sequence of length {len(flat)} is not a multiple of {arity}")

    for value in flat:
        if not is_real(value):
            raise MalformedInputError(f"Expected a number, got {value!r}")

    values = [float(value) for value in flat]
    return [tuple(values[start:start + arity]) for start in range(0, len(values), arity)]


def unpack_indices(flat: Sequence[int]) -> List[int]:
    """Validate a flat list of non-negative vertex indices."""

    if isinstance(flat, (str, bytes)) or not isinstance(flat, Sequence):
        raise MalformedInputError(f"Expected a sequence of indices, got {type(flat).__name__}")
    for value in flat:
        if not is_index(value):
            raise MalformedInputError(f"Expected a non-negative integer index, got {value!r}")
    return [int(value) for value in flat]


def unpack_faces(flat: Sequence[int], corners: int = 3) -> List[Tuple[int, ...]]:
    """Group a flat index list into faces of ``corners`` vertices each."""

    indices = unpack_indices(flat)
    if corners < 3:
        raise ArityError(f"A face needs at least 3 corners, got {corners}")
    if len(indices) % corners != 0:
        raise ArityError(f"Index list of length {len(indices)} is not a multiple of {corners}")
    return [tuple(indices[start:start + corners]) for start in range(0, len(indices), corners)]
