from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


LENGTH_MISMATCH_MESSAGE = "All sequences must be of the same length"


class LengthMismatchError(ValueError):
    def __init__(self, reference_length: int, query_length: int):
        super().__init__(LENGTH_MISMATCH_MESSAGE)
        self.reference_length = reference_length
        self.query_length = query_length


@dataclass(frozen=True)
class PositionComparison:
    index: int
    reference_symbol: str
    query_symbol: str
    is_match: bool


@dataclass(frozen=True)
class CompareResult:
    reference: str
    query: str
    matches: Tuple[bool, ...]
    mismatch_indices: Tuple[int, ...] = ()
    identity: float = 0.0

    @property
    def length(self) -> int:
        return len(self.reference)

    def position(self, index: int) -> PositionComparison:
        if index < 0 or index >= self.length:
            raise IndexError(f"index must be within [0, {self.length})")
        return PositionComparison(
            index,
            self.reference[index],
            self.query[index],
            self.matches[index],
        )

    def positions(self) -> Iterator[PositionComparison]:
        for idx in range(self.length):
            yield self.position(idx)


def compare(reference: str, query: str) -> CompareResult:
    """Classify every query position as match/mismatch against the reference.

    The match mask also yields the mismatch indices and the identity
    fraction, so both are computed once here.
    """

    if len(reference) != len(query):
        raise LengthMismatchError(len(reference), len(query))

    if not reference:
        return CompareResult(reference="", query="", matches=())

    mask = np.array(list(reference), dtype="U1") == np.array(list(query), dtype="U1")
    return CompareResult(
        reference=reference,
        query=query,
        matches=tuple(mask.tolist()),
        mismatch_indices=tuple(int(idx) for idx in np.flatnonzero(~mask)),
        identity=float(mask.mean()),
    )
