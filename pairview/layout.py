from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from .alphabet import fill_color
from .compute import CompareResult


class Row(Enum):
    REFERENCE = "reference"
    QUERY = "query"


@dataclass(frozen=True)
class DisplayCell:
    symbol: str
    fill: Optional[str]
    row: Row


@dataclass(frozen=True)
class DisplayLine:
    row: Row
    start: int
    cells: Tuple[DisplayCell, ...]

    @property
    def end(self) -> int:
        return self.start + len(self.cells)

    @property
    def text(self) -> str:
        return "".join(cell.symbol for cell in self.cells)

    def __len__(self) -> int:
        return len(self.cells)


def chars_per_line_for_width(available_px: Optional[float], cell_width_px: float) -> int:
    """Number of whole cells that fit into the measured width.

    An unmeasured (``None``) or non-positive width yields ``0``.
    """

    if available_px is None or cell_width_px <= 0:
        return 0
    if available_px <= 0:
        return 0
    return int(math.floor(float(available_px) / float(cell_width_px)))


def line_count(length: int, chars_per_line: int) -> int:
    if chars_per_line <= 0 or length <= 0:
        return 0
    return 2 * math.ceil(length / chars_per_line)


def _reference_cells(result: CompareResult, start: int, end: int) -> Tuple[DisplayCell, ...]:
    return tuple(
        DisplayCell(symbol, fill_color(symbol), Row.REFERENCE)
        for symbol in result.reference[start:end]
    )


def _query_cells(result: CompareResult, start: int, end: int) -> Tuple[DisplayCell, ...]:
    cells = []
    for idx in range(start, end):
        symbol = result.query[idx]
        fill = None if result.matches[idx] else fill_color(symbol)
        cells.append(DisplayCell(symbol, fill, Row.QUERY))
    return tuple(cells)


def layout(result: CompareResult, chars_per_line: int) -> List[DisplayLine]:
    """Reflow both tracks into alternating reference/query display lines.

    Chunk ``k`` covers ``[k * chars_per_line, (k + 1) * chars_per_line)`` on
    both tracks. Reference cells always carry their category color; query
    cells only where they differ from the reference.
    """

    if chars_per_line <= 0:
        return []

    n = max(len(result.reference), len(result.query))
    lines: List[DisplayLine] = []
    for start in range(0, n, chars_per_line):
        end = min(start + chars_per_line, n)
        lines.append(DisplayLine(Row.REFERENCE, start, _reference_cells(result, start, end)))
        lines.append(DisplayLine(Row.QUERY, start, _query_cells(result, start, end)))
    return lines


def group_pairs(lines: Sequence[DisplayLine]) -> Iterator[Tuple[DisplayLine, DisplayLine]]:
    if len(lines) % 2:
        raise ValueError("Display lines must come in reference/query pairs")
    for idx in range(0, len(lines), 2):
        reference_line, query_line = lines[idx], lines[idx + 1]
        if reference_line.row is not Row.REFERENCE or query_line.row is not Row.QUERY:
            raise ValueError("Display lines must alternate reference and query rows")
        yield reference_line, query_line


def track_text(lines: Sequence[DisplayLine], row: Row) -> str:
    return "".join(line.text for line in lines if line.row is row)
