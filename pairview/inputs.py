from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .alphabet import is_allowed


INVALID_SYMBOL_MESSAGE = "Only amino acid symbols are allowed"


class InvalidSymbolError(ValueError):
    def __init__(self, invalid_symbols: List[str], field: Optional[str] = None):
        super().__init__(INVALID_SYMBOL_MESSAGE)
        self.invalid_symbols = invalid_symbols
        self.field = field


class RequiredFieldError(ValueError):
    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


def normalize(raw: str, field: Optional[str] = None) -> str:
    """Uppercase ``raw`` and reject it if any symbol is outside the alphabet.

    The raised :class:`InvalidSymbolError` lists the distinct offending
    characters in the order they first appear.
    """

    upper = str(raw).upper()
    invalid: List[str] = []
    for char in upper:
        if not is_allowed(char) and char not in invalid:
            invalid.append(char)
    if invalid:
        raise InvalidSymbolError(invalid, field)
    return upper


def validate_field(raw: Optional[str], field: str) -> str:
    if raw is None or raw == "":
        raise RequiredFieldError(field)
    return normalize(raw, field)


def live_filter(raw: str) -> str:
    return "".join(char for char in str(raw).upper() if is_allowed(char))


class LiveInputBuffer:
    """Text field contents as they evolve while the user types."""

    def __init__(self, value: str = "") -> None:
        self._value = live_filter(value)

    @property
    def value(self) -> str:
        return self._value

    def type(self, chars: Iterable[str]) -> str:
        for char in chars:
            self._value = live_filter(self._value + char)
        return self._value

    def set(self, value: str) -> str:
        self._value = live_filter(value)
        return self._value

    def clear(self) -> None:
        self._value = ""


def parse_fasta_pair(path: Path) -> Tuple[str, str, str, str]:
    """Read a two-record aligned FASTA as (reference, query, names...).

    The first record is the reference, the second the query. Symbols are
    returned as written; validation happens in :func:`normalize`.
    """

    names: List[str] = []
    sequences: List[List[str]] = []
    current_seq: List[str] | None = None

    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            if line.startswith(">"):
                names.append(line[1:].strip())
                current_seq = []
                sequences.append(current_seq)
            else:
                if current_seq is None:
                    raise ValueError("FASTA file must start with a header line beginning with '>'")
                current_seq.append(line)

    if len(sequences) != 2:
        raise ValueError(
            f"Expected exactly two sequences in the FASTA file, found {len(sequences)}"
        )

    reference = "".join(sequences[0])
    query = "".join(sequences[1])
    reference_name = names[0] or "Reference"
    query_name = names[1] or "Query"
    return reference, query, reference_name, query_name
