from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .alphabet import ALLOWED_SYMBOLS, classify, fill_color
from .compute import CompareResult, LengthMismatchError, compare
from .inputs import InvalidSymbolError, RequiredFieldError, validate_field
from .layout import DisplayLine, chars_per_line_for_width, layout
from .params import ViewParams
from .render import render_bytes
from .selection import (
    COPY_SUCCESS_MESSAGE,
    ClipboardWriter,
    Notifier,
    RenderedRegion,
    SelectionCaptureBridge,
    SelectionEvents,
)

logger = logging.getLogger(__name__)

FIRST_FIELD = "first_sequence"
SECOND_FIELD = "second_sequence"


@dataclass
class ViewSession:
    token: str
    params: ViewParams
    result: Optional[CompareResult] = None
    reference_name: str = "Reference"
    query_name: str = "Query"
    available_px: Optional[float] = None
    chars_per_line: int = 0
    lines: List[DisplayLine] = field(default_factory=list)
    root_error: Optional[str] = None
    field_errors: Dict[str, str] = field(default_factory=dict)
    bridge: Optional[SelectionCaptureBridge] = None


SESSION_CACHE: Dict[str, ViewSession] = {}
MAX_SESSIONS = 32


def _trim_cache() -> None:
    while len(SESSION_CACHE) > MAX_SESSIONS:
        first_key = next(iter(SESSION_CACHE))
        unmount_selection(SESSION_CACHE.pop(first_key))


def create_session(params: Optional[ViewParams] = None) -> ViewSession:
    session = ViewSession(token=uuid.uuid4().hex, params=params or ViewParams())
    SESSION_CACHE[session.token] = session
    _trim_cache()
    return session


def get_session(token: str) -> ViewSession:
    try:
        return SESSION_CACHE[token]
    except KeyError as exc:
        raise ValueError("Unknown or expired view token") from exc


def _relayout(session: ViewSession) -> None:
    if session.result is None:
        session.lines = []
    else:
        session.lines = layout(session.result, session.chars_per_line)
    if session.bridge is not None:
        session.bridge.region = RenderedRegion.from_lines(session.lines)


def submit(
    session: ViewSession,
    first: Optional[str],
    second: Optional[str],
    *,
    reference_name: Optional[str] = None,
    query_name: Optional[str] = None,
) -> bool:
    """Validate and compare a new pair, replacing the rendered one on success.

    Errors are recorded on the session (field-scoped or root-scoped) and the
    previously rendered sequences stay in place.
    """

    session.root_error = None
    session.field_errors = {}

    normalized: Dict[str, str] = {}
    for name, raw in ((FIRST_FIELD, first), (SECOND_FIELD, second)):
        try:
            normalized[name] = validate_field(raw, name)
        except (InvalidSymbolError, RequiredFieldError) as exc:
            session.field_errors[name] = str(exc)
    if session.field_errors:
        logger.debug("Submission rejected: %s", session.field_errors)
        return False

    try:
        result = compare(normalized[FIRST_FIELD], normalized[SECOND_FIELD])
    except LengthMismatchError as exc:
        session.root_error = str(exc)
        logger.debug(
            "Submission rejected: lengths %d and %d differ",
            exc.reference_length,
            exc.query_length,
        )
        return False

    session.result = result
    if reference_name:
        session.reference_name = reference_name
    if query_name:
        session.query_name = query_name
    _relayout(session)
    return True


def resize(session: ViewSession, available_px: Optional[float]) -> List[DisplayLine]:
    session.available_px = available_px
    session.chars_per_line = chars_per_line_for_width(available_px, session.params.cell_width_px)
    _relayout(session)
    return session.lines


def set_chars_per_line(session: ViewSession, chars_per_line: int) -> List[DisplayLine]:
    session.available_px = None
    session.chars_per_line = int(chars_per_line)
    _relayout(session)
    return session.lines


def _require_result(session: ViewSession) -> CompareResult:
    if session.result is None:
        raise ValueError("No sequences have been submitted")
    return session.result


def probe_position(session: ViewSession, index: int) -> Dict[str, object]:
    result = _require_result(session)
    position = result.position(index)
    chars_per_line = session.chars_per_line
    return {
        "index": position.index,
        "reference_symbol": position.reference_symbol,
        "query_symbol": position.query_symbol,
        "is_match": position.is_match,
        "reference_category": classify(position.reference_symbol).value,
        "query_category": classify(position.query_symbol).value,
        "reference_fill": fill_color(position.reference_symbol),
        "query_fill": None if position.is_match else fill_color(position.query_symbol),
        "chunk_index": index // chars_per_line if chars_per_line > 0 else None,
    }


def summary(session: ViewSession) -> Dict[str, object]:
    result = session.result
    if result is None:
        return {"length": 0, "mismatches": 0, "identity": 0.0}
    return {
        "length": result.length,
        "mismatches": len(result.mismatch_indices),
        "identity": round(result.identity, 4),
        "reference_name": session.reference_name,
        "query_name": session.query_name,
    }


def display_settings(params: ViewParams) -> Dict[str, object]:
    """Presentation settings the page needs to draw and copy the lines."""

    return {
        "alphabet": ALLOWED_SYMBOLS,
        "cell_width_px": params.cell_width_px,
        "line_height_px": params.line_height_px,
        "pair_spacing_px": params.pair_spacing_px,
        "debounce_ms": int(round(params.debounce_seconds * 1000)),
        "notification_duration_ms": params.notification_duration_ms,
        "copy_message": COPY_SUCCESS_MESSAGE,
    }


def lines_to_payload(lines: Sequence[DisplayLine]) -> List[Dict[str, Any]]:
    return [
        {
            "row": line.row.value,
            "start": line.start,
            "text": line.text,
            "cells": [{"symbol": cell.symbol, "fill": cell.fill} for cell in line.cells],
        }
        for line in lines
    ]


def export_view(session: ViewSession, fmt: str) -> bytes:
    _require_result(session)
    if session.chars_per_line <= 0:
        raise ValueError("Layout width is not known yet")
    return render_bytes(
        fmt=fmt,
        lines=session.lines,
        chars_per_line=session.chars_per_line,
        params=session.params,
    )


def mount_selection(
    session: ViewSession,
    events: SelectionEvents,
    clipboard: ClipboardWriter,
    notify: Optional[Notifier] = None,
    **bridge_kwargs: Any,
) -> SelectionCaptureBridge:
    unmount_selection(session)
    bridge_kwargs.setdefault("delay", session.params.debounce_seconds)
    bridge = SelectionCaptureBridge(
        events,
        RenderedRegion.from_lines(session.lines),
        clipboard,
        notify,
        **bridge_kwargs,
    )
    session.bridge = bridge.attach()
    return bridge


def unmount_selection(session: ViewSession) -> None:
    if session.bridge is not None:
        session.bridge.detach()
        session.bridge = None
