"""Shared core APIs for the amino-acid pair viewer."""

from .alphabet import ALLOWED_SYMBOLS, ColorCategory, classify, fill_color
from .compute import CompareResult, LengthMismatchError, compare
from .inputs import InvalidSymbolError, LiveInputBuffer, live_filter, normalize
from .layout import DisplayCell, DisplayLine, Row, chars_per_line_for_width, layout
from .params import ViewParams
from .selection import Debouncer, RenderedRegion, Selection, SelectionCaptureBridge, SelectionEvents
from .service import ViewSession, create_session, get_session, resize, submit

__all__ = [
    "ALLOWED_SYMBOLS",
    "ColorCategory",
    "classify",
    "fill_color",
    "CompareResult",
    "LengthMismatchError",
    "compare",
    "InvalidSymbolError",
    "LiveInputBuffer",
    "live_filter",
    "normalize",
    "DisplayCell",
    "DisplayLine",
    "Row",
    "chars_per_line_for_width",
    "layout",
    "ViewParams",
    "Debouncer",
    "RenderedRegion",
    "Selection",
    "SelectionCaptureBridge",
    "SelectionEvents",
    "ViewSession",
    "create_session",
    "get_session",
    "resize",
    "submit",
]
