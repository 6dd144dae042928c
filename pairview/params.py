from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_CELL_WIDTH_PX = 16.0
DEFAULT_LINE_HEIGHT_PX = 16.0
DEFAULT_PAIR_SPACING_PX = 32.0
DEFAULT_DEBOUNCE_SECONDS = 0.8
DEFAULT_NOTIFICATION_DURATION_MS = 1000


@dataclass(frozen=True)
class ViewParams:
    cell_width_px: float = DEFAULT_CELL_WIDTH_PX
    line_height_px: float = DEFAULT_LINE_HEIGHT_PX
    pair_spacing_px: float = DEFAULT_PAIR_SPACING_PX
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    notification_duration_ms: int = DEFAULT_NOTIFICATION_DURATION_MS
    dpi: int = 150

    @classmethod
    def from_cli_args(cls, args: Any) -> "ViewParams":
        return cls(
            cell_width_px=to_float(args.cell_width_px, positive=True, name="cell_width_px"),
            dpi=to_int(args.dpi, positive=True, name="dpi"),
        )

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "ViewParams":
        payload = payload or {}
        if not isinstance(payload, dict):
            raise ValueError("params must be an object")

        def require(name: str, default: Any) -> Any:
            return payload.get(name, default)

        return cls(
            cell_width_px=to_float(require("cell_width_px", DEFAULT_CELL_WIDTH_PX), positive=True, name="cell_width_px"),
            line_height_px=to_float(require("line_height_px", DEFAULT_LINE_HEIGHT_PX), positive=True, name="line_height_px"),
            pair_spacing_px=to_float(require("pair_spacing_px", DEFAULT_PAIR_SPACING_PX), min_value=0.0, name="pair_spacing_px"),
            debounce_seconds=to_float(require("debounce_seconds", DEFAULT_DEBOUNCE_SECONDS), min_value=0.0, name="debounce_seconds"),
            notification_duration_ms=to_int(require("notification_duration_ms", DEFAULT_NOTIFICATION_DURATION_MS), min_value=0, name="notification_duration_ms"),
            dpi=to_int(require("dpi", 150), positive=True, name="dpi"),
        )


def to_float(
    value: Any,
    *,
    name: str,
    positive: bool = False,
    min_value: Optional[float] = None,
) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a floating-point number") from exc
    if positive and parsed <= 0:
        raise ValueError(f"{name} must be positive")
    if min_value is not None and parsed < min_value:
        raise ValueError(f"{name} must be >= {min_value}")
    return parsed


def to_int(
    value: Any,
    *,
    name: str,
    positive: bool = False,
    min_value: Optional[int] = None,
) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if positive and parsed <= 0:
        raise ValueError(f"{name} must be positive")
    if min_value is not None and parsed < min_value:
        raise ValueError(f"{name} must be >= {min_value}")
    return parsed
