from __future__ import annotations

import os
import tempfile
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional, Sequence, Tuple

from .layout import DisplayLine, group_pairs
from .params import ViewParams

CELL_INCHES = 0.22
EXPORT_FORMATS = {"svg", "png"}


def configure_headless_matplotlib() -> None:
    """Select the Agg backend so exports work without a display."""

    if not os.environ.get("MPLBACKEND", "").strip():
        os.environ["MPLBACKEND"] = "Agg"
    if not os.environ.get("MPLCONFIGDIR"):
        os.environ["MPLCONFIGDIR"] = os.path.join(tempfile.gettempdir(), "pairview_mplconfig")

    import matplotlib

    if "agg" not in str(matplotlib.get_backend()).lower():
        matplotlib.use("Agg", force=True)


def pair_geometry(params: ViewParams) -> Tuple[float, float]:
    """Row height and inter-pair spacer, in units of one cell width."""

    row_height = params.line_height_px / params.cell_width_px
    spacer = params.pair_spacing_px / params.cell_width_px
    return row_height, spacer


def plot_display_lines(
    lines: Sequence[DisplayLine],
    chars_per_line: int,
    output: Path,
    params: Optional[ViewParams] = None,
) -> None:
    configure_headless_matplotlib()
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle

    params = params or ViewParams()
    row_height, spacer = pair_geometry(params)
    pair_height = 2.0 * row_height + spacer
    pairs = list(group_pairs(lines))
    n_cols = max([chars_per_line, 1] + [len(line) for line in lines])
    total_height = max(len(pairs) * pair_height, 1.0)
    font_size = CELL_INCHES * 72.0 * 0.6 * min(row_height, 1.0)

    fig, ax = plt.subplots(
        figsize=(n_cols * CELL_INCHES, total_height * CELL_INCHES),
        dpi=params.dpi,
    )
    for pair_idx, pair in enumerate(pairs):
        top = total_height - pair_idx * pair_height
        for row_offset, line in enumerate(pair):
            y = top - (row_offset + 1) * row_height
            for col, cell in enumerate(line.cells):
                if cell.fill is not None:
                    ax.add_patch(
                        Rectangle((col, y), 1.0, row_height, facecolor=cell.fill, edgecolor="none")
                    )
                ax.text(
                    col + 0.5,
                    y + row_height / 2.0,
                    cell.symbol,
                    ha="center",
                    va="center",
                    family="monospace",
                    fontsize=font_size,
                )

    ax.set_xlim(0, n_cols)
    ax.set_ylim(0, total_height)
    ax.axis("off")

    output.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output, bbox_inches="tight")
    plt.close(fig)


def render_bytes(
    *,
    fmt: str,
    lines: Sequence[DisplayLine],
    chars_per_line: int,
    params: Optional[ViewParams] = None,
) -> bytes:
    if fmt not in EXPORT_FORMATS:
        raise ValueError("Export format must be 'svg' or 'png'")
    with NamedTemporaryFile(suffix=f".{fmt}", delete=True) as handle:
        plot_display_lines(lines, chars_per_line, Path(handle.name), params)
        handle.seek(0)
        return handle.read()
