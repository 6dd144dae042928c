from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

GAP_SYMBOL = "-"
ALLOWED_SYMBOLS = "ARNDCEQGHILKMFPSTWYV" + GAP_SYMBOL


class ColorCategory(Enum):
    HYDROPHOBIC = "hydrophobic"
    POLAR = "polar"
    ACIDIC = "acidic"
    BASIC = "basic"
    GLYCINE = "glycine"
    CYSTEINE = "cysteine"
    GAP = "gap"


CATEGORY_COLORS: Dict[ColorCategory, Optional[str]] = {
    ColorCategory.HYDROPHOBIC: "#67E4A6",
    ColorCategory.POLAR: "#80BFFF",
    ColorCategory.ACIDIC: "#FC9CAC",
    ColorCategory.BASIC: "#BB99FF",
    ColorCategory.GLYCINE: "#C4C4C4",
    ColorCategory.CYSTEINE: "#FFEA00",
    ColorCategory.GAP: None,  # no fill
}


def _build_symbol_categories() -> Dict[str, ColorCategory]:
    groups = {
        ColorCategory.HYDROPHOBIC: "AILMFWYVP",
        ColorCategory.POLAR: "STHQN",
        ColorCategory.ACIDIC: "DE",
        ColorCategory.BASIC: "KR",
        ColorCategory.GLYCINE: "G",
        ColorCategory.CYSTEINE: "C",
        ColorCategory.GAP: GAP_SYMBOL,
    }
    table: Dict[str, ColorCategory] = {}
    for category, symbols in groups.items():
        for symbol in symbols:
            table[symbol] = category
    return table


SYMBOL_CATEGORIES: Dict[str, ColorCategory] = _build_symbol_categories()


def is_allowed(symbol: str) -> bool:
    return len(symbol) == 1 and symbol in SYMBOL_CATEGORIES


def classify(symbol: str) -> ColorCategory:
    """Return the biochemical color category of an alphabet symbol."""

    return SYMBOL_CATEGORIES[symbol]


def fill_color(symbol: str) -> Optional[str]:
    return CATEGORY_COLORS[classify(symbol)]
