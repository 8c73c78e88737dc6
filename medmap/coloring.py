"""
Цвет региона по числу случаев (без matplotlib).

Идея:
- нет данных / 0 случаев -> серый
- иначе нормируем в [min, max] и ведем градиент зеленый -> желтый -> красный
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from medmap.normalization import round_half_up

NO_DATA_COLOR = "#dee2e6"


def _normalized(total: float, min_cases: float, max_cases: float) -> float:
    span = max_cases - min_cases
    if span <= 0:
        return 1.0
    return min(max((total - min_cases) / span, 0.0), 1.0)


def gradient_rgb(t: float) -> Tuple[int, int, int]:
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        # зеленый -> желтый
        k = t * 2
        return round_half_up(51 + (255 - 51) * k), 255, round_half_up(51 * (1 - k))
    # желтый -> красный
    k = (t - 0.5) * 2
    return 255, round_half_up(255 * (1 - k)), 0


def region_color(total: Optional[float], min_cases: float = 0, max_cases: float = 40000) -> str:
    if not total:
        return NO_DATA_COLOR
    r, g, b = gradient_rgb(_normalized(total, min_cases, max_cases))
    return f"rgb({r}, {g}, {b})"


def plotly_colorscale() -> List[List]:
    """Same gradient as region_color, in plotly colorscale form."""
    return [[t, "rgb({}, {}, {})".format(*gradient_rgb(t))] for t in (0.0, 0.25, 0.5, 0.75, 1.0)]
