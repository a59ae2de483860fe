"""
Value-driven background highlighting.

Pure planning code: given the existing values and backgrounds of a grid,
compute the background every cell should end up with. Applying the result
is left to gsheets.sheets_tools.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from core.utils import UserInputError
from gsheets.colors import Color, lerp

PERCENTILES = (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)

ColorGrid = List[List[Optional[Color]]]


@dataclass(frozen=True)
class Boundary:
    value: float
    clamp: bool = False


@dataclass(frozen=True)
class GridCell:
    value: Optional[float] = None
    background: Optional[Color] = None


@dataclass(frozen=True)
class PercentileBand:
    lower: Boundary
    upper: Boundary
    color: Color


def normalize_boundary(lower: Boundary, upper: Boundary, value: float) -> float:
    """
    Position of value within [lower, upper] as a fraction.

    A clamped lower boundary floors the result at 0 and a clamped upper
    boundary ceils it at 1. Equal boundaries give inf or nan like IEEE
    division would.
    """
    numerator = value - lower.value
    span = upper.value - lower.value
    if span == 0:
        if numerator == 0 or math.isnan(numerator):
            result = math.nan
        else:
            result = math.copysign(math.inf, numerator)
    else:
        result = numerator / span

    if math.isnan(result):
        return result
    if lower.clamp:
        result = max(result, 0.0)
    if upper.clamp:
        result = min(result, 1.0)
    return result


def _in_window(cell: GridCell, lower: Boundary, upper: Boundary) -> Optional[float]:
    """Normalized fraction of a cell's value, or None when it should pass through."""
    if cell.value is None:
        return None
    fraction = normalize_boundary(lower, upper, cell.value)
    # nan and inf from a degenerate interval fail this check
    if 0 <= fraction <= 1:
        return fraction
    return None


def plan_highlight(
    cells: Sequence[Sequence[GridCell]],
    lower: Boundary,
    upper: Boundary,
    color: Color,
) -> ColorGrid:
    """Flat highlight: color every cell whose value falls in [lower, upper]."""
    planned: ColorGrid = []
    for row in cells:
        planned_row: List[Optional[Color]] = []
        for cell in row:
            if _in_window(cell, lower, upper) is not None:
                planned_row.append(color)
            else:
                planned_row.append(cell.background)
        planned.append(planned_row)
    return planned


def plan_gradient_highlight(
    cells: Sequence[Sequence[GridCell]],
    lower: Boundary,
    upper: Boundary,
    color1: Color,
    color2: Color,
) -> ColorGrid:
    """Gradient highlight: blend color1 -> color2 by the value's position in range."""
    if lower.value == upper.value:
        raise UserInputError(
            f"Gradient highlight needs distinct boundaries, got {lower.value} for both."
        )

    planned: ColorGrid = []
    for row in cells:
        planned_row: List[Optional[Color]] = []
        for cell in row:
            fraction = _in_window(cell, lower, upper)
            if fraction is not None:
                planned_row.append(lerp(color1, color2, fraction))
            else:
                planned_row.append(cell.background)
        planned.append(planned_row)
    return planned


def _percentile_rank(count: int, percentile: float) -> int:
    return int(math.ceil((count - 1) * percentile))


def _bands_for(
    sorted_values: List[float], strong: Color, neutral: Color, descending: bool
) -> List[PercentileBand]:
    count = len(sorted_values)
    if count == 0:
        return []

    def pick(percentile: float) -> float:
        rank = _percentile_rank(count, percentile)
        return sorted_values[count - 1 - rank] if descending else sorted_values[rank]

    bands = []
    for i in range(len(PERCENTILES) - 1):
        bands.append(
            PercentileBand(
                lower=Boundary(pick(PERCENTILES[i]), clamp=False),
                upper=Boundary(pick(PERCENTILES[i + 1]), clamp=False),
                color=lerp(strong, neutral, PERCENTILES[i]),
            )
        )
    return bands


def percentile_bands(
    values: Iterable[float],
    positive_color: Color,
    negative_color: Color,
    neutral_color: Color,
) -> tuple[List[PercentileBand], List[PercentileBand]]:
    """
    Split a column into negative and positive percentile bands.

    Zeros belong to neither partition. Band 0 of each partition is anchored at
    its largest-magnitude value and colored with the strong color; later bands
    move toward zero and toward the neutral color. Negative ranks are read
    from the ascending order, positive ranks from the descending end.

    Returns:
        (negative_bands, positive_bands), each empty or of length 5.
    """
    negative_values = []
    positive_values = []
    for value in values:
        if value > 0:
            positive_values.append(value)
        elif value < 0:
            negative_values.append(value)
    negative_values.sort()
    positive_values.sort()

    negative = _bands_for(negative_values, negative_color, neutral_color, descending=False)
    positive = _bands_for(positive_values, positive_color, neutral_color, descending=True)
    return negative, positive


def plan_percentile_highlight(
    cells: Sequence[Sequence[GridCell]],
    negative_bands: Sequence[PercentileBand],
    positive_bands: Sequence[PercentileBand],
) -> ColorGrid:
    """
    Layer every band over the grid in order, negative bands first.

    Each pass sees the previous pass's colors as the existing backgrounds, so
    a later band overrides an earlier one wherever their ranges overlap.
    """
    current = [list(row) for row in cells]
    planned: ColorGrid = [[cell.background for cell in row] for row in current]
    for band in list(negative_bands) + list(positive_bands):
        planned = plan_highlight(current, band.lower, band.upper, band.color)
        current = [
            [GridCell(cell.value, background) for cell, background in zip(row, planned_row)]
            for row, planned_row in zip(current, planned)
        ]
    return planned
