"""Strategies that locate panel boundaries inside a composite image."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from storyboard_grid.logging_utils import logger
from storyboard_grid.splitting.buffer import PixelBuffer, Rect
from storyboard_grid.splitting.energy import detect_grid

if TYPE_CHECKING:  # pragma: no cover
    from storyboard_grid.type_defs import StrategyName


@dataclass(frozen=True)
class CellBounds:
    """Raw rectangle of one grid cell and its grid position."""

    rect: Rect
    row: int
    col: int


@runtime_checkable
class BoundaryStrategy(Protocol):
    """Locate the cells of a ``cols`` x ``rows`` grid, row-major."""

    name: str

    def locate_cells(
        self,
        pixels: PixelBuffer,
        cols: int,
        rows: int,
    ) -> list[CellBounds]:
        """Return exactly ``cols * rows`` cells in reading order."""
        ...


class FixedGridStrategy:
    """
    Divide the image into equal cells without looking at its content.

    Relies on the generation instruction asking for a borderless grid
    of identical panels, which makes the geometry exact.
    """

    name = "fixed"

    def locate_cells(
        self,
        pixels: PixelBuffer,
        cols: int,
        rows: int,
    ) -> list[CellBounds]:
        """Return uniform cells of ``width // cols`` by ``height // rows``."""
        if cols <= 0 or rows <= 0:
            msg = f"Grid must have positive dimensions, got {cols}x{rows}"
            raise ValueError(msg)
        cell_w = pixels.width // cols
        cell_h = pixels.height // rows
        if cell_w <= 0 or cell_h <= 0:
            msg = (f"Image {pixels.width}x{pixels.height} is too small for "
                   f"a {cols}x{rows} grid")
            raise ValueError(msg)
        return [
            CellBounds(
                Rect.from_size(col * cell_w, row * cell_h, cell_w, cell_h),
                row,
                col,
            )
            for row in range(rows)
            for col in range(cols)
        ]


class AdaptiveGridStrategy:
    """
    Place cells on content spans found by energy profiling.

    Useful for composites with visible gutters or uneven panels. When
    detection finds nothing, the fixed grid is used instead.
    """

    name = "adaptive"

    def __init__(self, fallback: BoundaryStrategy | None = None) -> None:
        self.fallback = fallback or FixedGridStrategy()

    def locate_cells(
        self,
        pixels: PixelBuffer,
        cols: int,
        rows: int,
    ) -> list[CellBounds]:
        """Return detected cells, or the fallback grid if detection fails."""
        detected = detect_grid(pixels, expected_cols=cols, expected_rows=rows)
        if detected is None:
            logger.info("Adaptive detection failed; using uniform grid")
            return self.fallback.locate_cells(pixels, cols, rows)

        cells: list[CellBounds] = []
        for row, row_span in enumerate(detected.rows):
            y0 = math.floor(row_span.start)
            y1 = min(pixels.height, math.floor(row_span.start + row_span.size))
            for col, col_span in enumerate(detected.cols):
                x0 = math.floor(col_span.start)
                x1 = min(pixels.width, math.floor(col_span.start + col_span.size))
                cells.append(CellBounds(Rect(x0, y0, x1, y1), row, col))
        return cells


_STRATEGIES: dict[str, type[FixedGridStrategy] | type[AdaptiveGridStrategy]] = {
    FixedGridStrategy.name: FixedGridStrategy,
    AdaptiveGridStrategy.name: AdaptiveGridStrategy,
}


def strategy_for(name: StrategyName) -> BoundaryStrategy:
    """Return a new strategy instance for its option name."""
    try:
        return _STRATEGIES[name]()
    except KeyError as e:
        msg = f"Unknown boundary strategy: {name}"
        raise ValueError(msg) from e
