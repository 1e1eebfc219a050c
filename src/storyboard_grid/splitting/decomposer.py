"""
Decompose a storyboard composite into individual scene panels.

A call runs load, boundary location, per-panel crop and empty-panel
filtering in sequence. Nothing is cached between calls, so the same
bytes, grid and options always give the same panels in the same order.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from storyboard_grid.config import SplitOptions
from storyboard_grid.logging_utils import logger
from storyboard_grid.planning import aspect_value, compute_grid
from storyboard_grid.splitting.cells import is_cell_empty, plan_panel_crop
from storyboard_grid.splitting.codec import (
    ImageCodec,
    PillowCodec,
    load_composite,
)
from storyboard_grid.splitting.strategies import BoundaryStrategy, strategy_for

if TYPE_CHECKING:  # pragma: no cover
    from pathlib import Path

    from storyboard_grid.planning import GridConfig
    from storyboard_grid.splitting.buffer import PixelBuffer
    from storyboard_grid.splitting.strategies import CellBounds
    from storyboard_grid.type_defs import AspectRatio, ResolutionTier


class DecompositionCancelled(RuntimeError):
    """Raised when a cancellation token fires during decomposition."""


class CancellationToken:
    """Thread-safe flag checked between panels."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True once cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise DecompositionCancelled if cancellation was requested."""
        if self._event.is_set():
            msg = "Decomposition cancelled"
            raise DecompositionCancelled(msg)


@dataclass(frozen=True, slots=True)
class SourceRect:
    """Raw cell position inside the composite image."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class SplitResult:
    """
    One accepted panel cut from a composite.

    ``id`` counts accepted panels only; ``original_index`` is the
    row-major position before empty panels were dropped.
    """

    id: int
    image: bytes
    width: int
    height: int
    original_index: int
    is_empty: bool
    row: int
    col: int
    source_rect: SourceRect


class ImageDecomposer:
    """
    Cut composites into aspect-correct, inset, non-empty panels.

    The codec and boundary strategy are injectable; by default panels
    are encoded as PNG and the strategy comes from ``options.strategy``.
    """

    def __init__(
        self,
        codec: ImageCodec | None = None,
        strategy: BoundaryStrategy | None = None,
    ) -> None:
        self.codec = codec or PillowCodec()
        self.strategy = strategy

    def _strategy(self, options: SplitOptions) -> BoundaryStrategy:
        return self.strategy or strategy_for(options.strategy)

    def decompose(
        self,
        source: bytes | str | Path,
        grid: GridConfig,
        aspect_ratio: AspectRatio,
        options: SplitOptions | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[SplitResult]:
        """
        Load a composite and split it according to ``grid``.

        Raises:
            LoadError: If the composite cannot be read or decoded.
            DecompositionCancelled: If ``cancel_token`` fires.

        """
        pixels = load_composite(source, self.codec)
        return self.decompose_pixels(
            pixels, grid, aspect_ratio, options, cancel_token,
        )

    def decompose_pixels(
        self,
        pixels: PixelBuffer,
        grid: GridConfig,
        aspect_ratio: AspectRatio,
        options: SplitOptions | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[SplitResult]:
        """Split an already decoded composite."""
        opts = options or SplitOptions()
        cols = opts.expected_cols or grid.cols
        rows = opts.expected_rows or grid.rows
        strategy = self._strategy(opts)
        target_ratio = aspect_value(aspect_ratio)

        logger.info(
            "Splitting %dx%d composite into %dx%d grid (%s strategy)",
            pixels.width, pixels.height, cols, rows, strategy.name,
        )

        cells = strategy.locate_cells(pixels, cols, rows)
        results: list[SplitResult] = []
        for index, cell in enumerate(cells):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            panel = self._cut_panel(pixels, cell, target_ratio, opts)
            is_empty = opts.filter_empty and is_cell_empty(panel, opts.threshold)
            if is_empty:
                logger.debug(
                    "Skipping empty cell %d (row %d, col %d)",
                    index, cell.row, cell.col,
                )
                continue

            results.append(SplitResult(
                id=len(results),
                image=self.codec.encode(panel),
                width=panel.width,
                height=panel.height,
                original_index=index,
                is_empty=is_empty,
                row=cell.row,
                col=cell.col,
                source_rect=SourceRect(*cell.rect.as_xywh()),
            ))

        logger.info(
            "Split complete: %d panels kept from %d cells",
            len(results), len(cells),
        )
        return results

    @staticmethod
    def _cut_panel(
        pixels: PixelBuffer,
        cell: CellBounds,
        target_ratio: float,
        opts: SplitOptions,
    ) -> PixelBuffer:
        crop = plan_panel_crop(cell.rect, target_ratio, opts.edge_margin_percent)
        logger.debug(
            "Cell (%d, %d): source %s -> output %dx%d",
            cell.row, cell.col, crop.source.as_xywh(), *crop.output_size,
        )
        return pixels.crop(crop.source).resize(crop.output_size)


def split_storyboard_image(  # noqa: PLR0913
    source: bytes | str | Path,
    *,
    aspect_ratio: AspectRatio,
    resolution: ResolutionTier,
    scene_count: int,
    options: SplitOptions | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[SplitResult]:
    """
    Plan the grid for a scene count and split the composite with it.

    Uses the same planner call as the instruction builder so the cut
    lines match the layout that was requested from the provider.
    """
    grid = compute_grid(scene_count, aspect_ratio, resolution)
    return ImageDecomposer().decompose(
        source, grid, aspect_ratio, options, cancel_token,
    )
