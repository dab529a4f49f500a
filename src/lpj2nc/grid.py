from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np

from .exceptions import IndexOutOfRange, InvalidGrid


# Global extent used by the one- and two-value grid shorthands. North and east
# stop half a degree short so the inclusive row/column count formula yields
# 360 x 720 cells at 0.5 degrees.
GLOBAL_EXTENT = {
    "north": 89.5,
    "west": -180.0,
    "south": -90.0,
    "east": 179.5,
}

DEFAULT_RESOLUTION = 0.5

# Absorbs floating point error when counting lattice cells, e.g. 0.1 degree grids.
_COUNT_TOLERANCE = 1e-9


def _lattice_size(lo: float, hi: float, res: float) -> int:
    return int(math.floor((hi - lo + res) / res + _COUNT_TOLERANCE))


@dataclass(frozen=True)
class GridSpec:
    """Regular lon/lat lattice with midpoint cell coordinates.

    ``lon`` and ``lat`` hold the gridcell midpoints. With ``invert_latitude``
    the latitude sequence starts at the northernmost row.
    """

    north: float
    west: float
    south: float
    east: float
    xres: float
    yres: float
    invert_latitude: bool = False
    cell_centered: bool = False
    lon: np.ndarray = field(init=False, repr=False, compare=False)
    lat: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        bounds = (self.north, self.west, self.south, self.east, self.xres, self.yres)
        if not all(math.isfinite(value) for value in bounds):
            raise InvalidGrid(f"Grid extent and resolution must be finite, got {bounds}.")
        if not self.xres > 0 or not self.yres > 0:
            raise InvalidGrid(
                f"Grid resolution must be positive, got xres={self.xres}, yres={self.yres}."
            )
        ncols = _lattice_size(self.west, self.east, self.xres)
        nrows = _lattice_size(self.south, self.north, self.yres)
        if ncols <= 0 or nrows <= 0:
            raise InvalidGrid(
                f"Grid extent N{self.north} W{self.west} S{self.south} E{self.east} holds no cells."
            )

        lon = self.west + self.xres * (np.arange(ncols) + 0.5)
        lat = self.south + self.yres * (np.arange(nrows) + 0.5)
        if self.invert_latitude:
            lat = lat[::-1].copy()

        lon.setflags(write=False)
        lat.setflags(write=False)
        object.__setattr__(self, "lon", lon)
        object.__setattr__(self, "lat", lat)

    @property
    def ncols(self) -> int:
        return self.lon.size

    @property
    def nrows(self) -> int:
        return self.lat.size

    @property
    def shape(self) -> Tuple[int, int]:
        """Lattice shape in (lon, lat) order."""
        return self.ncols, self.nrows

    def cell_index(self, lon: float, lat: float) -> Tuple[int, int]:
        """
        Map a record coordinate onto its (lon index, lat index) lattice cell.

        Coordinates denote the lower-left gridcell corner unless the grid is
        ``cell_centered``, in which case half a cell is subtracted before
        rounding to the nearest index (ties round up).

        Raises
        ------
        IndexOutOfRange
            If the coordinate falls outside the lattice.
        """
        x = (lon - self.west) / self.xres
        y = (lat - self.south) / self.yres
        if self.cell_centered:
            x -= 0.5
            y -= 0.5

        ilon = int(math.floor(x + 0.5))
        ilat = int(math.floor(y + 0.5))

        if not 0 <= ilon < self.ncols or not 0 <= ilat < self.nrows:
            raise IndexOutOfRange(
                f"Coordinate ({lon}, {lat}) maps to cell ({ilon}, {ilat}) "
                f"outside the {self.ncols}x{self.nrows} grid."
            )

        if self.invert_latitude:
            ilat = self.nrows - 1 - ilat
        return ilon, ilat

    def describe(self) -> str:
        """Areal extent of the gridcell midpoints, one line per axis."""
        return (
            f"north - south: {self.lat.max()} to {self.lat.min()}; "
            f"west - east: {self.lon[0]} to {self.lon[-1]} "
            f"({self.ncols}x{self.nrows} cells)"
        )


def parse_grid_spec(
    grid: Union[str, Sequence[float]],
    *,
    invert_latitude: bool = False,
    cell_centered: bool = False,
) -> GridSpec:
    """
    Build a GridSpec from the grid shorthand.

    Parameters
    ----------
    grid:
        Either a comma-separated string or a sequence with one of the forms
        ``res``, ``xres,yres`` or ``north,west,south,east,xres,yres``. The
        one- and two-value forms cover the global default extent.
    invert_latitude:
        Start the latitude axis with the northernmost row.
    cell_centered:
        Input coordinates are gridcell centers rather than lower-left corners.

    Returns
    -------
    GridSpec
    """
    if isinstance(grid, str):
        parts = [part.strip() for part in grid.split(",")]
    else:
        parts = list(grid)

    try:
        values = [float(part) for part in parts]
    except (TypeError, ValueError) as exc:
        raise InvalidGrid(f'Grid "{grid}" not possible to construct.') from exc

    extent = dict(GLOBAL_EXTENT)
    if len(values) == 1:
        xres = yres = values[0]
    elif len(values) == 2:
        xres, yres = values
    elif len(values) == 6:
        extent = dict(zip(("north", "west", "south", "east"), values[:4]))
        xres, yres = values[4:]
    else:
        raise InvalidGrid(
            f'Grid "{grid}" not possible to construct: expected 1, 2 or 6 values, got {len(values)}.'
        )

    return GridSpec(
        xres=xres,
        yres=yres,
        invert_latitude=invert_latitude,
        cell_centered=cell_centered,
        **extent,
    )
