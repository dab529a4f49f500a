from __future__ import annotations

import logging
from typing import Dict, List, Sequence

import numpy as np

from .exceptions import IndexOutOfRange
from .grid import GridSpec
from .records import MONTHS_PER_YEAR
from .store import NetCDFStore

logger = logging.getLogger(__name__)

SPATIAL_DIMS = ("lon", "lat")
CUBE_DIMS = ("lon", "lat", "time")
MONTHLY_VARIABLE = "data"


def _nan_cube(shape, dtype=np.float64) -> np.ndarray:
    cube = np.empty(shape, dtype=dtype)
    cube.fill(np.nan)
    return cube


class AnnualCubes:
    """
    One (lon, lat, year) cube per data column.

    All cubes stay in memory until ``write_to``: ncols * nrows * n_years floats
    per variable.
    """

    dtype = np.float32

    def __init__(self, grid: GridSpec, variable_names: Sequence[str], n_years: int):
        if n_years < 1:
            raise ValueError(f"n_years must be positive, got {n_years}.")
        self.grid = grid
        self.n_years = n_years
        self.variable_names = list(variable_names)
        shape = (grid.ncols, grid.nrows, n_years)
        self.cubes: Dict[str, np.ndarray] = {
            name: _nan_cube(shape, self.dtype) for name in self.variable_names
        }
        logger.info(
            "Allocated %d annual cube(s) of shape %s", len(self.cubes), shape
        )

    def scatter(self, ilon: int, ilat: int, year_offset: int, values: Sequence[float]) -> None:
        if not 0 <= year_offset < self.n_years:
            raise IndexOutOfRange(
                f"Year offset {year_offset} exceeds the {self.n_years} years of the first point."
            )
        if len(values) != len(self.variable_names):
            raise ValueError(
                f"Expected {len(self.variable_names)} values, got {len(values)}."
            )
        for name, value in zip(self.variable_names, values):
            self.cubes[name][ilon, ilat, year_offset] = value

    def write_to(self, store: NetCDFStore, units: str) -> None:
        ncols, nrows = self.grid.shape
        for position, name in enumerate(self.variable_names, start=1):
            store.write_slice(
                name,
                CUBE_DIMS,
                (ncols, nrows, None),
                (0, 0, 0),
                (ncols, nrows, self.n_years),
                self.cubes[name],
                dtype=self.dtype,
            )
            store.set_attribute(units, "units", name)
            store.set_attribute(name, "long_name", name)
            logger.info("%s (%d/%d) saved", name, position, len(self.variable_names))


class MonthlyCubes:
    """
    One (lon, lat, 12) cube per year, concatenated along time into ``data``.

    Holds ncols * nrows * 12 * n_years floats until ``write_to``.
    """

    dtype = np.float64

    def __init__(self, grid: GridSpec, n_years: int):
        if n_years < 1:
            raise ValueError(f"n_years must be positive, got {n_years}.")
        self.grid = grid
        self.n_years = n_years
        shape = (grid.ncols, grid.nrows, MONTHS_PER_YEAR)
        self.cubes: List[np.ndarray] = [_nan_cube(shape) for _ in range(n_years)]
        logger.info("Allocated %d monthly cube(s) of shape %s", n_years, shape)

    @property
    def variable_names(self) -> List[str]:
        return [MONTHLY_VARIABLE]

    def scatter(self, ilon: int, ilat: int, year_offset: int, values: Sequence[float]) -> None:
        if not 0 <= year_offset < self.n_years:
            raise IndexOutOfRange(
                f"Year offset {year_offset} exceeds the {self.n_years} years of the first point."
            )
        if len(values) != MONTHS_PER_YEAR:
            raise ValueError(f"Expected {MONTHS_PER_YEAR} monthly values, got {len(values)}.")
        self.cubes[year_offset][ilon, ilat, :] = values

    def write_to(self, store: NetCDFStore, units: str) -> None:
        ncols, nrows = self.grid.shape
        for year_offset, cube in enumerate(self.cubes):
            store.write_slice(
                MONTHLY_VARIABLE,
                CUBE_DIMS,
                (ncols, nrows, None),
                (0, 0, year_offset * MONTHS_PER_YEAR),
                (ncols, nrows, MONTHS_PER_YEAR),
                cube,
                dtype=self.dtype,
            )
            logger.debug(
                "Save data (months): %d/%d",
                (year_offset + 1) * MONTHS_PER_YEAR,
                self.n_years * MONTHS_PER_YEAR,
            )
        store.set_attribute(units, "units", MONTHLY_VARIABLE)
        logger.info("%s saved (%d months)", MONTHLY_VARIABLE, self.n_years * MONTHS_PER_YEAR)
