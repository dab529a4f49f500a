from __future__ import annotations

import getpass
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from .config import ConversionConfig
from .cubes import SPATIAL_DIMS, AnnualCubes, MonthlyCubes
from .exceptions import InvalidGrid
from .grid import GridSpec, parse_grid_spec
from .records import read_table
from .scan import Point, ScanState, iter_points
from .store import NetCDFStore
from .time_axis import TimeAxis, annual_time_axis, monthly_time_axis

logger = logging.getLogger(__name__)

Cubes = Union[AnnualCubes, MonthlyCubes]


@dataclass
class ConversionResult:
    output_path: Path
    grid: GridSpec
    time_axis: TimeAxis
    n_points: int
    n_years: int
    variable_names: List[str] = field(default_factory=list)


def run_conversion(config: ConversionConfig) -> ConversionResult:
    """
    Convert an LPJ ASCII point table into a gridded NetCDF file.

    The first point is the discovery phase: its year count fixes the time
    axis and the cube shapes. Every later point is scattered into the
    preallocated cubes, which are written once the stream ends.
    """
    if not config.grid:
        raise InvalidGrid("No grid extent given: '<north>,<west>,<south>,<east>,<xres>,<yres>'.")
    grid = parse_grid_spec(
        config.grid,
        invert_latitude=config.invert_latitude,
        cell_centered=config.cell_centered,
    )
    logger.info("Areal extent (gridcell midpoints): %s", grid.describe())

    table = read_table(config.input_path, monthly=config.monthly)
    logger.info("Read %d records from %s", len(table), config.input_path)

    points = iter_points(table.records(), ScanState(validate_order=config.validate_order))
    first = next(points)
    reference_year = config.year if config.year is not None else first.first_year

    if config.monthly:
        axis = monthly_time_axis(first.n_years, reference_year)
        cubes: Cubes = MonthlyCubes(grid, first.n_years)
    else:
        axis = annual_time_axis(first.n_years, reference_year)
        cubes = AnnualCubes(grid, table.variable_names, first.n_years)
    logger.info(
        "First point spans %d year(s) from %d; time axis has %d step(s)",
        first.n_years,
        first.first_year,
        len(axis),
    )

    with NetCDFStore(config.output_path, mode=config.mode) as store:
        # Axes already in the file must match exactly.
        store.check_coordinate("lon", grid.lon)
        store.check_coordinate("lat", grid.lat)
        store.check_coordinate("time", axis.values, units=axis.units, calendar=axis.calendar)
        _write_grid(store, grid)
        _write_provenance(store, config.command)
        _write_time_axis(store, axis)

        _scatter_point(grid, cubes, first)
        n_points = 1
        for point in points:
            _scatter_point(grid, cubes, point)
            n_points += 1
            if n_points % 10000 == 0:
                logger.info("Gridpoints processed: %d", n_points)

        logger.info("Gridpoints processed: %d", n_points)
        cubes.write_to(store, config.unit)

    return ConversionResult(
        output_path=config.output_path,
        grid=grid,
        time_axis=axis,
        n_points=n_points,
        n_years=first.n_years,
        variable_names=cubes.variable_names,
    )


def _scatter_point(grid: GridSpec, cubes: Cubes, point: Point) -> None:
    ilon, ilat = grid.cell_index(point.lon, point.lat)
    for year_offset, record in enumerate(point.records):
        cubes.scatter(ilon, ilat, year_offset, record.values)


def _write_grid(store: NetCDFStore, grid: GridSpec) -> None:
    lon_dim, lat_dim = SPATIAL_DIMS
    store.create_dimension(lon_dim, grid.ncols)
    store.create_dimension(lat_dim, grid.nrows)

    store.write_variable(lon_dim, (lon_dim,), grid.lon, dtype=np.float64)
    store.set_attribute("longitude", "long_name", lon_dim)
    store.set_attribute("degree_east", "units", lon_dim)
    store.write_variable(lat_dim, (lat_dim,), grid.lat, dtype=np.float64)
    store.set_attribute("latitude", "long_name", lat_dim)
    store.set_attribute("degree_north", "units", lat_dim)


def _write_time_axis(store: NetCDFStore, axis: TimeAxis) -> None:
    store.write_slice("time", ("time",), (None,), (0,), (len(axis),), axis.values, dtype=np.float64)
    for name, value in axis.attributes.items():
        store.set_attribute(value, name, "time")


def _write_provenance(store: NetCDFStore, command: Optional[str]) -> None:
    store.set_attribute(time.asctime(time.gmtime()), "created_at")
    store.set_attribute(command or "lpj2nc", "created_with")
    store.set_attribute(_current_user(), "created_by")


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"
