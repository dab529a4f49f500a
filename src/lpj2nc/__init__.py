"""
Convert LPJ ASCII point output into gridded NetCDF files.
"""

from .config import ConversionConfig, parse_config_file
from .grid import GridSpec, parse_grid_spec
from .io import load_converted_variable, open_converted
from .processing import ConversionResult, run_conversion
from .time_axis import TimeAxis, annual_time_axis, monthly_time_axis

__all__ = [
    "ConversionConfig",
    "ConversionResult",
    "GridSpec",
    "TimeAxis",
    "annual_time_axis",
    "load_converted_variable",
    "monthly_time_axis",
    "open_converted",
    "parse_config_file",
    "parse_grid_spec",
    "run_conversion",
]
