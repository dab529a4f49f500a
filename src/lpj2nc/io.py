from __future__ import annotations

from pathlib import Path
from typing import Dict

import xarray as xr


def open_converted(path: str | Path, *, decode_times: bool = True) -> xr.Dataset:
    """
    Open a converted NetCDF file with xarray.

    Parameters
    ----------
    path:
        File written by ``run_conversion``.
    decode_times:
        Decode the time axis. The annual ``noleap`` calendar decodes to
        cftime objects.

    Returns
    -------
    xarray.Dataset
        Dataset loaded into memory; the file handle is closed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Converted file not found: {path}")

    time_coder = xr.coders.CFDatetimeCoder(use_cftime=True) if decode_times else False
    with xr.open_dataset(path, decode_times=time_coder) as ds:
        return ds.load()


def load_converted_variable(
    path: str | Path,
    variable: str,
    *,
    cube_order: bool = False,
) -> xr.DataArray:
    """
    Load one gridded variable.

    With ``cube_order`` the array is transposed to (lon, lat, time), the
    layout used while accumulating.
    """
    ds = open_converted(path)
    if variable not in ds:
        raise KeyError(f"Variable '{variable}' not present in dataset. Available: {list(ds.data_vars)}")
    data_array = ds[variable]
    if cube_order:
        data_array = data_array.transpose("lon", "lat", "time")
    return data_array


def summarize_output(path: str | Path) -> Dict[str, object]:
    """Variable shapes and the decoded time extent of a converted file.

    The file is opened lazily; only the first and last time steps are read.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Converted file not found: {path}")

    time_coder = xr.coders.CFDatetimeCoder(use_cftime=True)
    with xr.open_dataset(path, decode_times=time_coder) as ds:
        shapes = {name: tuple(ds[name].shape) for name in ds.data_vars}

        first = last = calendar = None
        if "time" in ds.variables:
            calendar = ds["time"].encoding.get("calendar")
            if ds.sizes.get("time", 0):
                ends = ds["time"].isel(time=[0, -1]).values
                first, last = str(ends[0]), str(ends[-1])

    return {
        "variables": shapes,
        "time_start": first,
        "time_end": last,
        "calendar": calendar,
    }
