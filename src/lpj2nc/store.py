from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from netCDF4 import Dataset

from .exceptions import AxisMismatch, OutputExists, StoreError

logger = logging.getLogger(__name__)

OUTPUT_MODES = ("create", "overwrite", "modify")


class NetCDFStore:
    """
    Slice-wise NetCDF writer.

    Callers name dimensions in (lon, lat, time) order. With ``reverse_dims``
    the file stores them reversed, (time, lat, lon), and every slice is
    transposed on the way in. Writes are synchronous; nothing is buffered
    between calls.

    Parameters
    ----------
    path:
        Output file.
    mode:
        ``create`` refuses an existing file, ``overwrite`` replaces it and
        ``modify`` appends to it (creating it when absent).
    reverse_dims:
        Store dimensions in reversed order (CF time, lat, lon layout).
    file_format:
        netCDF4 file format for newly created files.
    """

    def __init__(
        self,
        path: str | Path,
        mode: str = "create",
        *,
        reverse_dims: bool = True,
        file_format: str = "NETCDF4_CLASSIC",
    ):
        if mode not in OUTPUT_MODES:
            raise ValueError(f"Unknown store mode '{mode}'. Expected one of {OUTPUT_MODES}.")

        self.path = Path(path)
        self.mode = mode
        self.reverse_dims = reverse_dims

        exists = self.path.exists()
        if mode == "create" and exists:
            raise OutputExists(f'File "{self.path}" exists; overwrite or modify it explicitly.')

        nc_mode = "a" if mode == "modify" and exists else "w"
        try:
            self._dataset = Dataset(self.path, mode=nc_mode, format=file_format)
        except OSError as exc:
            raise StoreError(f'Cannot open "{self.path}" for writing: {exc}') from exc
        logger.info("%s %s", "Open" if nc_mode == "a" else "Create", self.path)

    def __enter__(self) -> "NetCDFStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def close(self) -> None:
        if self._dataset.isopen():
            self._dataset.close()

    def _order(self, items: Sequence):
        items = tuple(items)
        return items[::-1] if self.reverse_dims else items

    def create_dimension(self, name: str, size: Optional[int]) -> None:
        """Create a dimension; ``None`` makes it unlimited. Existing sizes must agree."""
        existing = self._dataset.dimensions.get(name)
        if existing is not None:
            if existing.isunlimited():
                if size is None:
                    return
            elif size is not None and len(existing) == size:
                return
            found = "unlimited" if existing.isunlimited() else len(existing)
            wanted = "unlimited" if size is None else size
            raise AxisMismatch(
                f"Dimension '{name}' in {self.path} has size {found}, expected {wanted}."
            )
        self._dataset.createDimension(name, size)

    def check_coordinate(self, name: str, values, **attributes) -> None:
        """
        Compare an existing coordinate variable with the values about to be written.

        Nothing happens when ``name`` is not in the file yet. A different
        length, different values or a differing attribute raise
        ``AxisMismatch``.
        """
        variable = self._dataset.variables.get(name)
        if variable is None:
            return

        values = np.asarray(values, dtype=np.float64)
        found = np.ma.filled(variable[:].astype(np.float64), np.nan)
        if found.shape != values.shape:
            raise AxisMismatch(
                f"Axis '{name}' in {self.path} has {found.size} step(s), expected {values.size}."
            )
        if not np.allclose(found, values):
            raise AxisMismatch(f"Axis '{name}' in {self.path} holds different values.")

        for attr_name, expected in attributes.items():
            actual = getattr(variable, attr_name, None)
            if actual != expected:
                raise AxisMismatch(
                    f"Axis '{name}' in {self.path} has {attr_name} '{actual}', expected '{expected}'."
                )

    def _variable(self, name: str, dims: Sequence[str], dtype):
        variable = self._dataset.variables.get(name)
        file_dims = self._order(dims)
        if variable is None:
            return self._dataset.createVariable(name, dtype, file_dims)
        if tuple(variable.dimensions) != file_dims:
            raise AxisMismatch(
                f"Variable '{name}' in {self.path} has dimensions {variable.dimensions}, "
                f"expected {file_dims}."
            )
        return variable

    def write_variable(self, name: str, dims: Sequence[str], data, dtype=None) -> None:
        """Write a complete variable whose dimensions already exist."""
        data = np.asarray(data)
        variable = self._variable(name, dims, dtype if dtype is not None else data.dtype)
        try:
            variable[:] = data.T if self.reverse_dims else data
        except (OSError, RuntimeError) as exc:
            raise StoreError(f"Writing '{name}' to {self.path} failed: {exc}") from exc

    def write_slice(
        self,
        name: str,
        dims: Sequence[str],
        dim_sizes: Sequence[Optional[int]],
        start: Sequence[int],
        counts: Sequence[int],
        data,
        dtype=None,
    ) -> None:
        """
        Write a rectangular block of ``name``.

        Missing dimensions are created from ``dim_sizes`` (``None`` for
        unlimited) and the variable is created on first use.
        """
        if not len(dims) == len(dim_sizes) == len(start) == len(counts):
            raise ValueError("dims, dim_sizes, start and counts must have the same length.")

        data = np.asarray(data)
        if data.shape != tuple(counts):
            raise ValueError(f"Slice data for '{name}' has shape {data.shape}, expected {tuple(counts)}.")

        for dim, size in zip(dims, dim_sizes):
            self.create_dimension(dim, size)

        variable = self._variable(name, dims, dtype if dtype is not None else data.dtype)
        index = tuple(
            slice(offset, offset + count)
            for offset, count in zip(self._order(start), self._order(counts))
        )
        try:
            variable[index] = data.T if self.reverse_dims else data
        except (OSError, RuntimeError) as exc:
            raise StoreError(f"Writing slice of '{name}' to {self.path} failed: {exc}") from exc
        self._dataset.sync()

    def set_attribute(self, value, attr_name: str, target_name: Optional[str] = None) -> None:
        """Set an attribute on variable ``target_name``, or a global one when it is None."""
        if target_name is None:
            self._dataset.setncattr(attr_name, value)
            return
        variable = self._dataset.variables.get(target_name)
        if variable is None:
            raise StoreError(f"Cannot set '{attr_name}': variable '{target_name}' does not exist.")
        variable.setncattr(attr_name, value)
