"""Tests for the NetCDF slice writer."""

import numpy as np
import pytest
from netCDF4 import Dataset

from lpj2nc.exceptions import AxisMismatch, OutputExists, StoreError
from lpj2nc.store import NetCDFStore


def _read(path, name):
    with Dataset(path) as ds:
        ds.set_auto_mask(False)
        return ds[name].dimensions, ds[name][:]


class TestNetCDFStore:
    def test_reversed_dimension_order(self, tmp_path):
        path = tmp_path / "out.nc"
        cube = np.arange(24, dtype=np.float64).reshape(4, 3, 2)
        with NetCDFStore(path) as store:
            store.write_slice("v", ("lon", "lat", "time"), (4, 3, None), (0, 0, 0), (4, 3, 2), cube)

        dims, data = _read(path, "v")
        assert dims == ("time", "lat", "lon")
        np.testing.assert_array_equal(data, cube.T)

    def test_natural_dimension_order(self, tmp_path):
        path = tmp_path / "out.nc"
        cube = np.ones((4, 3, 2))
        with NetCDFStore(path, reverse_dims=False) as store:
            store.write_slice("v", ("lon", "lat", "time"), (4, 3, None), (0, 0, 0), (4, 3, 2), cube)
        dims, data = _read(path, "v")
        assert dims == ("lon", "lat", "time")
        assert data.shape == (4, 3, 2)

    def test_slices_extend_unlimited_axis(self, tmp_path):
        path = tmp_path / "out.nc"
        with NetCDFStore(path) as store:
            for year in range(3):
                block = np.full((2, 2, 12), float(year))
                store.write_slice(
                    "data", ("lon", "lat", "time"), (2, 2, None), (0, 0, 12 * year), (2, 2, 12), block
                )
        _, data = _read(path, "data")
        assert data.shape == (36, 2, 2)
        assert data[0, 0, 0] == 0.0
        assert data[12, 1, 1] == 1.0
        assert data[35, 0, 1] == 2.0
        with Dataset(path) as ds:
            assert ds.dimensions["time"].isunlimited()

    def test_nan_survives(self, tmp_path):
        path = tmp_path / "out.nc"
        block = np.full((2, 2, 1), np.nan, dtype=np.float32)
        block[1, 0, 0] = 5.0
        with NetCDFStore(path) as store:
            store.write_slice("v", ("lon", "lat", "time"), (2, 2, None), (0, 0, 0), (2, 2, 1), block)
        _, data = _read(path, "v")
        assert data[0, 0, 1] == 5.0
        assert np.isnan(data[0, 0, 0])

    def test_slice_shape_checked(self, tmp_path):
        with NetCDFStore(tmp_path / "out.nc") as store:
            with pytest.raises(ValueError):
                store.write_slice("v", ("lon",), (3,), (0,), (3,), np.ones(2))

    def test_attributes(self, tmp_path):
        path = tmp_path / "out.nc"
        with NetCDFStore(path) as store:
            store.create_dimension("lon", 2)
            store.write_variable("lon", ("lon",), np.array([0.5, 1.5]))
            store.set_attribute("degree_east", "units", "lon")
            store.set_attribute("me", "created_by")
        with Dataset(path) as ds:
            assert ds["lon"].units == "degree_east"
            assert ds.created_by == "me"

    def test_attribute_on_missing_variable(self, tmp_path):
        with NetCDFStore(tmp_path / "out.nc") as store:
            with pytest.raises(StoreError):
                store.set_attribute("x", "units", "nothing")

    def test_dimension_size_conflict(self, tmp_path):
        with NetCDFStore(tmp_path / "out.nc") as store:
            store.create_dimension("lon", 4)
            store.create_dimension("lon", 4)
            store.create_dimension("time", None)
            store.create_dimension("time", None)
            with pytest.raises(AxisMismatch):
                store.create_dimension("lon", 5)
            with pytest.raises(AxisMismatch):
                store.create_dimension("time", 3)


class TestOpenModes:
    def _make(self, path):
        with NetCDFStore(path) as store:
            store.create_dimension("lon", 2)
            store.write_variable("lon", ("lon",), np.array([0.5, 1.5]))

    def test_create_refuses_existing(self, tmp_path):
        path = tmp_path / "out.nc"
        self._make(path)
        with pytest.raises(OutputExists):
            NetCDFStore(path)

    def test_overwrite_replaces(self, tmp_path):
        path = tmp_path / "out.nc"
        self._make(path)
        with NetCDFStore(path, mode="overwrite"):
            pass
        with Dataset(path) as ds:
            assert "lon" not in ds.variables

    def test_modify_keeps_existing(self, tmp_path):
        path = tmp_path / "out.nc"
        self._make(path)
        with NetCDFStore(path, mode="modify") as store:
            store.create_dimension("lon", 2)
            store.write_slice("v", ("lon",), (2,), (0,), (2,), np.array([1.0, 2.0]))
        with Dataset(path) as ds:
            assert set(ds.variables) == {"lon", "v"}

    def test_modify_detects_axis_mismatch(self, tmp_path):
        path = tmp_path / "out.nc"
        self._make(path)
        with NetCDFStore(path, mode="modify") as store:
            with pytest.raises(AxisMismatch):
                store.create_dimension("lon", 3)

    def test_check_coordinate(self, tmp_path):
        path = tmp_path / "out.nc"
        self._make(path)
        with NetCDFStore(path, mode="modify") as store:
            store.set_attribute("degree_east", "units", "lon")
            store.check_coordinate("lon", [0.5, 1.5], units="degree_east")
            store.check_coordinate("time", [0.0, 1.0])
            with pytest.raises(AxisMismatch, match="step"):
                store.check_coordinate("lon", [0.5, 1.5, 2.5])
            with pytest.raises(AxisMismatch, match="values"):
                store.check_coordinate("lon", [1.0, 2.0])
            with pytest.raises(AxisMismatch, match="units"):
                store.check_coordinate("lon", [0.5, 1.5], units="degrees")

    def test_modify_creates_missing_file(self, tmp_path):
        path = tmp_path / "new.nc"
        with NetCDFStore(path, mode="modify"):
            pass
        assert path.exists()

    def test_unknown_mode(self, tmp_path):
        with pytest.raises(ValueError):
            NetCDFStore(tmp_path / "out.nc", mode="append")

    def test_unwritable_location(self, tmp_path):
        with pytest.raises(StoreError):
            NetCDFStore(tmp_path / "missing" / "out.nc")
