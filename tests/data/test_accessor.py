"""Tests for reference accessors (in-memory and NetCDF directory)."""

import numpy as np
import pandas as pd
import pytest
import xarray as xr

from envlik.contracts import DataUnavailable
from envlik.data import GridField, InMemoryAccessor, NetcdfDirectoryAccessor

pytestmark = pytest.mark.unit


def _write_sst(path, lon, lat, values, var="analysed_sst"):
    """Write a CF-like daily SST file with a singleton time dimension."""
    ds = xr.Dataset(
        {var: (("time", "lat", "lon"), values.T[None, :, :])},
        coords={"time": [np.datetime64("2024-06-01")], "lat": lat, "lon": lon},
    )
    ds.to_netcdf(path)


def _write_profile(path, lon, lat, depth, values):
    ds = xr.Dataset(
        {"water_temp": (("depth", "lat", "lon"), np.transpose(values, (2, 1, 0)))},
        coords={"depth": depth, "lat": lat, "lon": lon},
    )
    ds.to_netcdf(path)


class TestInMemoryAccessor:

    def test_dates_normalized_and_sorted(self):
        field = GridField(np.zeros((2, 2)), lon=[0, 1], lat=[0, 1])
        acc = InMemoryAccessor({"2024-06-02 12:00": field, "2024-06-01": field})

        assert list(acc.available_dates()) == [
            pd.Timestamp("2024-06-01"), pd.Timestamp("2024-06-02")
        ]
        assert acc.fetch(pd.Timestamp("2024-06-02")) is field

    def test_missing_date_raises(self):
        acc = InMemoryAccessor({})
        with pytest.raises(DataUnavailable, match="2024-06-01"):
            acc.fetch(pd.Timestamp("2024-06-01"))


class TestNetcdfDirectoryAccessor:

    def test_missing_directory(self, tmp_path, internal_config):
        with pytest.raises(FileNotFoundError):
            NetcdfDirectoryAccessor(tmp_path / "nope", internal_config)

    def test_available_dates_from_filenames(self, tmp_path, make_config):
        config = make_config(dataset={"filename_prefix": "141259"})
        lon, lat = np.array([0.0, 0.25, 0.5]), np.array([10.0, 10.25])
        for day in ("2024-06-02", "2024-06-01"):
            _write_sst(tmp_path / f"141259_{day}.nc", lon, lat, np.zeros((3, 2)))
        (tmp_path / "other_2024-06-03.nc").write_bytes(b"")
        (tmp_path / "141259_notes.nc").write_bytes(b"")

        acc = NetcdfDirectoryAccessor(tmp_path, config)

        assert list(acc.available_dates()) == [
            pd.Timestamp("2024-06-01"), pd.Timestamp("2024-06-02")
        ]

    def test_fetch_surface_transposes_to_lon_lat(self, tmp_path, make_config):
        config = make_config(dataset={"filename_prefix": "141259"})
        lon, lat = np.array([0.0, 0.25, 0.5]), np.array([10.0, 10.25])
        values = np.arange(6, dtype=float).reshape(3, 2)
        _write_sst(tmp_path / "141259_2024-06-01.nc", lon, lat, values)

        field = NetcdfDirectoryAccessor(tmp_path, config).fetch(pd.Timestamp("2024-06-01"))

        assert field.values.shape == (3, 2)
        np.testing.assert_allclose(field.values, values)
        np.testing.assert_allclose(field.lon, lon)
        assert field.depth is None
        assert field.date == pd.Timestamp("2024-06-01")

    def test_fetch_layered_field(self, tmp_path, make_config):
        config = make_config(dataset={"filename_prefix": "p", "variable": "water_temp"})
        lon, lat = np.array([0.0, 0.1]), np.array([1.0, 1.1, 1.2])
        depth = np.array([0.0, 10.0, 50.0, 100.0])
        values = np.random.default_rng(0).normal(20, 2, size=(2, 3, 4))
        _write_profile(tmp_path / "p_2024-06-01.nc", lon, lat, depth, values)

        field = NetcdfDirectoryAccessor(tmp_path, config).fetch(pd.Timestamp("2024-06-01"))

        assert field.is_layered
        assert field.values.shape == (2, 3, 4)
        np.testing.assert_allclose(field.values, values)
        np.testing.assert_allclose(field.depth, depth)

    def test_missing_file_raises(self, tmp_path, internal_config):
        acc = NetcdfDirectoryAccessor(tmp_path, internal_config)
        with pytest.raises(DataUnavailable, match="missing"):
            acc.fetch(pd.Timestamp("2024-06-01"))

    def test_missing_variable_raises(self, tmp_path, make_config):
        config = make_config(dataset={"variable": "salinity"})
        _write_sst(tmp_path / "2024-06-01.nc", np.array([0.0]), np.array([0.0]), np.zeros((1, 1)))

        acc = NetcdfDirectoryAccessor(tmp_path, config)
        with pytest.raises(DataUnavailable, match="salinity"):
            acc.fetch(pd.Timestamp("2024-06-01"))
