"""Reference data accessors.

The engine never opens files itself: it asks an accessor for the grid of a
given date. Accessors must be safe to call from several worker threads at
once; both implementations here only read.

- InMemoryAccessor: dictionary of date -> GridField
- NetcdfDirectoryAccessor: one ``{prefix}_{YYYY-MM-DD}.nc`` file per day
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Protocol, TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr

from envlik.contracts import DataUnavailable
from envlik.data.field import GridField

if TYPE_CHECKING:
    from envlik.schemas import InternalConfig

__all__ = ['ReferenceAccessor', 'InMemoryAccessor', 'NetcdfDirectoryAccessor']

logger = logging.getLogger(__name__)

_DATE_IN_NAME = re.compile(r"(\d{4}-\d{2}-\d{2})\.nc$")


class ReferenceAccessor(Protocol):
    """Read-only source of daily reference grids."""

    def available_dates(self) -> pd.DatetimeIndex:
        ...

    def fetch(self, date: pd.Timestamp) -> GridField:
        ...


class InMemoryAccessor:
    """Serve pre-loaded GridField objects keyed by calendar date."""

    def __init__(self, fields: Dict[object, GridField]):
        self._fields = {pd.Timestamp(k).normalize(): v for k, v in fields.items()}

    def available_dates(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(sorted(self._fields))

    def fetch(self, date: pd.Timestamp) -> GridField:
        key = pd.Timestamp(date).normalize()
        try:
            return self._fields[key]
        except KeyError:
            raise DataUnavailable(f"No reference grid for {key.date()}") from None


class NetcdfDirectoryAccessor:
    """Read daily reference grids from a directory of NetCDF files.

    Files are expected to be named ``{prefix}_{YYYY-MM-DD}.nc`` (the prefix
    is usually the tag identifier). Scale factors and offsets are applied by
    xarray's CF decoding. Values are returned transposed to
    ``(lon, lat[, depth])`` regardless of the on-disk dimension order.

    Parameters
    ----------
    directory : str or Path
        Directory holding the daily files.
    config : InternalConfig
        Uses ``config.dataset`` for the filename prefix, value variable and
        coordinate names. If ``dataset.variable`` is None the first variable
        whose name contains ``sst`` (case-insensitive) is used.
    """

    _LON_NAMES = ("longitude", "lon", "x")
    _LAT_NAMES = ("latitude", "lat", "y")

    def __init__(self, directory, config: "InternalConfig"):
        self.directory = Path(directory)
        self.prefix = config.dataset.filename_prefix
        self.variable = config.dataset.variable
        self.lon_name = config.dataset.lon
        self.lat_name = config.dataset.lat
        self.depth_name = config.dataset.depth

        if not self.directory.is_dir():
            raise FileNotFoundError(f"Reference directory not found: {self.directory}")

        logger.info("NetcdfDirectoryAccessor: dir=%s, prefix=%r, variable=%s",
                    self.directory, self.prefix, self.variable or "<auto sst>")

    def _path_for(self, date: pd.Timestamp) -> Path:
        stem = f"{self.prefix}_" if self.prefix else ""
        return self.directory / f"{stem}{pd.Timestamp(date):%Y-%m-%d}.nc"

    def available_dates(self) -> pd.DatetimeIndex:
        """Dates parsed from filenames in the directory."""
        pattern = f"{self.prefix}_*.nc" if self.prefix else "*.nc"
        dates = []
        for path in self.directory.glob(pattern):
            match = _DATE_IN_NAME.search(path.name)
            if match:
                dates.append(pd.Timestamp(match.group(1)))
        return pd.DatetimeIndex(sorted(set(dates)))

    def fetch(self, date: pd.Timestamp) -> GridField:
        path = self._path_for(date)
        if not path.exists():
            raise DataUnavailable(f"Reference file missing: {path.name}")

        with xr.open_dataset(path) as ds:
            var = self._value_variable(ds)
            da = ds[var]
            lon = self._coord_name(ds, self.lon_name, self._LON_NAMES)
            lat = self._coord_name(ds, self.lat_name, self._LAT_NAMES)
            order = [lon, lat]
            if self.depth_name in da.dims:
                order.append(self.depth_name)

            extra = [d for d in da.dims if d not in order]
            for dim in extra:
                if da.sizes[dim] != 1:
                    raise DataUnavailable(
                        f"{path.name}: unexpected non-singleton dimension '{dim}'"
                    )
            if extra:
                da = da.squeeze(extra, drop=True)
            da = da.transpose(*order)

            depth = ds[self.depth_name].values if len(order) == 3 else None
            field = GridField(
                values=np.asarray(da.values, dtype=np.float64),
                lon=ds[lon].values,
                lat=ds[lat].values,
                depth=depth,
                date=pd.Timestamp(date).normalize(),
            )

        logger.debug("Fetched %s: var=%s, shape=%s", path.name, var, field.values.shape)
        return field

    def _value_variable(self, ds: xr.Dataset) -> str:
        if self.variable is not None:
            if self.variable not in ds.data_vars:
                raise DataUnavailable(f"Variable '{self.variable}' not in dataset")
            return self.variable
        for name in ds.data_vars:
            if "sst" in name.lower():
                return name
        raise DataUnavailable("No value variable configured and no 'sst' variable found")

    @staticmethod
    def _coord_name(ds: xr.Dataset, preferred: str, candidates: Iterable[str]) -> str:
        if preferred in ds.variables:
            return preferred
        for name in candidates:
            if name in ds.variables:
                return name
        raise DataUnavailable(f"Coordinate '{preferred}' not found in dataset")
