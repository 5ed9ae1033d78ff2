#   SST Viewer gridded sea-surface temperature tools
#   Copyright (C) 2025 John Kennedy
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU General Public License as published by
#   the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU General Public License for more details.
#
#   You should have received a copy of the GNU General Public License
#   along with this program.  If not, see <https://www.gnu.org/licenses/>.
import logging

import numpy as np
import xarray as xr

from sst_viewer.exceptions import MissingAttributeError
from sst_viewer.source import SSTSource
from sst_viewer.utils import map_times, parse_time_origin, DEFAULT_TIME_ORIGIN

logger = logging.getLogger(__name__)

MONTHS = [f"{m:02d}" for m in range(1, 13)]


def contains_sentinel(values, sentinel):
    """Return True if any unmasked cell in values is exactly equal to the sentinel."""
    values = np.ma.masked_invalid(np.ma.asarray(values, dtype=float))
    return bool(np.any(values.filled(np.nan) == sentinel))


def month_mean(values, months, target):
    """Average the time slices of a (lon, lat, time) field that fall in the target month.

    Parameters
    ----------
    values: np.ma.MaskedArray
        Field with dimensions (lon, lat, time). Masked cells are ignored.
    months: array-like of str
        Two-digit month string for each time step
    target: str
        Month to average, e.g. "05"

    Returns
    -------
    np.ma.MaskedArray
        Array with dimensions (lon, lat). Cells where every matching time step is masked are masked.
    """
    values = np.ma.masked_invalid(np.ma.asarray(values, dtype=float))
    selection = np.asarray(months) == target
    if values.shape[2] != len(selection):
        raise ValueError(f"Got {len(selection)} month labels for {values.shape[2]} time steps")
    if not np.any(selection):
        raise ValueError(f"No time steps found for month {target}")
    result = np.ma.mean(values[:, :, selection], axis=2)
    return np.ma.masked_array(result, mask=np.ma.getmaskarray(result))


class SSTField:

    def __init__(self, lon, lat, time, values, units=None, sentinel=None, origin=DEFAULT_TIME_ORIGIN):
        self.lon = np.asarray(lon)
        self.lat = np.asarray(lat)
        self.time = np.asarray(time)
        self.values = np.ma.masked_invalid(np.ma.asarray(values, dtype=float))
        self.units = units
        self.sentinel = sentinel
        self.origin = origin

        expected = (len(self.lon), len(self.lat), len(self.time))
        if self.values.shape != expected:
            raise ValueError(f"Field has shape {self.values.shape}, expected (lon, lat, time) = {expected}")

        self.times = map_times(self.time, self.origin)

    @property
    def months(self):
        return self.times["month"].values

    @property
    def year_months(self):
        return self.times["year_month"].values

    def contains_sentinel(self):
        """
        Check whether the raw missing-value sentinel survives in the field. The reader normally converts these
        cells to masked values so this is expected to be False. Used as a check rather than a filter.
        """
        if self.sentinel is None:
            raise ValueError("Field has no missing value sentinel to check against")
        found = contains_sentinel(self.values, self.sentinel)
        logger.info(
            f"Cells equal to missing value {self.sentinel}: {'found' if found else 'none'}; "
            f"masked cells: {np.ma.count_masked(self.values)}"
        )
        return found

    def month_mean(self, month):
        """Calculate the mean for each grid cell over all time steps in the specified month ("01" to "12")"""
        return month_mean(self.values, self.months, month)

    def monthly_climatology(self):
        """Calculate the mean of each calendar month.

        Returns
        -------
        np.ma.MaskedArray
            Array with dimensions (lon, lat, 12). Months with no time steps are fully masked.
        """
        clim = np.ma.masked_all((len(self.lon), len(self.lat), 12))
        for i, month in enumerate(MONTHS):
            if month not in self.months:
                logger.warning(f"No time steps for month {month}, leaving it masked")
                continue
            clim[:, :, i] = self.month_mean(month)
        return clim

    def time_slice(self, index):
        """Return the (lon, lat) field at one time index. Negative indices count back from the end."""
        return self.values[:, :, index]

    def to_xarray(self):
        """Make an xarray Dataset with decoded times and dimensions ordered (time, lat, lon)"""
        data = np.transpose(self.values.filled(np.nan), (2, 1, 0))
        attrs = {'long_name': 'sea surface temperature'}
        if self.units is not None:
            attrs['units'] = self.units
        ds = xr.Dataset({
            'sst': xr.DataArray(
                data=data,
                dims=['time', 'lat', 'lon'],
                coords={'time': self.times["date"].values, 'lat': self.lat, 'lon': self.lon},
                attrs=attrs
            )
        },
            attrs={'project': 'sst viewer'}
        )
        return ds

    @staticmethod
    def from_source(source, variable="sst"):
        """Read the coordinates, time axis, field and metadata needed to build an SSTField from an open source"""
        lon = source.get_variable("lon")
        lat = source.get_variable("lat")
        time = source.get_variable("time")
        values = source.get_field(variable)

        try:
            origin = parse_time_origin(source.get_attribute("time", "units"))
        except MissingAttributeError:
            logger.warning(f"Time has no units, assuming days since {DEFAULT_TIME_ORIGIN}")
            origin = DEFAULT_TIME_ORIGIN

        try:
            units = source.get_attribute(variable, "units")
        except MissingAttributeError:
            units = None

        try:
            sentinel = source.missing_value(variable)
        except MissingAttributeError:
            sentinel = None

        return SSTField(lon, lat, time, values, units=units, sentinel=sentinel, origin=origin)


def load_field(path, variable="sst"):
    """Open a netCDF file, extract the field and release the file."""
    with SSTSource.open(path) as source:
        return SSTField.from_source(source, variable)
