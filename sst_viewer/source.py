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
from pathlib import Path

import numpy as np
import xarray as xr

from sst_viewer.exceptions import SourceUnavailableError, UnknownVariableError, MissingAttributeError

logger = logging.getLogger(__name__)

FIELD_DIMS = ("lon", "lat", "time")


class SSTSource:
    """
    Handle on an open netCDF data source. Wraps an xarray.Dataset that is opened without time decoding so
    that the time axis is available as the raw day offsets stored in the file.
    """

    def __init__(self, dataset, path=None):
        self.dataset = dataset
        self.path = path

    @classmethod
    def open(cls, path, mask_and_scale=True):
        """Open a local netCDF file.

        Parameters
        ----------
        path: str or Path
            Location of the netCDF file
        mask_and_scale: bool
            If True, cells equal to the missing value sentinel are converted to missing data by the reader. Set
            to False to see the raw values stored in the file.

        Returns
        -------
        SSTSource
        """
        path = Path(path)
        if not path.exists():
            logger.error(f"File {path} does not exist")
            raise SourceUnavailableError(f"File {path} does not exist")
        try:
            dataset = xr.open_dataset(path, decode_times=False, mask_and_scale=mask_and_scale)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Could not read {path}: {e}")
            raise SourceUnavailableError(f"Could not read {path}: {e}") from e
        logger.debug(f"Opened {path}")
        return cls(dataset, path=path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def close(self):
        self.dataset.close()
        logger.debug(f"Closed {self.path}")

    @property
    def variables(self):
        return list(self.dataset.variables)

    def _get(self, name):
        if name not in self.dataset.variables:
            raise UnknownVariableError(name, self.variables)
        return self.dataset[name]

    def get_variable(self, name):
        """Return the values of the named variable as a numpy array."""
        return self._get(name).values

    def get_attribute(self, variable, attribute):
        """
        Look up a metadata attribute of a variable. The reader moves some attributes, such as missing_value and
        _FillValue, out of the attributes and into the variable encoding when it applies them, so both places
        are searched.
        """
        var = self._get(variable)
        if attribute in var.attrs:
            return var.attrs[attribute]
        if attribute in var.encoding:
            return var.encoding[attribute]
        raise MissingAttributeError(variable, attribute)

    def missing_value(self, variable="sst"):
        """Return the sentinel used to flag missing data, preferring missing_value over _FillValue."""
        try:
            return self.get_attribute(variable, "missing_value")
        except MissingAttributeError:
            return self.get_attribute(variable, "_FillValue")

    def get_field(self, name="sst"):
        """
        Return a gridded variable as a masked array with dimensions ordered (lon, lat, time). Singleton
        dimensions other than these, such as a single depth level, are dropped. Missing data are masked.
        """
        var = self._get(name)
        extra = [dim for dim in var.dims if dim not in FIELD_DIMS]
        for dim in extra:
            if var.sizes[dim] != 1:
                raise ValueError(f"Cannot reduce dimension '{dim}' of size {var.sizes[dim]} for variable '{name}'")
        var = var.squeeze(extra, drop=True)
        if "time" not in var.dims:
            var = var.expand_dims("time", axis=-1)
        var = var.transpose(*FIELD_DIMS)
        return np.ma.masked_invalid(var.values)

    def describe(self):
        """Return a short text summary of the dimensions and variables in the source"""
        lines = [f"Source: {self.path}"]
        lines.append("Dimensions: " + ", ".join(f"{k}={v}" for k, v in self.dataset.sizes.items()))
        for name in self.variables:
            var = self.dataset[name]
            units = var.attrs.get("units", "")
            long_name = var.attrs.get("long_name", "")
            lines.append(f"  {name}{var.dims}: {long_name} [{units}]")
        return "\n".join(lines)
