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
import re

import numpy as np
import pandas as pd

DEFAULT_TIME_ORIGIN = "1800-01-01"


def parse_time_origin(units):
    """Extract the origin date from CF style time units.

    Parameters
    ----------
    units: str
        Time units such as "days since 1800-1-1 00:00:00"

    Returns
    -------
    pd.Timestamp
        The origin date
    """
    match = re.match(r"\s*days\s+since\s+(\S+)(\s+\S+)?", units)
    if match is None:
        raise ValueError(f"Expected time units of the form 'days since <date>', got '{units}'")
    origin = match.group(1)
    if match.group(2) is not None:
        origin = origin + match.group(2)
    return pd.Timestamp(origin)


def convert_dates(offsets, origin=DEFAULT_TIME_ORIGIN):
    """Convert day offsets from the origin to a DatetimeIndex"""
    offsets = np.asarray(offsets, dtype=float)
    return pd.Timestamp(origin) + pd.to_timedelta(offsets, unit="D")


def map_times(offsets, origin=DEFAULT_TIME_ORIGIN):
    """
    Map numeric day offsets onto calendar dates and the year, month and year-month labels used to select and
    title time slices.

    Parameters
    ----------
    offsets: array-like
        Days since the origin
    origin: str or pd.Timestamp
        Origin of the time axis

    Returns
    -------
    pd.DataFrame
        One row per offset with columns date, year ("YYYY"), month ("MM") and year_month ("YYYY-MM")
    """
    dates = convert_dates(offsets, origin)
    return pd.DataFrame(
        {
            "date": dates,
            "year": dates.strftime("%Y"),
            "month": dates.strftime("%m"),
            "year_month": dates.strftime("%Y-%m"),
        }
    )


def signed_longitude(lon):
    """Convert longitudes in the range 0 to 360 to signed longitudes where west is negative."""
    lon = np.asarray(lon, dtype=float)
    return np.where(lon > 180, lon - 360, lon)


def display_longitude(lon):
    """
    Longitudes for plotting. Uses signed longitudes unless that would break the ordering of a region that
    crosses the dateline, in which case every longitude is shifted west by 360 degrees so the axis stays
    continuous (179E to 225E becomes -181 to -135).
    """
    lon = np.asarray(lon, dtype=float)
    signed = signed_longitude(lon)
    if len(signed) < 2 or np.all(np.diff(signed) > 0) or np.all(np.diff(signed) < 0):
        return signed
    return lon - 360


def ascending_latitudes(lat, values):
    """
    Put latitudes into ascending order, reversing the latitude axis (axis 1) of the accompanying
    (longitude, latitude) values to match.
    """
    lat = np.asarray(lat)
    if len(lat) > 1 and lat[0] > lat[-1]:
        return lat[::-1], values[:, ::-1]
    return lat, values
