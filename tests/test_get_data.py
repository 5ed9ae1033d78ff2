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
import io

import pytest

import numpy as np
import pandas as pd
import requests
import urllib3
import xarray as xr

import sst_viewer.get_data as get_data
from sst_viewer.exceptions import SourceUnavailableError


class FakeRaw(io.BytesIO):
    pass


class BrokenRaw(io.BytesIO):
    """Returns the first chunk of the file then drops the connection"""

    def read(self, *args):
        if self.tell() > 0:
            raise urllib3.exceptions.ProtocolError("Connection broken: IncompleteRead")
        return super().read(16)


class FakeResponse:

    def __init__(self, status_code, content=b"", raw_class=FakeRaw):
        self.status_code = status_code
        self.raw = raw_class(content)
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.closed = True
        return False


@pytest.fixture
def ersst_bytes(tmp_path):
    offset = float((pd.Timestamp("2015-05-01") - pd.Timestamp("1854-01-01")).days)
    ds = xr.Dataset(
        {'sst': (('time', 'lev', 'lat', 'lon'), np.full((1, 1, 2, 3), 12.5), {'units': 'degree_C'})},
        coords={
            'time': ('time', [offset], {'units': 'days since 1854-01-01 00:00'}),
            'lat': [-88.0, -86.0],
            'lon': [0.0, 2.0, 4.0],
        }
    )
    path = tmp_path / "template.nc"
    ds.to_netcdf(path, engine="scipy")
    return path.read_bytes()


def test_ersst_filename():
    assert get_data.ersst_filename(2015, 5) == "ersst.v5.201505.nc"
    assert get_data.ersst_filename(1950, 12, version="v4") == "ersst.v4.195012.nc"


def test_fetch_ersst(tmp_path, monkeypatch, ersst_bytes):
    requested = []

    def fake_get(url, **kwargs):
        requested.append(url)
        return FakeResponse(200, ersst_bytes)

    monkeypatch.setattr(requests, "get", fake_get)

    data_dir = tmp_path / "ERSST"
    with get_data.fetch_ersst(2015, 5, data_dir) as source:
        field = source.get_field("sst")
        time_units = source.get_attribute("time", "units")

    assert requested == ["https://www.ncei.noaa.gov/pub/data/cmb/ersst/v5/netcdf/ersst.v5.201505.nc"]
    assert (data_dir / "ersst.v5.201505.nc").exists()
    assert field.shape == (3, 2, 1)
    assert np.all(field == 12.5)
    assert time_units == 'days since 1854-01-01 00:00'


def test_cached_file_is_not_downloaded(tmp_path, monkeypatch, ersst_bytes):
    (tmp_path / "ersst.v5.201505.nc").write_bytes(ersst_bytes)

    def fake_get(url, **kwargs):
        raise AssertionError("Should not download a cached file")

    monkeypatch.setattr(requests, "get", fake_get)

    path = get_data.get_ersst_year_month(2015, 5, tmp_path)
    assert path == tmp_path / "ersst.v5.201505.nc"


def test_missing_month_on_server(tmp_path, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: FakeResponse(404))

    with pytest.raises(SourceUnavailableError):
        get_data.fetch_ersst(1700, 1, tmp_path)
    assert not (tmp_path / "ersst.v5.170001.nc").exists()


def test_offline(tmp_path, monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", fake_get)

    with pytest.raises(SourceUnavailableError):
        get_data.fetch_ersst(2015, 5, tmp_path)


def test_invalid_month(tmp_path):
    with pytest.raises(SourceUnavailableError):
        get_data.get_ersst_year_month(2015, 13, tmp_path)
    with pytest.raises(SourceUnavailableError):
        get_data.get_ersst_year_month(2015, 0, tmp_path)


def test_connection_dropped_during_download(tmp_path, monkeypatch, ersst_bytes):
    responses = []

    def fake_get(url, **kwargs):
        responses.append(FakeResponse(200, ersst_bytes, raw_class=BrokenRaw))
        return responses[-1]

    monkeypatch.setattr(requests, "get", fake_get)

    with pytest.raises(SourceUnavailableError):
        get_data.get_ersst_year_month(2015, 5, tmp_path)

    assert responses[0].closed
    assert not (tmp_path / "ersst.v5.201505.nc").exists()
    assert not (tmp_path / "ersst.v5.201505.part").exists()


def test_response_closed_after_download(tmp_path, monkeypatch, ersst_bytes):
    responses = []

    def fake_get(url, **kwargs):
        responses.append(FakeResponse(200, ersst_bytes))
        return responses[-1]

    monkeypatch.setattr(requests, "get", fake_get)

    path = get_data.get_ersst_year_month(2015, 5, tmp_path)
    assert path.read_bytes() == ersst_bytes
    assert responses[0].closed
