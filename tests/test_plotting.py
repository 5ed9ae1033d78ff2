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
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import pytest

import numpy as np
import cartopy.crs as ccrs

import sst_viewer.plotting as plotting


@pytest.fixture
def lon():
    return np.array([160.0, 170.0, 180.0, 190.0])


@pytest.fixture
def lat():
    return np.array([55.0, 50.0])


@pytest.fixture
def slices():
    fields = []
    for i in range(3):
        values = np.ma.masked_invalid(np.full((4, 2), 5.0 + i))
        values[3, 0] = np.ma.masked
        fields.append(values)
    return fields


def test_shared_color_range(slices):
    slices[1][0, 0] = 40.0
    slices[2][1, 1] = -1.8
    vmin, vmax = plotting.shared_color_range(slices)
    assert vmin == -1.8
    assert vmax == 40.0


def test_shared_color_range_ignores_missing():
    fields = [
        np.ma.masked_array([[1.0, 1000.0]], mask=[[False, True]]),
        np.array([[np.nan, 2.0]]),
        np.ma.masked_all((1, 2)),
    ]
    assert plotting.shared_color_range(fields) == (1.0, 2.0)


def test_shared_color_range_nothing_to_use():
    with pytest.raises(ValueError):
        plotting.shared_color_range([])
    with pytest.raises(ValueError):
        plotting.shared_color_range([np.ma.masked_all((2, 2))])


def test_plot_map(tmp_path, lon, lat, slices):
    filename = tmp_path / "map.png"
    result = plotting.plot_map(lon, lat, slices[0], title="1950-01", coastlines=False, filename=filename)
    assert result is None
    assert filename.exists()
    assert filename.stat().st_size > 0


def test_plot_map_wrong_shape(tmp_path, lon, lat):
    with pytest.raises(ValueError):
        plotting.plot_map(lon, lat, np.zeros((2, 4)), coastlines=False, filename=tmp_path / "map.png")


def test_plot_histogram(tmp_path, slices):
    filename = tmp_path / "hist.png"
    plotting.plot_histogram(slices[0], units="degC", filename=filename)
    assert filename.exists()


def test_animate_maps(tmp_path, lon, lat, slices):
    filename = tmp_path / "monthlySST.html"
    result = plotting.animate_maps(
        lon, lat, slices, ["1950-01", "1950-02", "1950-03"], filename,
        width=360, height=240, coastlines=False
    )
    assert result == filename
    html = filename.read_text(encoding="utf-8")
    assert "<script" in html
    assert "data:image/png;base64" in html


def test_animate_maps_requires_html_file(tmp_path, lon, lat, slices):
    open_figures = plt.get_fignums()
    with pytest.raises(ValueError):
        plotting.animate_maps(lon, lat, slices, ["a", "b", "c"], tmp_path / "a.gif", coastlines=False)
    assert not (tmp_path / "a.gif").exists()
    assert plt.get_fignums() == open_figures


def test_masked_cells_drawn_black(lon, lat):
    values = np.ma.masked_array(np.ones((4, 2)), mask=[[True, False]] * 4)
    x, y, c = plotting._prepare(lon, lat, values)
    ax = plt.axes(projection=ccrs.PlateCarree())
    mesh = plotting._draw(ax, x, y, c, 0.0, 2.0, "jet", None, False)
    assert mesh.cmap.get_bad().tolist() == [0.0, 0.0, 0.0, 1.0]
    assert matplotlib.colormaps["jet"].get_bad().tolist() != [0.0, 0.0, 0.0, 1.0]
    plt.close("all")


def test_animate_maps_title_mismatch(tmp_path, lon, lat, slices):
    with pytest.raises(ValueError):
        plotting.animate_maps(lon, lat, slices, ["1950-01"], tmp_path / "a.html", coastlines=False)


def test_animate_maps_no_frames(tmp_path, lon, lat):
    with pytest.raises(ValueError):
        plotting.animate_maps(lon, lat, [], [], tmp_path / "a.html", coastlines=False)
