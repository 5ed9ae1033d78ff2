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
import matplotlib
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, HTMLWriter
import cartopy.crs as ccrs
import cartopy.feature as cfeature

from sst_viewer.utils import display_longitude, ascending_latitudes

logger = logging.getLogger(__name__)

DEFAULT_CMAP = "jet"


def shared_color_range(slices):
    """Minimum and maximum over every unmasked cell in a sequence of 2-D fields"""
    if len(slices) == 0:
        raise ValueError("No fields to calculate a colour range from")
    lows = []
    highs = []
    for field in slices:
        field = np.ma.masked_invalid(np.ma.asarray(field, dtype=float))
        if field.count() == 0:
            continue
        lows.append(field.min())
        highs.append(field.max())
    if len(lows) == 0:
        raise ValueError("Every cell in every field is missing")
    return float(min(lows)), float(max(highs))


def _map_projection(x):
    # Centre the map on the data so regions crossing the dateline are not split
    centre = (np.min(x) + np.max(x)) / 2.
    return ccrs.PlateCarree(central_longitude=centre)


def _prepare(lon, lat, values):
    """Convert (lon, lat) values into the x, y, C arrays used by pcolormesh with latitudes ascending"""
    values = np.ma.masked_invalid(np.ma.asarray(values, dtype=float))
    if values.shape != (len(lon), len(lat)):
        raise ValueError(f"Field has shape {values.shape}, expected (lon, lat) = {(len(lon), len(lat))}")
    x = display_longitude(lon)
    y, values = ascending_latitudes(lat, values)
    if x[0] > x[-1]:
        x = x[::-1]
        values = values[::-1, :]
    return x, y, values.T


def _draw(ax, x, y, c, vmin, vmax, cmap, extent, coastlines):
    proj = ccrs.PlateCarree()
    colormap = matplotlib.colormaps[cmap].with_extremes(bad="black")
    mesh = ax.pcolormesh(x, y, c, transform=proj, cmap=colormap, vmin=vmin, vmax=vmax, shading="nearest")
    if extent is not None:
        ax.set_extent(extent, crs=proj)
    if coastlines:
        ax.add_feature(cfeature.LAND, facecolor="lightgray", edgecolor="black", zorder=2)
    gl = ax.gridlines(draw_labels=True, linewidth=0.5, color="gray", alpha=0.5)
    gl.top_labels = False
    gl.right_labels = False
    return mesh


def _label_axes(ax):
    ax.text(0.5, -0.1, "Longitude", transform=ax.transAxes, ha="center", va="top")
    ax.text(-0.1, 0.5, "Latitude", transform=ax.transAxes, ha="right", va="center", rotation="vertical")


def plot_map(lon, lat, values, title=None, vmin=None, vmax=None, extent=None, coastlines=True,
             cmap=DEFAULT_CMAP, units=None, filename=None):
    """
    Plot a (lon, lat) field as a colour-mapped grid with an optional coastline overlay.

    Parameters
    ----------
    lon: np.ndarray
        Longitudes of the grid, 0 to 360 or -180 to 180
    lat: np.ndarray
        Latitudes of the grid in either order
    values: np.ndarray or np.ma.MaskedArray
        Field with dimensions (lon, lat). Masked and NaN cells are drawn in black.
    title: str or None
        Plot title
    vmin, vmax: float or None
        Limits of the colour scale. Calculated from the data if None.
    extent: list or None
        [lon_min, lon_max, lat_min, lat_max] of the map, in the same longitude convention as the plotted grid
    coastlines: bool
        If True, fill land areas and draw coastlines
    filename: str, Path or None
        If None the plot is shown, otherwise it is written to file

    Returns
    -------
    matplotlib.figure.Figure or None
        The figure if it was shown, None if it was written to file and closed
    """
    x, y, c = _prepare(lon, lat, values)
    if vmin is None or vmax is None:
        low, high = shared_color_range([c])
        vmin = low if vmin is None else vmin
        vmax = high if vmax is None else vmax

    fig = plt.figure()
    fig.set_size_inches(10, 6)
    ax = plt.axes(projection=_map_projection(x))
    mesh = _draw(ax, x, y, c, vmin, vmax, cmap, extent, coastlines)
    cbar = fig.colorbar(mesh, ax=ax, shrink=0.8)
    if units is not None:
        cbar.set_label(units)
    _label_axes(ax)
    plt.title("" if title is None else title)

    if filename is None:
        plt.show()
        return fig
    plt.savefig(filename)
    plt.close(fig)
    logger.info(f"Wrote map to {filename}")
    return None


def plot_histogram(values, bins=50, units=None, filename=None):
    """Plot the distribution of the non-missing values in a field"""
    values = np.ma.masked_invalid(np.ma.asarray(values, dtype=float)).compressed()
    fig = plt.figure()
    plt.hist(values, bins=bins)
    plt.xlabel("SST" if units is None else f"SST ({units})")
    plt.ylabel("Number of grid cells")
    if filename is None:
        plt.show()
        return fig
    plt.savefig(filename)
    plt.close(fig)
    return None


def animate_maps(lon, lat, slices, titles, filename, width=720, height=480, extent=None, coastlines=True,
                 cmap=DEFAULT_CMAP, interval=500, dpi=100):
    """
    Animate a sequence of (lon, lat) fields and write it to a single self-contained HTML file. All frames
    share one colour scale so that they can be compared.

    Parameters
    ----------
    lon: np.ndarray
        Longitudes of the grid
    lat: np.ndarray
        Latitudes of the grid
    slices: list
        (lon, lat) fields, one per frame
    titles: list of str
        Title of each frame
    filename: str or Path
        HTML file to write
    width, height: int
        Size of the animation in pixels
    interval: int
        Milliseconds between frames

    Returns
    -------
    Path
        Path of the HTML file
    """
    if len(slices) == 0:
        raise ValueError("Need at least one field to animate")
    if len(slices) != len(titles):
        raise ValueError(f"Got {len(titles)} titles for {len(slices)} fields")
    filename = Path(filename)
    if filename.suffix not in (".html", ".htm"):
        raise ValueError(f"Animation must be written to an .html file, got {filename}")

    prepared = [_prepare(lon, lat, s) for s in slices]
    vmin, vmax = shared_color_range([c for _, _, c in prepared])
    logger.info(f"Animating {len(slices)} frames with colour range {vmin:.2f} to {vmax:.2f}")

    x, y, _ = prepared[0]
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = plt.axes(projection=_map_projection(x))

    def draw_frame(i):
        ax.clear()
        _, _, c = prepared[i]
        mesh = _draw(ax, x, y, c, vmin, vmax, cmap, extent, coastlines)
        _label_axes(ax)
        ax.set_title(titles[i])
        return [mesh]

    mesh = draw_frame(0)[0]
    fig.colorbar(mesh, ax=ax, shrink=0.8)

    anim = FuncAnimation(fig, draw_frame, frames=len(prepared), interval=interval, blit=False)
    writer = HTMLWriter(fps=1000. / interval, embed_frames=True, default_mode="loop")
    anim.save(filename, writer=writer, dpi=dpi)
    plt.close(fig)
    logger.info(f"Wrote animation to {filename}")
    return filename
