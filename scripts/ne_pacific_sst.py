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
"""
Walk through a NOAA ERSST subset of the north-east Pacific (49N to 65N, 179E to 225E, monthly means).

Reads the file named in config.yaml, checks how missing data were handled, plots the most recent month and
the May climatology, and writes an HTML animation of the first twelve months.
"""
import logging
from pathlib import Path
import sys

from sst_viewer.config import load_config
from sst_viewer.logging_config import setup_logging
from sst_viewer.source import SSTSource
from sst_viewer.field import SSTField
from sst_viewer import plotting

logger = logging.getLogger("sst_viewer.scripts.ne_pacific_sst")


if __name__ == "__main__":
    config_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.yaml")
    config = load_config(config_file if config_file.exists() else None)
    setup_logging(config.logging)

    # Open the file, have a look at what is in it and pull out the coordinates, times and SSTs
    with SSTSource.open(config.data_file) as source:
        logger.info(source.describe())
        logger.info(f"SST units: {source.get_attribute('sst', 'units')}")
        logger.info(f"Time units: {source.get_attribute('time', 'units')}")
        sst = SSTField.from_source(source)

    logger.info(f"SST grid: {len(sst.lon)} longitudes, {len(sst.lat)} latitudes, {len(sst.time)} months")
    logger.info(f"Time range: {sst.year_months[0]} to {sst.year_months[-1]}")

    # The reader converts the missing value sentinel to masked cells, so none should be left
    sst.contains_sentinel()

    plotting.plot_histogram(sst.values, units=sst.units, filename=config.data_dir / "sst_histogram.png")

    extent = config.extent

    plotting.plot_map(
        sst.lon, sst.lat, sst.time_slice(-1),
        title=sst.year_months[-1], extent=extent, units=sst.units,
        filename=config.data_dir / f"sst_{sst.year_months[-1]}.png"
    )

    may = sst.month_mean("05")
    plotting.plot_map(
        sst.lon, sst.lat, may,
        title="May climatology", extent=extent, units=sst.units,
        filename=config.data_dir / "sst_may_climatology.png"
    )

    n_frames = min(config.animation['n_frames'], len(sst.time))
    plotting.animate_maps(
        sst.lon, sst.lat,
        [sst.time_slice(i) for i in range(n_frames)],
        list(sst.year_months[:n_frames]),
        config.animation_file,
        width=config.animation['width'],
        height=config.animation['height'],
        extent=extent,
    )
