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
"""Download a single month of global ERSST from NOAA and map it, e.g. python ersst_month.py 2015 5"""
import sys

from sst_viewer.config import load_config
from sst_viewer.logging_config import setup_logging
from sst_viewer.get_data import fetch_ersst
from sst_viewer.field import SSTField
from sst_viewer import plotting


if __name__ == "__main__":
    year = int(sys.argv[1]) if len(sys.argv) > 1 else 2015
    month = int(sys.argv[2]) if len(sys.argv) > 2 else 5

    config = load_config()
    setup_logging(config.logging)

    with fetch_ersst(year, month, config.data_dir, version=config.ersst_version) as source:
        sst = SSTField.from_source(source)

    plotting.plot_map(
        sst.lon, sst.lat, sst.time_slice(0),
        title=f"ERSST {year}-{month:02d}", units=sst.units,
        filename=config.data_dir / f"ersst_{year}{month:02d}.png"
    )
