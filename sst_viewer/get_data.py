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
import shutil

import requests
import urllib3

from sst_viewer.exceptions import SourceUnavailableError
from sst_viewer.source import SSTSource

logger = logging.getLogger(__name__)

ERSST_URL = "https://www.ncei.noaa.gov/pub/data/cmb/ersst/{version}/netcdf/{filename}"


def ersst_filename(year, month, version="v5"):
    return f"ersst.{version}.{year}{month:02d}.nc"


def get_ersst_year_month(year, month, data_dir, version="v5", timeout=60):
    """Download a single month of ERSST from NOAA NCEI unless it is already in the data directory.

    Parameters
    ----------
    year: int
        Year to download
    month: int
        Month to download, 1 to 12
    data_dir: str or Path
        Directory in which downloaded files are kept
    version: str
        ERSST version, e.g. "v5"
    timeout: float
        Seconds to wait for the server before giving up

    Returns
    -------
    Path
        Path of the local copy of the file
    """
    if not 1 <= month <= 12:
        raise SourceUnavailableError(f"Month must be between 1 and 12, got {month}")

    filename = ersst_filename(year, month, version)
    url = ERSST_URL.format(version=version, filename=filename)

    data_dir = Path(data_dir)
    out_path = data_dir / filename

    if out_path.exists():
        logger.info(f"File {out_path} already exists, skipping download.")
        return out_path

    logger.info(f"Downloading {url}")
    data_dir.mkdir(parents=True, exist_ok=True)
    partial_path = out_path.with_suffix(".part")
    try:
        with requests.get(url, stream=True, headers={'User-agent': 'Mozilla/5.0'}, timeout=timeout) as r:
            if r.status_code != 200:
                logger.error(f"Request for {url} failed with status {r.status_code}")
                raise SourceUnavailableError(
                    f"No ERSST data for {year}-{month:02d} ({version}): HTTP {r.status_code}"
                )
            with open(partial_path, 'wb') as f:
                r.raw.decode_content = True
                shutil.copyfileobj(r.raw, f)
    except (OSError, requests.exceptions.RequestException, urllib3.exceptions.HTTPError) as e:
        partial_path.unlink(missing_ok=True)
        logger.error(f"Download of {url} failed: {e}")
        raise SourceUnavailableError(f"Download of {url} failed") from e
    partial_path.rename(out_path)

    return out_path


def fetch_ersst(year, month, data_dir, version="v5"):
    """Fetch one month of ERSST and open it. Returns an SSTSource that should be closed after use."""
    path = get_ersst_year_month(year, month, data_dir, version=version)
    return SSTSource.open(path)
