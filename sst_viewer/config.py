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
import copy
import os
from pathlib import Path

import yaml

DEFAULT_CONFIG = {
    'data': {
        'data_dir': None,
        'filename': 'netCDF.nc',
        'ersst_version': 'v5',
    },
    'region': {
        'extent': [-181, -135, 49, 65],
    },
    'animation': {
        'filename': 'monthlySST.html',
        'width': 720,
        'height': 480,
        'n_frames': 12,
    },
    'logging': {
        'log_file': 'sst_viewer.log',
        'console_level': 'INFO',
        'file_mode': 'w',
    },
}


class Config:
    """Settings for a run, read from a YAML file and merged over the defaults."""

    def __init__(self, settings):
        self.settings = settings

    @property
    def data_dir(self):
        """Directory holding input data and outputs. Falls back to $SSTDIR, then the current directory."""
        data_dir = self.settings['data']['data_dir']
        if data_dir is None:
            data_dir = os.getenv("SSTDIR", ".")
        return Path(data_dir)

    @property
    def data_file(self):
        return self.data_dir / self.settings['data']['filename']

    @property
    def ersst_version(self):
        return self.settings['data']['ersst_version']

    @property
    def extent(self):
        return list(self.settings['region']['extent'])

    @property
    def animation(self):
        return self.settings['animation']

    @property
    def animation_file(self):
        return self.data_dir / self.settings['animation']['filename']

    @property
    def logging(self):
        return self.settings['logging']


def _merge(defaults, overrides, path):
    merged = copy.deepcopy(defaults)
    for section, values in overrides.items():
        if section not in defaults:
            raise ValueError(f"Unknown section '{section}' in {path}")
        if not isinstance(values, dict):
            raise ValueError(f"Invalid {section} section in {path}; expected mapping.")
        merged[section].update(values)
    return merged


def _validate(settings):
    extent = settings['region']['extent']
    if not isinstance(extent, (list, tuple)) or len(extent) != 4:
        raise ValueError("region.extent must be a list of four numbers [lon_min, lon_max, lat_min, lat_max]")
    if not all(isinstance(e, (int, float)) for e in extent):
        raise ValueError("region.extent must be a list of four numbers [lon_min, lon_max, lat_min, lat_max]")

    for key in ['width', 'height', 'n_frames']:
        value = settings['animation'][key]
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"animation.{key} must be a positive integer")

    if settings['logging']['file_mode'] not in ('w', 'a'):
        raise ValueError("logging.file_mode must be 'w' or 'a'")


def load_config(path=None):
    """Read settings from a YAML file. With no file the defaults are used.

    Parameters
    ----------
    path: str, Path or None
        YAML configuration file

    Returns
    -------
    Config
    """
    overrides = {}
    if path is not None:
        with open(path, 'r') as f:
            overrides = yaml.safe_load(f) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"Invalid configuration in {path}; expected mapping.")

    settings = _merge(DEFAULT_CONFIG, overrides, path)
    _validate(settings)
    return Config(settings)
