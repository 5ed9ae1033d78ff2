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
import sys


def setup_logging(settings=None):
    """
    Configure the sst_viewer logger with a detailed log file and terse console output.

    Parameters
    ----------
    settings: dict or None
        The logging section of the configuration, with log_file, console_level and file_mode

    Returns
    -------
    logging.Logger
    """
    if settings is None:
        settings = {}

    console_level = str(settings.get('console_level', 'INFO')).upper()
    if not isinstance(logging.getLevelName(console_level), int):
        raise ValueError(f"Invalid logging.console_level '{console_level}'")

    logger = logging.getLogger("sst_viewer")
    logger.setLevel(logging.DEBUG)

    # Calling this twice should not duplicate output
    if logger.handlers:
        return logger

    log_file = settings.get('log_file', 'sst_viewer.log')
    file_handler = logging.FileHandler(log_file, mode=settings.get('file_mode', 'w'), encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level))
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    return logger
