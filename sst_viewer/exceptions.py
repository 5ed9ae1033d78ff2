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


class SSTViewerError(Exception):
    """Base class for errors raised while loading or extracting SST data."""


class SourceUnavailableError(SSTViewerError):
    """The netCDF file could not be opened or the remote fetch failed."""


class UnknownVariableError(SSTViewerError, KeyError):
    """The requested variable is not in the data source."""

    def __init__(self, name, available=()):
        self.name = name
        self.available = list(available)
        super().__init__(f"Variable '{name}' not found. Available variables: {self.available}")

    def __str__(self):
        return self.args[0]


class MissingAttributeError(SSTViewerError, KeyError):
    """The requested metadata attribute is not attached to the variable."""

    def __init__(self, variable, attribute):
        self.variable = variable
        self.attribute = attribute
        super().__init__(f"Variable '{variable}' has no attribute '{attribute}'")

    def __str__(self):
        return self.args[0]
