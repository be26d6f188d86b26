#-*- coding: utf-8 -*-
"""
Created on Mon October 19 09:12:44 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Data instances The format of the data files is as follows:

The first line gives an unused field, the number of vehicles and the number of POIs
The second line is not used
From the third line, for each POI (starting with the depot):
The index of the POI
The x coordinate
The y coordinate
The service duration
The score
... (unused columns)
The earliest start of service (column 7 for the depot, column 8 for the POIs)
The latest start of service (column 8 for the depot, column 9 for the POIs)

The latest start of service of the depot is the maximum duration of every route.


@author: Kreecha_P

MIT License

Copyright (c) 2025 Kreecha Puphaiboon

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import logging
import os
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Column layout of a POI line
X_COLUMN = 1
Y_COLUMN = 2
SERVICE_COLUMN = 3
SCORE_COLUMN = 4
DEPOT_READY_COLUMN = 7
DEPOT_DUE_COLUMN = 8
POI_READY_COLUMN = 8
POI_DUE_COLUMN = 9


class InstanceLoadError(ValueError):
    """Raised when a TOPTW instance file is missing or malformed"""

    def __init__(self, message: str, line_number: int = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class TOPTWInstance:
    """Represents a TOPTW instance: depot, POIs, time windows and the vehicle fleet.

    Index 0 is the depot. Any index greater than the number of POIs is an alias
    of the depot (every route owns one), so all lookups go through the getters
    below instead of the raw arrays.
    """

    def __init__(self, filename: str = None, data: str = None):
        self.filename = None
        if filename and not data:
            self.load_from_file(filename)
        elif data and not filename:
            self.parse_data(data)
            self.filename = "from_data"
        elif filename and data:
            # If both are provided, treat 'data' as the folder path and 'filename' as the file
            self.load_from_file(os.path.join(data, filename))
        else:
            raise ValueError("Either filename or data must be provided")

    @classmethod
    def from_arrays(cls, vehicles: int, x: Sequence[float], y: Sequence[float], score: Sequence[float],
                    ready_time: Sequence[float], due_time: Sequence[float],
                    service_time: Sequence[float]) -> "TOPTWInstance":
        """Build an instance directly from per-POI sequences (index 0 is the depot)"""
        instance = cls.__new__(cls)
        instance.filename = "from_arrays"
        columns = [x, y, score, ready_time, due_time, service_time]
        if len({len(column) for column in columns}) != 1:
            raise ValueError("All POI sequences must have the same length")
        if len(x) < 1:
            raise ValueError("At least the depot must be given")
        instance._set_fleet(vehicles, len(x) - 1)
        instance.x = np.asarray(x, dtype=float)
        instance.y = np.asarray(y, dtype=float)
        instance.score = np.asarray(score, dtype=float)
        instance.ready_time = np.asarray(ready_time, dtype=float)
        instance.due_time = np.asarray(due_time, dtype=float)
        instance.service_time = np.asarray(service_time, dtype=float)
        instance._finish_loading()
        return instance

    def load_from_file(self, filepath: str):
        """Load TOPTW data from file"""
        self.filename = os.path.basename(filepath)
        try:
            with open(filepath, 'r') as f:
                file_content = f.read()
        except FileNotFoundError as e:
            raise InstanceLoadError(f"Could not find file: {filepath}") from e
        except OSError as e:
            raise InstanceLoadError(f"Error reading file {filepath}: {e}") from e
        self.parse_data(file_content)
        logger.info(f"Instance {self.filename} loaded: {self.poi_count} POIs, {self.vehicle_count} vehicles")

    def parse_data(self, data: str):
        """Parse TOPTW data format"""
        lines = data.strip().split('\n')
        if not lines or not lines[0].strip():
            raise InstanceLoadError("empty instance", 1)

        # First line: unused, vehicles, POIs
        header = lines[0].split()
        if len(header) < 3:
            raise InstanceLoadError(f"expected '<unused> <vehicles> <pois>', got '{lines[0].strip()}'", 1)
        try:
            vehicles = int(header[1])
            pois = int(header[2])
        except ValueError as e:
            raise InstanceLoadError(f"invalid header: {e}", 1) from e
        self._set_fleet(vehicles, pois)

        # Second line is skipped, POI lines start on the third one
        first_poi_line = 2
        if len(lines) < first_poi_line + pois + 1:
            raise InstanceLoadError(
                f"expected {pois + 1} POI lines, found {max(len(lines) - first_poi_line, 0)}", len(lines))

        self.x = np.zeros(pois + 1)
        self.y = np.zeros(pois + 1)
        self.score = np.zeros(pois + 1)
        self.ready_time = np.zeros(pois + 1)
        self.due_time = np.zeros(pois + 1)
        self.service_time = np.zeros(pois + 1)

        for i in range(pois + 1):
            line_number = first_poi_line + i + 1
            parts = lines[first_poi_line + i].split()
            if i == 0:
                ready_column, due_column = DEPOT_READY_COLUMN, DEPOT_DUE_COLUMN
            else:
                ready_column, due_column = POI_READY_COLUMN, POI_DUE_COLUMN
            if len(parts) <= due_column:
                raise InstanceLoadError(
                    f"POI {i} needs at least {due_column + 1} columns, found {len(parts)}", line_number)
            try:
                self.x[i] = float(parts[X_COLUMN])
                self.y[i] = float(parts[Y_COLUMN])
                self.service_time[i] = float(parts[SERVICE_COLUMN])
                self.score[i] = float(parts[SCORE_COLUMN])
                self.ready_time[i] = float(parts[ready_column])
                self.due_time[i] = float(parts[due_column])
            except ValueError as e:
                raise InstanceLoadError(f"POI {i}: {e}", line_number) from e

        self._finish_loading()

    def _set_fleet(self, vehicles: int, pois: int):
        if vehicles < 1:
            raise InstanceLoadError(f"at least one vehicle is required, got {vehicles}", 1)
        if pois < 0:
            raise InstanceLoadError(f"negative number of POIs: {pois}", 1)
        self.vehicle_count = vehicles
        self.poi_count = pois

    def _finish_loading(self):
        self.max_time_per_route = float(self.due_time[0])
        self.max_score = float(self.score[1:].max()) if self.poi_count > 0 else 0.0
        self.calculate_distances()

    def calculate_distances(self):
        """Calculate Euclidean distance matrix"""
        dx = self.x[:, np.newaxis] - self.x[np.newaxis, :]
        dy = self.y[:, np.newaxis] - self.y[np.newaxis, :]
        self.distances = np.sqrt(dx * dx + dy * dy)
        np.fill_diagonal(self.distances, 0.0)

    def is_depot(self, index: int) -> bool:
        return index > self.poi_count

    def _canonical(self, index: int) -> int:
        return 0 if self.is_depot(index) else index

    def get_distance(self, i: int, j: int) -> float:
        return float(self.distances[self._canonical(i)][self._canonical(j)])

    def get_time(self, i: int, j: int) -> float:
        """Travel time between two POIs (vehicles move at unit speed)"""
        return self.get_distance(i, j)

    def get_route_distance(self, route: List[int]) -> float:
        """Total distance along a sequence of POIs"""
        return sum(self.get_distance(route[k], route[k + 1]) for k in range(len(route) - 1))

    def get_routes_distance(self, routes: List[List[int]]) -> float:
        return sum(self.get_route_distance(route) for route in routes)

    def get_x(self, index: int) -> float:
        return float(self.x[self._canonical(index)])

    def get_y(self, index: int) -> float:
        return float(self.y[self._canonical(index)])

    def get_score(self, index: int) -> float:
        return float(self.score[self._canonical(index)])

    def get_ready_time(self, index: int) -> float:
        return float(self.ready_time[self._canonical(index)])

    def get_due_time(self, index: int) -> float:
        return float(self.due_time[self._canonical(index)])

    def get_service_time(self, index: int) -> float:
        return float(self.service_time[self._canonical(index)])

    def get_pois(self) -> int:
        return self.poi_count

    def get_vehicles(self) -> int:
        return self.vehicle_count

    def get_max_time_per_route(self) -> float:
        return self.max_time_per_route

    def get_max_score(self) -> float:
        """Largest score a single POI can contribute"""
        return self.max_score

    def __repr__(self):
        return (f"TOPTWInstance(filename={self.filename!r}, pois={self.poi_count}, "
                f"vehicles={self.vehicle_count}, max_time_per_route={self.max_time_per_route})")
