# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Snapshot Exporters

Write a finished run's snapshots to text files. Exporters never run inside
the integration loop; they consume the sequence the engine returned.

Formats
-------
OVITO (XYZ-like), one block per snapshot::

    4
    <frame index>
    <x> <y> <vx> <vy>
    0 0 0 0
    100 0 0 0
    -100 0 0 0

The last three lines are fixed marker points (origin and two limits) that
keep the viewer's bounding box constant across frames.

Movement (MATLAB/Octave script)::

    x = [x0, x1, ...];
    y = [y0, y1, ...];

Examples
--------
>>> snapshots = SimulationEngine(system).run()
>>> OvitoExporter("output/ovito.xyz").save(snapshots)
>>> MovementExporter("output/movement.m").save(snapshots)
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Sequence, Union

import numpy as np

from oscsym.types.trajectories import PositionArrays, StateSnapshot

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Marker points written after the particle in every OVITO frame
_OVITO_MARKERS = ("0 0 0 0", "100 0 0 0", "-100 0 0 0")


def _format_number(value: float) -> str:
    return repr(float(value))


def flatten_positions(snapshots: Iterable[StateSnapshot]) -> PositionArrays:
    """
    Split snapshot positions into x and y arrays.

    Parameters
    ----------
    snapshots : Iterable[StateSnapshot]

    Returns
    -------
    PositionArrays
        {'x': (N,), 'y': (N,)}

    Examples
    --------
    >>> arrays = flatten_positions(snapshots)
    >>> arrays["x"][0]
    1.0
    """
    positions = [(s.position.x, s.position.y) for s in snapshots]
    if not positions:
        return PositionArrays(x=np.empty(0), y=np.empty(0))
    stacked = np.array(positions, dtype=np.float64)
    return PositionArrays(x=stacked[:, 0], y=stacked[:, 1])


class _TextExporter(ABC):
    """Common file handling: parent directories, encoding and logging."""

    def __init__(self, path: PathLike):
        self.path = Path(path)

    @abstractmethod
    def render(self, snapshots: Sequence[StateSnapshot]) -> str:
        """File contents for the snapshots."""
        pass

    def save(self, snapshots: Sequence[StateSnapshot]) -> Path:
        """
        Write the snapshots to ``self.path``, creating parent directories.

        Returns
        -------
        Path
            The written file
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(snapshots), encoding="utf-8")
        logger.info("Saved %d snapshots to %s", len(snapshots), self.path)
        return self.path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.path}')"


class OvitoExporter(_TextExporter):
    """
    OVITO frame-by-frame exporter.

    Frames are numbered by their position in the saved sequence, starting
    at 0.
    """

    @staticmethod
    def format_frame(snapshot: StateSnapshot, frame: int) -> str:
        """
        Text block for one snapshot.

        Examples
        --------
        >>> print(OvitoExporter.format_frame(snapshot, 0), end="")
        4
        0
        1.0 0.0 0.0 0.0
        0 0 0 0
        100 0 0 0
        -100 0 0 0
        """
        particle = " ".join(
            _format_number(value)
            for value in (
                snapshot.position.x,
                snapshot.position.y,
                snapshot.velocity.x,
                snapshot.velocity.y,
            )
        )
        lines = ["4", str(frame), particle, *_OVITO_MARKERS]
        return "\n".join(lines) + "\n"

    def render(self, snapshots: Sequence[StateSnapshot]) -> str:
        return "".join(
            self.format_frame(snapshot, frame) for frame, snapshot in enumerate(snapshots)
        )


class MovementExporter(_TextExporter):
    """Exporter of the particle's path as two MATLAB/Octave vectors."""

    def render(self, snapshots: Sequence[StateSnapshot]) -> str:
        arrays = flatten_positions(snapshots)
        x = ", ".join(_format_number(value) for value in arrays["x"])
        y = ", ".join(_format_number(value) for value in arrays["y"])
        return f"x = [{x}];\ny = [{y}];\n"
