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
Trajectory and Result Types

Defines the types handed from the simulation core to its consumers:
- StateSnapshot: immutable copy of the particle state after a step
- SimulationResult: stacked arrays plus run statistics (TypedDict)
- PositionArrays: flattened x/y position components (TypedDict)

Shape Conventions
-----------------
- Time points: (N,)
- Vector trajectories (position, velocity, acceleration): (N, 2)
  Column 0 is the oscillation axis, column 1 stays zero.

Usage
-----
>>> from oscsym.types.trajectories import SimulationResult
>>>
>>> result: SimulationResult = engine.to_result()
>>> x = result["position"][:, 0]
>>> print(f"{result['solver']}: {result['nsteps']} steps")
"""

from dataclasses import dataclass
from typing import List

import numpy as np
from typing_extensions import TypedDict

from .core import KinematicState, Vector2D

# ============================================================================
# Snapshots
# ============================================================================


@dataclass(frozen=True)
class StateSnapshot:
    """
    Immutable copy of a particle's state at one instant.

    Vectors are immutable values, so a snapshot never aliases the live
    particle: later steps replace the particle's vectors rather than
    mutating them.

    Attributes
    ----------
    mass : float
        Particle mass
    position : Vector2D
    velocity : Vector2D
    acceleration : Vector2D
    time : float
        Elapsed simulated time when the snapshot was taken
    frame : int
        Number of completed steps when the snapshot was taken
        (0 is the initial, pre-simulation state)

    Examples
    --------
    >>> snap = system.output_state()
    >>> snap.position.x, snap.frame
    (0.5, 0)
    """

    mass: float
    position: Vector2D
    velocity: Vector2D
    acceleration: Vector2D
    time: float = 0.0
    frame: int = 0

    @property
    def kinematics(self) -> KinematicState:
        """Position, velocity and acceleration as a KinematicState."""
        return KinematicState(self.position, self.velocity, self.acceleration)

    def kinetic_energy(self) -> float:
        """½ m |v|²"""
        return 0.5 * self.mass * self.velocity.dot(self.velocity)


SnapshotSequence = List[StateSnapshot]
"""
Ordered, append-only sequence of snapshots produced by a simulation run.

Index i holds the state after the (i+1)-th step, or after the i-th step
when the initial state was recorded.
"""


# ============================================================================
# Result Types
# ============================================================================


class SimulationResult(TypedDict, total=False):
    """
    Result of a full simulation run.

    Mirrors the fields of a numerical integration result so runs of
    different integrators can be compared side by side.

    Attributes
    ----------
    t : np.ndarray
        Time points (N,)
    position : np.ndarray
        Positions (N, 2)
    velocity : np.ndarray
        Velocities (N, 2)
    acceleration : np.ndarray
        Accelerations (N, 2)
    snapshots : SnapshotSequence
        The recorded snapshots the arrays were built from
    success : bool
        Whether the run completed
    message : str
        Status message
    nsteps : int
        Number of integration steps taken
    nfev : int
        Number of force evaluations
    integration_time : float
        Wall-clock time spent in the integration loop (seconds)
    solver : str
        Integrator name

    Examples
    --------
    >>> result = engine.to_result()
    >>> result["position"].shape
    (1000, 2)
    >>> result["success"]
    True
    """

    t: np.ndarray
    position: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    snapshots: SnapshotSequence
    success: bool
    message: str
    nsteps: int
    nfev: int
    integration_time: float
    solver: str


class PositionArrays(TypedDict):
    """
    Position components of a whole run flattened into two named arrays.

    Attributes
    ----------
    x : np.ndarray
        x component of every snapshot's position (N,)
    y : np.ndarray
        y component of every snapshot's position (N,)
    """

    x: np.ndarray
    y: np.ndarray
