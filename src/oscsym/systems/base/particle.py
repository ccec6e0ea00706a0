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
Particle - Point Mass Kinematic State

Holds the mutable kinematic state of the oscillating mass. The particle
knows nothing about integration schemes: integrators read its state and
replace it with a new one after each step.
"""

from typing import Optional

from oscsym.exceptions import ConfigurationError
from oscsym.types.core import KinematicState, ScalarLike, Vector2D
from oscsym.types.trajectories import StateSnapshot
from oscsym.validation import as_finite_float


class Particle:
    """
    Point mass with position, velocity and acceleration.

    The mass is fixed for the particle's lifetime. Position, velocity and
    acceleration are immutable Vector2D values that are replaced, never
    mutated in place.

    Parameters
    ----------
    mass : float
        Particle mass, must be positive and finite
    position : Vector2D
        Initial position
    velocity : Vector2D
        Initial velocity
    acceleration : Vector2D
        Initial acceleration

    Raises
    ------
    ConfigurationError
        If mass is not a positive finite number

    Examples
    --------
    >>> p = Particle(2.0, Vector2D(0.5, 0.0), Vector2D(-0.25, 0.0), Vector2D.ZERO)
    >>> p.set_state(KinematicState(Vector2D(0.4, 0), Vector2D(-0.3, 0), Vector2D(-1, 0)))
    >>> p.position
    Vector2D(x=0.4, y=0.0)
    """

    def __init__(
        self,
        mass: ScalarLike,
        position: Optional[Vector2D] = None,
        velocity: Optional[Vector2D] = None,
        acceleration: Optional[Vector2D] = None,
    ):
        mass = as_finite_float("Particle mass", mass)
        if mass <= 0:
            raise ConfigurationError(f"Particle mass must be positive and finite, got {mass}")

        self._mass = mass
        self._position = position if position is not None else Vector2D.ZERO
        self._velocity = velocity if velocity is not None else Vector2D.ZERO
        self._acceleration = acceleration if acceleration is not None else Vector2D.ZERO

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def position(self) -> Vector2D:
        return self._position

    @position.setter
    def position(self, value: Vector2D):
        self._position = value

    @property
    def velocity(self) -> Vector2D:
        return self._velocity

    @velocity.setter
    def velocity(self, value: Vector2D):
        self._velocity = value

    @property
    def acceleration(self) -> Vector2D:
        return self._acceleration

    @acceleration.setter
    def acceleration(self, value: Vector2D):
        self._acceleration = value

    @property
    def state(self) -> KinematicState:
        """Current (position, velocity, acceleration)."""
        return KinematicState(self._position, self._velocity, self._acceleration)

    def set_state(self, state: KinematicState):
        """Replace position, velocity and acceleration in one call."""
        self._position, self._velocity, self._acceleration = state

    def output_state(self, time: float = 0.0, frame: int = 0) -> StateSnapshot:
        """
        Take an immutable snapshot of the particle.

        Parameters
        ----------
        time : float
            Elapsed simulated time to tag the snapshot with
        frame : int
            Step count to tag the snapshot with

        Returns
        -------
        StateSnapshot
        """
        return StateSnapshot(
            mass=self._mass,
            position=self._position,
            velocity=self._velocity,
            acceleration=self._acceleration,
            time=time,
            frame=frame,
        )

    def __repr__(self) -> str:
        return (
            f"Particle(mass={self._mass}, position={self._position}, "
            f"velocity={self._velocity}, acceleration={self._acceleration})"
        )
