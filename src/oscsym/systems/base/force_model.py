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
Force Model - Linear Spring with Viscous Damping

    F(x, v) = -(k·x + γ·v)

Pure functions: every input is an explicit argument, nothing is captured.
Called once or twice per integration step depending on the scheme.
Finite inputs are assumed; NaN/Inf propagate to the caller, which is
responsible for detecting them.
"""

from oscsym.types.core import ScalarLike, Vector2D


def damped_spring_force(
    position: Vector2D,
    velocity: Vector2D,
    spring_constant: ScalarLike,
    damping_coefficient: ScalarLike,
) -> Vector2D:
    """
    Net force on a particle attached to a damped spring.

    Parameters
    ----------
    position : Vector2D
        Displacement from the spring's rest position
    velocity : Vector2D
        Particle velocity
    spring_constant : float
        k, restoring force per unit displacement
    damping_coefficient : float
        γ, resistive force per unit velocity

    Returns
    -------
    Vector2D
        F = -(k·x + γ·v)

    Examples
    --------
    >>> damped_spring_force(Vector2D(1.0, 0.0), Vector2D(2.0, 0.0), 4.0, 0.5)
    Vector2D(x=-5.0, y=-0.0)
    """
    return -(position * spring_constant + velocity * damping_coefficient)


def damped_spring_acceleration(
    position: Vector2D,
    velocity: Vector2D,
    spring_constant: ScalarLike,
    damping_coefficient: ScalarLike,
    mass: ScalarLike,
) -> Vector2D:
    """Acceleration a = F(x, v) / m."""
    return damped_spring_force(position, velocity, spring_constant, damping_coefficient) / mass
