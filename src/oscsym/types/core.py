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
Core Types - Fundamental Building Blocks

Defines the most basic value types used throughout the package:
- Scalar aliases for physical parameters and time steps
- Vector2D, the immutable 2-component vector used for position,
  velocity, acceleration and force
- KinematicState, the (position, velocity, acceleration) triple an
  integrator produces on every step

Design Philosophy
----------------
- **Immutable values**: every arithmetic operation returns a new vector,
  so a vector held by an integrator can never be mutated through an alias
  held by a particle (and vice versa)
- **Semantic Clarity**: names convey physical meaning
- **NumPy at the edges**: vectors convert to arrays only when results are
  stacked for analysis or plotting

Usage
-----
>>> from oscsym.types.core import Vector2D
>>>
>>> x = Vector2D(1.0, 0.0)
>>> v = Vector2D(-0.5, 0.0)
>>> x_next = x + 0.01 * v
>>> x_next
Vector2D(x=0.995, y=0.0)
"""

import math
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Union

import numpy as np

# ============================================================================
# Scalar Types
# ============================================================================

ScalarLike = Union[float, int, np.number]
"""
Real scalar value.

Used for masses, spring and damping constants, time steps and durations.

Examples
--------
>>> dt: ScalarLike = 0.001
>>> mass: ScalarLike = np.float64(2.0)
"""


# ============================================================================
# Vector Types
# ============================================================================


@dataclass(frozen=True)
class Vector2D:
    """
    Immutable two-component real vector.

    Supports addition, subtraction, negation, scalar multiplication (from
    either side) and scalar division. All operations return new instances.

    Attributes
    ----------
    x : float
        First component (the oscillation axis)
    y : float
        Second component (stays zero for the 1-D force model)

    Examples
    --------
    >>> a = Vector2D(1.0, 2.0)
    >>> b = Vector2D(0.5, -1.0)
    >>> a + b
    Vector2D(x=1.5, y=1.0)
    >>> 2 * a - b
    Vector2D(x=1.5, y=5.0)
    >>> a.to_numpy()
    array([1., 2.])
    """

    x: float = 0.0
    y: float = 0.0

    # NumPy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __post_init__(self):
        # Normalize numpy scalars and ints to plain floats
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    # ------------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------------

    def __add__(self, other: "Vector2D") -> "Vector2D":
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    def __mul__(self, scalar: ScalarLike) -> "Vector2D":
        if isinstance(scalar, Vector2D):
            return NotImplemented
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: ScalarLike) -> "Vector2D":
        if isinstance(scalar, Vector2D):
            return NotImplemented
        return Vector2D(self.x / scalar, self.y / scalar)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    def dot(self, other: "Vector2D") -> float:
        """Scalar product with another vector."""
        return self.x * other.x + self.y * other.y

    def norm(self) -> float:
        """Euclidean norm."""
        return math.hypot(self.x, self.y)

    def is_finite(self) -> bool:
        """True when neither component is NaN or infinite."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_numpy(self) -> np.ndarray:
        """Return the components as a float64 array of shape (2,)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Vector2D":
        """Build a vector from any length-2 array-like."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (2,):
            raise ValueError(f"Vector2D requires shape (2,), got {arr.shape}")
        return cls(arr[0], arr[1])


Vector2D.ZERO = Vector2D(0.0, 0.0)


class KinematicState(NamedTuple):
    """
    Position, velocity and acceleration of a particle at one instant.

    This is what a single integrator step produces. The particle's state is
    replaced with all three fields at once, never partially.

    Examples
    --------
    >>> state = KinematicState(Vector2D(1, 0), Vector2D.ZERO, Vector2D(-1, 0))
    >>> position, velocity, acceleration = state
    """

    position: Vector2D
    velocity: Vector2D
    acceleration: Vector2D

    def is_finite(self) -> bool:
        return (
            self.position.is_finite()
            and self.velocity.is_finite()
            and self.acceleration.is_finite()
        )
