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
Fixed-Step Integrators

Implements the three explicit schemes compared on the damped oscillator:
- Verlet (local truncation error O(dt²))
- Beeman predictor-corrector (third-order velocity)
- Gear 5th-order predictor-corrector (O(dt⁶))

Each integrator keeps only the history its recurrence needs and builds it
in ``bootstrap`` from the initial particle state:

=========  ====================================  ===================
Scheme     History                               Bootstrap
=========  ====================================  ===================
Verlet     previous position x_{n-1}             backward Euler
Beeman     previous acceleration a_{n-1}         backward Euler
Gear-5     position and derivatives 1..5         state + zeros
=========  ====================================  ===================

The backward Euler bootstrap extrapolates one step into the past:

    F0     = F(x0, v0)
    v_{-1} = v0 - F0·dt/m
    x_{-1} = x0 - v_{-1}·dt + F0·dt²/(2m)
"""

from typing import NamedTuple, Tuple

from oscsym.systems.base.numerical_integration.integrator_base import IntegratorBase
from oscsym.systems.base.numerical_integration.method_registry import (
    IntegrationMethod,
    MethodLike,
    normalize_method_name,
)
from oscsym.types.core import KinematicState, Vector2D
from oscsym.types.trajectories import StateSnapshot


class VerletHistory(NamedTuple):
    """Position one step in the past."""

    previous_position: Vector2D


class BeemanHistory(NamedTuple):
    """Acceleration one step in the past."""

    previous_acceleration: Vector2D


class GearHistory(NamedTuple):
    """Position followed by its first through fifth time derivatives."""

    derivatives: Tuple[Vector2D, Vector2D, Vector2D, Vector2D, Vector2D, Vector2D]


def _backward_euler_seed(
    integrator: IntegratorBase, state: StateSnapshot, system
) -> Tuple[Vector2D, Vector2D]:
    """Extrapolate (x_{-1}, v_{-1}) from the initial state."""
    dt = system.time_step
    mass = state.mass

    force = integrator._evaluate_force(system, state.position, state.velocity)
    previous_velocity = state.velocity - force * (dt / mass)
    previous_position = (
        state.position - previous_velocity * dt + force * (dt * dt / (2.0 * mass))
    )
    return previous_position, previous_velocity


class VerletIntegrator(IntegratorBase[VerletHistory]):
    """
    Verlet integrator with an analytic velocity solve.

    Position recurrence:
        x_{n+1} = 2x_n - x_{n-1} + F(x_n, v_n)·dt²/m

    The damping force depends on the unknown v_{n+1}, so the velocity comes
    from solving the implicit linear relation exactly:
        α = 1 + γ·dt/(2m)
        β = 1/dt - k·dt/(2m)
        v_{n+1} = (β/α)·x_{n+1} - x_n/(α·dt)

    The acceleration is recomputed from the force at the new position and
    velocity.

    Characteristics:
    - Order: 2 (local truncation error ∝ dt²)
    - Force evaluations: 2 per step (plus 1 on the bootstrap call)
    - History: one previous position

    Examples
    --------
    >>> integrator = VerletIntegrator()
    >>> system = DampedOscillator(particle, 1.0, 0.0, 0.001, 1.0, integrator)
    >>> system.advance()
    """

    def bootstrap(self, state: StateSnapshot, system) -> VerletHistory:
        previous_position, _ = _backward_euler_seed(self, state, system)
        return VerletHistory(previous_position)

    def step(
        self, state: StateSnapshot, history: VerletHistory, system
    ) -> Tuple[KinematicState, VerletHistory]:
        dt = system.time_step
        mass = state.mass
        position = state.position

        force = self._evaluate_force(system, position, state.velocity)
        next_position = position * 2.0 - history.previous_position + force * (dt * dt / mass)

        alpha = 1.0 + (system.damping_coefficient * dt) / (2.0 * mass)
        beta = (1.0 / dt) - (system.spring_constant * dt) / (2.0 * mass)
        next_velocity = next_position * (beta / alpha) - position * (1.0 / (alpha * dt))

        next_acceleration = self._evaluate_force(system, next_position, next_velocity) / mass

        return (
            KinematicState(next_position, next_velocity, next_acceleration),
            VerletHistory(position),
        )

    @property
    def name(self) -> str:
        return "Verlet"

    @property
    def order(self) -> int:
        return 2

    @property
    def method(self) -> IntegrationMethod:
        return IntegrationMethod.VERLET


class BeemanIntegrator(IntegratorBase[BeemanHistory]):
    """
    Beeman predictor-corrector integrator.

    Algorithm:
        x_{n+1} = x_n + v_n·dt + (2/3)a_n·dt² - (1/6)a_{n-1}·dt²
        v*      = v_n + (3/2)a_n·dt - (1/2)a_{n-1}·dt          (predict)
        a_{n+1} = F(x_{n+1}, v*)/m                              (evaluate)
        v_{n+1} = v_n + (1/3)a_{n+1}·dt + (5/6)a_n·dt - (1/6)a_{n-1}·dt
                                                                (correct)

    The particle's new acceleration is a_{n+1}, evaluated at the predicted
    velocity.

    Characteristics:
    - Order: 3 in velocity
    - Force evaluations: 1 per step (plus 2 on the bootstrap call)
    - History: one previous acceleration, seeded as
      a_{-1} = F(x_{-1}, v_{-1})/m

    Notes
    -----
    The first real step is sensitive to the seeded a_{-1}: an inconsistent
    seed is amplified by the -(1/6)a_{n-1} terms.
    """

    def bootstrap(self, state: StateSnapshot, system) -> BeemanHistory:
        previous_position, previous_velocity = _backward_euler_seed(self, state, system)
        previous_acceleration = (
            self._evaluate_force(system, previous_position, previous_velocity) / state.mass
        )
        return BeemanHistory(previous_acceleration)

    def step(
        self, state: StateSnapshot, history: BeemanHistory, system
    ) -> Tuple[KinematicState, BeemanHistory]:
        dt = system.time_step
        dt2 = dt * dt
        position, velocity, acceleration = state.position, state.velocity, state.acceleration
        previous_acceleration = history.previous_acceleration

        next_position = (
            position
            + velocity * dt
            + acceleration * (2.0 / 3.0 * dt2)
            - previous_acceleration * (dt2 / 6.0)
        )

        # Predict
        predicted_velocity = (
            velocity + acceleration * (1.5 * dt) - previous_acceleration * (0.5 * dt)
        )

        # Evaluate
        next_acceleration = (
            self._evaluate_force(system, next_position, predicted_velocity) / state.mass
        )

        # Correct
        next_velocity = (
            velocity
            + next_acceleration * (dt / 3.0)
            + acceleration * (5.0 / 6.0 * dt)
            - previous_acceleration * (dt / 6.0)
        )

        return (
            KinematicState(next_position, next_velocity, next_acceleration),
            BeemanHistory(acceleration),
        )

    @property
    def name(self) -> str:
        return "Beeman"

    @property
    def order(self) -> int:
        return 3

    @property
    def method(self) -> IntegrationMethod:
        return IntegrationMethod.BEEMAN


class Gear5Integrator(IntegratorBase[GearHistory]):
    """
    Gear 5th-order predictor-corrector integrator.

    Tracks r0 = x and its time derivatives r1..r5.

    Algorithm:
        1. Predict with the truncated Taylor expansion
               p_j = Σ_{i=0..5-j} r_{j+i}·dt^i/i!
        2. Evaluate a = F(p_0, p_1)/m at the predicted position and velocity
        3. Correct
               ΔR2 = (a - p_2)·dt²/2
               r_j = p_j + c_j·ΔR2

    Corrector coefficients (velocity-dependent forces):
        c_0 = 3/16
        c_1 = (251/360)/dt
        c_2 = 2/dt²
        c_3 = (11/18)·6/dt³
        c_4 = (1/6)·24/dt⁴
        c_5 = (1/60)·120/dt⁵

    Characteristics:
    - Order: 6 (local truncation error ∝ dt⁶)
    - Force evaluations: 1 per step
    - History: 6 vectors

    Notes
    -----
    The seed uses the particle's position, velocity and acceleration and
    sets the unknown 3rd to 5th derivatives to zero. Guessing them instead
    would inject error into the highest-order terms, which this scheme is
    most sensitive to.

    Examples
    --------
    >>> # Free motion (k = γ = 0) is reproduced exactly
    >>> integrator = Gear5Integrator()
    >>> system = DampedOscillator(Particle(1.0, Vector2D(0, 0), Vector2D(1, 0)),
    ...                           0.0, 0.0, 0.01, 1.0, integrator)
    >>> system.advance()
    >>> system.particle.position
    Vector2D(x=0.01, y=0.0)
    """

    # Taylor factors dt^i / i!, built per step from the system's dt
    _FACTORIALS = (1.0, 1.0, 2.0, 6.0, 24.0, 120.0)

    def bootstrap(self, state: StateSnapshot, system) -> GearHistory:
        return GearHistory(
            (
                state.position,
                state.velocity,
                state.acceleration,
                Vector2D.ZERO,
                Vector2D.ZERO,
                Vector2D.ZERO,
            )
        )

    def step(
        self, state: StateSnapshot, history: GearHistory, system
    ) -> Tuple[KinematicState, GearHistory]:
        dt = system.time_step
        r = history.derivatives
        factors = [dt**i / self._FACTORIALS[i] for i in range(6)]

        # Predict
        predicted = []
        for j in range(6):
            value = r[j]
            for i in range(1, 6 - j):
                value = value + r[j + i] * factors[i]
            predicted.append(value)

        # Evaluate
        acceleration = (
            self._evaluate_force(system, predicted[0], predicted[1]) / state.mass
        )
        delta_r2 = (acceleration - predicted[2]) * factors[2]

        # Correct
        corrections = self.corrector_coefficients(dt)
        corrected = tuple(p + delta_r2 * c for p, c in zip(predicted, corrections))

        return (
            KinematicState(corrected[0], corrected[1], corrected[2]),
            GearHistory(corrected),
        )

    @staticmethod
    def corrector_coefficients(dt: float) -> Tuple[float, ...]:
        """
        Gear corrector coefficients c_0..c_5 for step ``dt``.

        Returns
        -------
        tuple of float
            Already divided by the matching Taylor factor, so that
            r_j = p_j + c_j·ΔR2.
        """
        return (
            3.0 / 16.0,
            (251.0 / 360.0) / dt,
            2.0 / dt**2,
            (11.0 / 18.0) * (6.0 / dt**3),
            (1.0 / 6.0) * (24.0 / dt**4),
            (1.0 / 60.0) * (120.0 / dt**5),
        )

    @property
    def name(self) -> str:
        return "Gear Predictor-Corrector (5th order)"

    @property
    def order(self) -> int:
        return 6

    @property
    def method(self) -> IntegrationMethod:
        return IntegrationMethod.GEAR


_INTEGRATOR_CLASSES = {
    IntegrationMethod.VERLET: VerletIntegrator,
    IntegrationMethod.BEEMAN: BeemanIntegrator,
    IntegrationMethod.GEAR: Gear5Integrator,
}


def create_fixed_step_integrator(method: MethodLike) -> IntegratorBase:
    """
    Create a fresh integrator instance.

    Parameters
    ----------
    method : str or IntegrationMethod
        'VERLET', 'BEEMAN' or 'GEAR' (case-insensitive, aliases allowed)

    Returns
    -------
    IntegratorBase
        Uninitialized integrator

    Raises
    ------
    ConfigurationError
        If the method is unknown

    Examples
    --------
    >>> integrator = create_fixed_step_integrator("gear")
    >>> integrator.name
    'Gear Predictor-Corrector (5th order)'
    """
    return _INTEGRATOR_CLASSES[normalize_method_name(method)]()
