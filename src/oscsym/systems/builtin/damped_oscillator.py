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
Damped Harmonic Oscillator
==========================

A point mass on a linear spring with viscous damping:

    m·x'' = -k·x - γ·x'

The system owns one Particle and one integrator, advances by exactly one
integrator step per ``advance()`` call and keeps track of elapsed time.

Physical Parameters
-------------------
- Natural frequency:  ω₀ = √(k/m)
- Decay rate:         β = γ/(2m)
- Damping ratio:      ζ = γ/(2√(km))
  ζ < 1 underdamped, ζ = 1 critically damped, ζ > 1 overdamped

Construction Conventions
------------------------
``DampedOscillator.from_config`` builds the particle as the original
program does:
- position     (initial_offset, 0)
- velocity     (-γ/(2m), 0)
- acceleration (0, 0)

The velocity rule is preserved as-is even though it is not dimensionally
a velocity. Construct the Particle yourself to start from any other state.
"""

import logging
import math
import warnings
from typing import Optional, Tuple, Union

import numpy as np

from oscsym.config import OscillatorConfig, validate_parameters
from oscsym.exceptions import ConfigurationError, NumericalInstabilityError
from oscsym.systems.base.force_model import damped_spring_force
from oscsym.systems.base.numerical_integration.integrator_base import IntegratorBase
from oscsym.systems.base.numerical_integration.integrator_factory import IntegratorFactory
from oscsym.systems.base.numerical_integration.method_registry import (
    IntegrationMethod,
    MethodLike,
)
from oscsym.systems.base.particle import Particle
from oscsym.types.core import ScalarLike, Vector2D
from oscsym.types.trajectories import StateSnapshot
from oscsym.validation import as_finite_float

logger = logging.getLogger(__name__)

# ω₀·dt at or beyond which explicit schemes stop tracking the undamped motion
STABILITY_LIMIT = 2.0


class DampedOscillator:
    """
    Damped harmonic oscillator advanced by a fixed-step integrator.

    Parameters
    ----------
    particle : Particle
        The oscillating mass, in its initial state
    spring_constant : float
        k (kg/s²)
    damping_coefficient : float
        γ (kg/s)
    time_step : float
        dt > 0
    total_time : float
        T ≥ dt
    integrator : IntegratorBase, str or IntegrationMethod
        Scheme used on every step. Strings and enum members create a fresh
        instance; an instance must not have been used yet. Chosen once, it
        cannot be replaced.

    Raises
    ------
    ConfigurationError
        On invalid parameters, before any step is taken

    Examples
    --------
    >>> particle = Particle(1.0, Vector2D(1.0, 0.0), Vector2D.ZERO, Vector2D.ZERO)
    >>> system = DampedOscillator(particle, 1.0, 0.0, 0.001, 6.283185, "verlet")
    >>> while not system.is_finished():
    ...     system.advance()
    >>> system.particle.position.x  # ≈ cos(2π)
    0.99999...
    """

    def __init__(
        self,
        particle: Particle,
        spring_constant: ScalarLike,
        damping_coefficient: ScalarLike,
        time_step: ScalarLike,
        total_time: ScalarLike,
        integrator: Union[IntegratorBase, MethodLike] = IntegrationMethod.VERLET,
    ):
        self._spring_constant = as_finite_float("spring_constant", spring_constant)
        self._damping_coefficient = as_finite_float("damping_coefficient", damping_coefficient)
        self._time_step = as_finite_float("time_step", time_step)
        self._total_time = as_finite_float("total_time", total_time)
        validate_parameters(particle.mass, self._time_step, self._total_time)

        if isinstance(integrator, IntegratorBase):
            if integrator.is_initialized:
                raise ConfigurationError(
                    f"{integrator.name} integrator already holds history from another run; "
                    f"pass a fresh instance or call reset() first"
                )
            self._integrator = integrator
        else:
            self._integrator = IntegratorFactory.create(integrator)

        self._particle = particle
        self._initial_state = particle.output_state()
        self._steps_taken = 0

        self._check_stability()

        logger.debug(
            "Created %s with %s (m=%g, k=%g, gamma=%g, dt=%g, T=%g)",
            self.__class__.__name__,
            self._integrator.name,
            particle.mass,
            self._spring_constant,
            self._damping_coefficient,
            self._time_step,
            self._total_time,
        )

    @classmethod
    def from_config(
        cls, config: OscillatorConfig, integrator: Optional[IntegratorBase] = None
    ) -> "DampedOscillator":
        """
        Build a system using the construction conventions.

        Parameters
        ----------
        config : OscillatorConfig
            Validated parameters
        integrator : Optional[IntegratorBase]
            Overrides the scheme named in the configuration

        Returns
        -------
        DampedOscillator
            Initial position (x₀, 0), velocity (-γ/(2m), 0), acceleration 0

        Examples
        --------
        >>> config = OscillatorConfig(2.0, 0.5, 4.0, 1.0, 0.01, 10.0, "BEEMAN")
        >>> system = DampedOscillator.from_config(config)
        >>> system.particle.velocity
        Vector2D(x=-0.25, y=0.0)
        """
        particle = Particle(
            config.particle_mass,
            Vector2D(config.initial_offset, 0.0),
            Vector2D(config.initial_velocity, 0.0),
            Vector2D(config.initial_acceleration, 0.0),
        )
        return cls(
            particle,
            config.spring_constant,
            config.damping_coefficient,
            config.time_step,
            config.total_time,
            integrator if integrator is not None else config.integrator,
        )

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def particle(self) -> Particle:
        return self._particle

    @property
    def integrator(self) -> IntegratorBase:
        """The integrator chosen at construction (read-only)."""
        return self._integrator

    @property
    def spring_constant(self) -> float:
        return self._spring_constant

    @property
    def damping_coefficient(self) -> float:
        return self._damping_coefficient

    @property
    def time_step(self) -> float:
        return self._time_step

    @property
    def total_time(self) -> float:
        return self._total_time

    @property
    def steps_taken(self) -> int:
        """Number of completed ``advance()`` calls."""
        return self._steps_taken

    @property
    def elapsed_time(self) -> float:
        """
        Simulated time so far.

        Equals the running sum of dt over completed steps, computed as
        steps_taken·dt so it carries no accumulated rounding error.
        """
        return self._steps_taken * self._time_step

    @property
    def natural_frequency(self) -> float:
        """ω₀ = √(k/m) (nan for a negative spring constant)."""
        ratio = self._spring_constant / self._particle.mass
        return math.sqrt(ratio) if ratio >= 0 else math.nan

    @property
    def damping_ratio(self) -> float:
        """ζ = γ/(2√(km)) (inf when k = 0 and γ > 0)."""
        km = self._spring_constant * self._particle.mass
        if km <= 0:
            return math.inf if self._damping_coefficient > 0 else math.nan
        return self._damping_coefficient / (2.0 * math.sqrt(km))

    # ========================================================================
    # Dynamics
    # ========================================================================

    def force(self, position: Vector2D, velocity: Vector2D) -> Vector2D:
        """Net force F = -(k·x + γ·v) for this system's k and γ."""
        return damped_spring_force(
            position, velocity, self._spring_constant, self._damping_coefficient
        )

    def advance(self):
        """
        Take exactly one integrator step and advance elapsed time by dt.

        Raises
        ------
        NumericalInstabilityError
            If the step produced a NaN or infinite position, velocity or
            acceleration
        """
        new_state = self._integrator.update(self)
        self._steps_taken += 1

        if not new_state.is_finite():
            raise NumericalInstabilityError(
                f"{self._integrator.name} produced a non-finite state at step "
                f"{self._steps_taken} (t={self.elapsed_time:g}): "
                f"position={new_state.position}, velocity={new_state.velocity}",
                step=self._steps_taken,
                elapsed_time=self.elapsed_time,
            )

    def is_finished(self) -> bool:
        """Canonical stopping condition: elapsed_time ≥ total_time."""
        return self.elapsed_time >= self._total_time

    def output_state(self) -> StateSnapshot:
        """Snapshot of the particle tagged with elapsed time and step count."""
        return self._particle.output_state(time=self.elapsed_time, frame=self._steps_taken)

    def reset(self):
        """Restore the initial particle state, zero the clock, reset the integrator."""
        self._particle.set_state(self._initial_state.kinematics)
        self._steps_taken = 0
        self._integrator.reset()

    # ========================================================================
    # Energy and Reference Solutions
    # ========================================================================

    def mechanical_energy(self, state: Optional[StateSnapshot] = None) -> float:
        """
        Total mechanical energy E = ½m|v|² + ½k|x|².

        Parameters
        ----------
        state : Optional[StateSnapshot]
            Snapshot to evaluate; the current particle state if None
        """
        if state is None:
            state = self.output_state()
        return state.kinetic_energy() + 0.5 * self._spring_constant * state.position.dot(
            state.position
        )

    def analytical_solution(self, t: Union[float, np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Exact position and velocity along the oscillation axis.

        Solves m·x'' + γ·x' + k·x = 0 from this system's initial position
        and velocity, with t measured from construction.

        Parameters
        ----------
        t : float or np.ndarray
            Time points

        Returns
        -------
        x : np.ndarray
            Positions, same shape as t
        v : np.ndarray
            Velocities, same shape as t

        Notes
        -----
        With β = γ/(2m) and ω₀² = k/m:
        - β² < ω₀² (underdamped):
              x = e^{-βt}(x₀ cos ω_d t + (v₀ + βx₀)/ω_d sin ω_d t)
        - β² = ω₀² (critical, includes free motion k = γ = 0):
              x = (x₀ + (v₀ + βx₀)t) e^{-βt}
        - β² > ω₀² (overdamped):
              x = c₁e^{r₁t} + c₂e^{r₂t},  r₁,₂ = -β ± √(β² - ω₀²)

        Examples
        --------
        >>> t = np.linspace(0, 10, 101)
        >>> x_exact, v_exact = system.analytical_solution(t)
        """
        t = np.asarray(t, dtype=np.float64)
        mass = self._initial_state.mass
        x0 = self._initial_state.position.x
        v0 = self._initial_state.velocity.x

        beta = self._damping_coefficient / (2.0 * mass)
        omega0_sq = self._spring_constant / mass
        discriminant = beta * beta - omega0_sq

        if math.isclose(discriminant, 0.0, abs_tol=1e-12 * max(1.0, omega0_sq)):
            decay = np.exp(-beta * t)
            slope = v0 + beta * x0
            x = (x0 + slope * t) * decay
            v = (v0 - beta * slope * t) * decay
        elif discriminant < 0:
            omega_d = math.sqrt(-discriminant)
            decay = np.exp(-beta * t)
            cos, sin = np.cos(omega_d * t), np.sin(omega_d * t)
            x = decay * (x0 * cos + (v0 + beta * x0) / omega_d * sin)
            v = decay * (v0 * cos - (beta * v0 + omega0_sq * x0) / omega_d * sin)
        else:
            root = math.sqrt(discriminant)
            r1, r2 = -beta + root, -beta - root
            c1 = (v0 - r2 * x0) / (r1 - r2)
            c2 = x0 - c1
            x = c1 * np.exp(r1 * t) + c2 * np.exp(r2 * t)
            v = r1 * c1 * np.exp(r1 * t) + r2 * c2 * np.exp(r2 * t)

        return x, v

    # ========================================================================
    # Internal
    # ========================================================================

    def _check_stability(self):
        omega0 = self.natural_frequency
        if math.isfinite(omega0) and omega0 * self._time_step >= STABILITY_LIMIT:
            warnings.warn(
                f"time_step={self._time_step} gives omega0*dt={omega0 * self._time_step:.3g} "
                f">= {STABILITY_LIMIT}; explicit integrators are unstable at this step size. "
                f"Use time_step < {STABILITY_LIMIT / omega0:.3g}.",
                UserWarning,
            )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(m={self._particle.mass}, k={self._spring_constant}, "
            f"gamma={self._damping_coefficient}, dt={self._time_step}, T={self._total_time}, "
            f"integrator={self._integrator.name}, t={self.elapsed_time:g})"
        )
