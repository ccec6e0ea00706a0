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
Integrator Comparison

Energy bookkeeping, an adaptive high-order reference trajectory and
side-by-side runs of every fixed-step scheme on one configuration.

The reference uses scipy.integrate.solve_ivp (DOP853, tight tolerances)
on the first-order form of the same equation, starting from the same
initial position and velocity as the fixed-step runs.

Examples
--------
>>> config = OscillatorConfig(1.0, 1.0, 1.0, 0.0, 0.001, 6.283185)
>>> results = compare_integrators(config)
>>> errors = position_errors(results, config)
>>> {method: err.max() for method, err in errors.items()}
{'VERLET': ..., 'BEEMAN': ..., 'GEAR': ...}
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Union

import numpy as np
from scipy.integrate import solve_ivp

from oscsym.config import OscillatorConfig
from oscsym.simulation.simulation_engine import SimulationEngine
from oscsym.systems.base.numerical_integration.method_registry import (
    IntegrationMethod,
    MethodLike,
    normalize_method_name,
)
from oscsym.systems.builtin.damped_oscillator import DampedOscillator
from oscsym.types.trajectories import SimulationResult, StateSnapshot

logger = logging.getLogger(__name__)

SystemOrConfig = Union[DampedOscillator, OscillatorConfig]


def mechanical_energy(snapshots: Sequence[StateSnapshot], spring_constant: float) -> np.ndarray:
    """
    Mechanical energy ½m|v|² + ½k|x|² of each snapshot.

    Parameters
    ----------
    snapshots : Sequence[StateSnapshot]
    spring_constant : float

    Returns
    -------
    np.ndarray
        Energies (N,)
    """
    return np.array(
        [
            s.kinetic_energy() + 0.5 * spring_constant * s.position.dot(s.position)
            for s in snapshots
        ],
        dtype=np.float64,
    )


def energy_drift(energies: np.ndarray) -> float:
    """Largest deviation from the first energy value, max |E - E₀|."""
    energies = np.asarray(energies, dtype=np.float64)
    if energies.size == 0:
        return 0.0
    return float(np.max(np.abs(energies - energies[0])))


def _initial_conditions(source: SystemOrConfig):
    if isinstance(source, DampedOscillator):
        system = source
    else:
        system = DampedOscillator.from_config(source)
    x0, v0 = system.analytical_solution(0.0)
    return system, float(x0), float(v0)


def reference_solution(
    source: SystemOrConfig,
    t: np.ndarray,
    rtol: float = 1e-10,
    atol: float = 1e-12,
) -> SimulationResult:
    """
    High-accuracy reference trajectory along the oscillation axis.

    Parameters
    ----------
    source : DampedOscillator or OscillatorConfig
        Provides m, k, γ and the initial position and velocity
    t : np.ndarray
        Increasing time points to report, starting at or after 0
    rtol, atol : float
        solve_ivp tolerances

    Returns
    -------
    SimulationResult
        't', 'position' and 'velocity' (N, 2 with zero y component),
        'success', 'message', 'nfev' and 'solver'

    Raises
    ------
    RuntimeError
        If solve_ivp reports failure

    Examples
    --------
    >>> ref = reference_solution(config, np.linspace(0, 10, 1001))
    >>> ref["position"][:, 0]
    """
    system, x0, v0 = _initial_conditions(source)
    mass = system.particle.mass
    k = system.spring_constant
    gamma = system.damping_coefficient

    t = np.asarray(t, dtype=np.float64)
    if t.size == 0:
        raise ValueError("t must contain at least one time point")

    def rhs(_t, y):
        return [y[1], -(k * y[0] + gamma * y[1]) / mass]

    t_end = float(t[-1])
    sol = solve_ivp(
        rhs,
        (0.0, t_end) if t_end > 0 else (0.0, 1e-12),
        [x0, v0],
        method="DOP853",
        t_eval=t,
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise RuntimeError(f"Reference integration failed: {sol.message}")

    zeros = np.zeros_like(sol.t)
    return SimulationResult(
        t=sol.t,
        position=np.column_stack([sol.y[0], zeros]),
        velocity=np.column_stack([sol.y[1], zeros]),
        success=bool(sol.success),
        message=str(sol.message),
        nfev=int(sol.nfev),
        solver="DOP853",
    )


def compare_integrators(
    config: OscillatorConfig,
    methods: Optional[Iterable[MethodLike]] = None,
) -> Dict[str, SimulationResult]:
    """
    Run the same configuration once per integration method.

    Each run gets its own system and integrator instance.

    Parameters
    ----------
    config : OscillatorConfig
        Shared parameters; its own integrator tag is ignored
    methods : Optional[Iterable]
        Methods to run; all of them if None

    Returns
    -------
    Dict[str, SimulationResult]
        Canonical method tag → result, in the order given
    """
    if methods is None:
        methods = list(IntegrationMethod)

    results: Dict[str, SimulationResult] = {}
    for method in methods:
        method = normalize_method_name(method)
        system = DampedOscillator.from_config(config.replace(integrator=method))
        engine = SimulationEngine(system, record_initial_state=True)
        engine.run()
        results[method.name] = engine.to_result()
        logger.debug(
            "%s: %d steps, %d force evaluations",
            method.name,
            results[method.name]["nsteps"],
            results[method.name]["nfev"],
        )
    return results


def position_errors(
    results: Dict[str, SimulationResult], reference: SystemOrConfig
) -> Dict[str, np.ndarray]:
    """
    Absolute x-position error of each run against the reference trajectory.

    Parameters
    ----------
    results : Dict[str, SimulationResult]
        Output of ``compare_integrators``
    reference : DampedOscillator or OscillatorConfig
        Parameters and initial state of the reference solution

    Returns
    -------
    Dict[str, np.ndarray]
        Method tag → |x_numeric - x_reference| on that run's time grid
    """
    errors: Dict[str, np.ndarray] = {}
    for method, result in results.items():
        ref = reference_solution(reference, result["t"])
        errors[method] = np.abs(result["position"][:, 0] - ref["position"][:, 0])
    return errors
