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
oscsym - Damped Harmonic Oscillator Integrator Comparison
=========================================================

Simulates a point mass on a damped spring with three fixed-step schemes
(Verlet, Beeman, Gear 5th-order predictor-corrector) and records the
trajectory for comparison.

>>> from oscsym import DampedOscillator, OscillatorConfig, SimulationEngine
>>> config = OscillatorConfig(2.0, 0.5, 4.0, 1.0, 0.01, 10.0, "BEEMAN")
>>> snapshots = SimulationEngine(DampedOscillator.from_config(config)).run()
>>> len(snapshots)
1000
"""

from oscsym.config import OscillatorConfig, load_config
from oscsym.exceptions import ConfigurationError, NumericalInstabilityError
from oscsym.simulation import SimulationEngine
from oscsym.systems.base import Particle
from oscsym.systems.base.numerical_integration import (
    BeemanIntegrator,
    Gear5Integrator,
    IntegrationMethod,
    IntegratorFactory,
    VerletIntegrator,
)
from oscsym.systems.builtin import DampedOscillator
from oscsym.types import KinematicState, SimulationResult, StateSnapshot, Vector2D

__version__ = "0.1.0"

__all__ = [
    "OscillatorConfig",
    "load_config",
    "ConfigurationError",
    "NumericalInstabilityError",
    "SimulationEngine",
    "Particle",
    "DampedOscillator",
    "IntegrationMethod",
    "IntegratorFactory",
    "VerletIntegrator",
    "BeemanIntegrator",
    "Gear5Integrator",
    "Vector2D",
    "KinematicState",
    "StateSnapshot",
    "SimulationResult",
]
