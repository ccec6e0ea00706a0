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
Simulation Configuration

Validated parameter set for one damped-oscillator run, and loaders for
plain mappings and YAML (or JSON) files.

Validation happens on construction, before any integration step. Numeric
checks run before the integrator tag is resolved, so an invalid number is
reported the same way whichever integrator was selected.

Accepted Keys
-------------
Each field accepts its snake_case name, a camelCase spelling and the
kebab-case property names of the original program:

=====================  ====================  ==============================
Field                  camelCase             kebab-case
=====================  ====================  ==============================
particle_mass          particleMass          particle-mass
initial_offset         initialOffset         initial-x
spring_constant        springConstant        spring-constant
damping_coefficient    dampingCoefficient    viscous-damping-coefficient
time_step              timeStep              time-step
total_time             totalTime             duration
integrator             integrator            strategy
=====================  ====================  ==============================

Examples
--------
>>> config = OscillatorConfig(
...     particle_mass=2.0,
...     initial_offset=0.5,
...     spring_constant=4.0,
...     damping_coefficient=1.0,
...     time_step=0.01,
...     total_time=10.0,
...     integrator="GEAR",
... )
>>> config.initial_velocity
-0.25
>>>
>>> config = load_config("oscillator.yaml")
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from oscsym.exceptions import ConfigurationError
from oscsym.systems.base.numerical_integration.method_registry import (
    IntegrationMethod,
    MethodLike,
    normalize_method_name,
)
from oscsym.validation import as_finite_float

_KEY_ALIASES: Dict[str, str] = {
    "particleMass": "particle_mass",
    "particle-mass": "particle_mass",
    "mass": "particle_mass",
    "initialOffset": "initial_offset",
    "initial-x": "initial_offset",
    "initial_x": "initial_offset",
    "springConstant": "spring_constant",
    "spring-constant": "spring_constant",
    "dampingCoefficient": "damping_coefficient",
    "viscous-damping-coefficient": "damping_coefficient",
    "viscous_damping_coefficient": "damping_coefficient",
    "timeStep": "time_step",
    "time-step": "time_step",
    "totalTime": "total_time",
    "duration": "total_time",
    "strategy": "integrator",
}


@dataclass(frozen=True)
class OscillatorConfig:
    """
    Parameters of one damped-oscillator simulation.

    Parameters
    ----------
    particle_mass : float
        m > 0
    initial_offset : float
        Initial stretch (positive) or compression (negative) of the spring
    spring_constant : float
        k (kg/s²)
    damping_coefficient : float
        γ (kg/s)
    time_step : float
        dt > 0
    total_time : float
        T ≥ dt
    integrator : str or IntegrationMethod
        'VERLET', 'BEEMAN' or 'GEAR'; stored as IntegrationMethod

    Raises
    ------
    ConfigurationError
        If any value is invalid
    """

    particle_mass: float
    initial_offset: float
    spring_constant: float
    damping_coefficient: float
    time_step: float
    total_time: float
    integrator: MethodLike = IntegrationMethod.VERLET

    def __post_init__(self):
        for name in (
            "particle_mass",
            "initial_offset",
            "spring_constant",
            "damping_coefficient",
            "time_step",
            "total_time",
        ):
            object.__setattr__(self, name, as_finite_float(name, getattr(self, name)))

        validate_parameters(self.particle_mass, self.time_step, self.total_time)

        object.__setattr__(self, "integrator", normalize_method_name(self.integrator))

    @property
    def initial_velocity(self) -> float:
        """
        Initial velocity by construction convention: -γ/(2m).

        Kept as the original program defines it. Dimensionally this is not
        a velocity when γ is read in kg/s, so treat it as a convention, not
        a physical law.
        """
        return -self.damping_coefficient / (2.0 * self.particle_mass)

    @property
    def initial_acceleration(self) -> float:
        """Initial acceleration by construction convention: zero."""
        return 0.0

    def replace(self, **changes: Any) -> "OscillatorConfig":
        """Copy with some fields changed (validated again)."""
        values = self.to_dict()
        values.update(changes)
        return OscillatorConfig(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping with snake_case keys and the integrator tag name."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["integrator"] = self.integrator.name
        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OscillatorConfig":
        """
        Build a configuration from a mapping.

        Parameters
        ----------
        data : Mapping
            Keys in snake_case, camelCase or the original kebab-case

        Raises
        ------
        ConfigurationError
            On missing, duplicate or unknown keys, or invalid values
        """
        field_names = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in field_names:
                raise ConfigurationError(f"Unknown configuration key '{key}'")
            if name in values:
                raise ConfigurationError(f"Configuration key '{name}' given more than once")
            values[name] = value

        required = field_names - {"integrator"}
        missing = sorted(required - values.keys())
        if missing:
            raise ConfigurationError(f"Missing configuration keys: {missing}")

        return cls(**values)


def validate_parameters(particle_mass: float, time_step: float, total_time: float):
    """
    Check the constraints shared by every configuration path.

    Raises
    ------
    ConfigurationError
        If mass ≤ 0, dt ≤ 0 or T < dt
    """
    if particle_mass <= 0:
        raise ConfigurationError(f"particle_mass must be positive, got {particle_mass}")
    if time_step <= 0:
        raise ConfigurationError(f"time_step must be positive, got {time_step}")
    if total_time < time_step:
        raise ConfigurationError(
            f"total_time must be at least one time step, got total_time={total_time} "
            f"< time_step={time_step}"
        )


def load_config(path: Union[str, Path]) -> OscillatorConfig:
    """
    Load a configuration from a YAML file.

    The file holds one mapping; a top-level "oscillator" mapping is also
    accepted. JSON files load unchanged since YAML is a superset of JSON.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    OscillatorConfig

    Raises
    ------
    ConfigurationError
        If the file is not valid YAML or the values are invalid
    FileNotFoundError
        If the file does not exist

    Examples
    --------
    >>> # oscillator.yaml
    >>> # particle-mass: 70
    >>> # initial-x: 1
    >>> # spring-constant: 10000
    >>> # viscous-damping-coefficient: 100
    >>> # strategy: GEAR
    >>> # time-step: 0.0001
    >>> # duration: 5
    >>> config = load_config("oscillator.yaml")
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("oscillator"), dict):
        data = data["oscillator"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")

    return OscillatorConfig.from_dict(data)
