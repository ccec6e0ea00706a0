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
Numerical Integration
=====================

Fixed-step integrators for the damped oscillator's particle.

>>> from oscsym.systems.base.numerical_integration import IntegratorFactory
>>> integrator = IntegratorFactory.create("gear")
"""

from .fixed_step_integrators import (
    BeemanHistory,
    BeemanIntegrator,
    Gear5Integrator,
    GearHistory,
    VerletHistory,
    VerletIntegrator,
    create_fixed_step_integrator,
)
from .integrator_base import IntegratorBase
from .integrator_factory import IntegratorFactory
from .method_registry import (
    IntegrationMethod,
    get_method_info,
    is_valid_method,
    list_all_methods,
    normalize_method_name,
)

__all__ = [
    "IntegratorBase",
    "VerletIntegrator",
    "BeemanIntegrator",
    "Gear5Integrator",
    "VerletHistory",
    "BeemanHistory",
    "GearHistory",
    "create_fixed_step_integrator",
    "IntegratorFactory",
    "IntegrationMethod",
    "get_method_info",
    "is_valid_method",
    "list_all_methods",
    "normalize_method_name",
]
