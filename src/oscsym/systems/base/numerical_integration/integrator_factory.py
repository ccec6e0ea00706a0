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
Integrator Factory - Unified Interface for Creating Integrators

Creates a fresh integrator instance from a method tag. Every call returns
a new, uninitialized instance: integrators carry private history and must
never be shared between systems.

Examples
--------
>>> integrator = IntegratorFactory.create("beeman")
>>> IntegratorFactory.list_methods()
['VERLET', 'BEEMAN', 'GEAR']
"""

from typing import List

from oscsym.systems.base.numerical_integration.fixed_step_integrators import (
    create_fixed_step_integrator,
)
from oscsym.systems.base.numerical_integration.integrator_base import IntegratorBase
from oscsym.systems.base.numerical_integration.method_registry import (
    MethodLike,
    list_all_methods,
)


class IntegratorFactory:
    """
    Factory for creating particle integrators.

    Examples
    --------
    >>> integrator = IntegratorFactory.create(IntegrationMethod.GEAR)
    >>> integrator.order
    6
    """

    @classmethod
    def create(cls, method: MethodLike) -> IntegratorBase:
        """
        Create an integrator for the given method.

        Parameters
        ----------
        method : str or IntegrationMethod
            'VERLET', 'BEEMAN' or 'GEAR' (case-insensitive, aliases allowed)

        Returns
        -------
        IntegratorBase
            New uninitialized integrator

        Raises
        ------
        ConfigurationError
            If the method is unknown
        """
        return create_fixed_step_integrator(method)

    @staticmethod
    def list_methods() -> List[str]:
        """Canonical tags of all available methods."""
        return list_all_methods()
