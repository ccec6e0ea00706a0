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
Integration Method Registry and Normalization
==============================================

Single source of truth for the closed set of integration schemes:

- VERLET : position Verlet with an analytic damped-velocity solve
- BEEMAN : Beeman predictor-corrector
- GEAR   : Gear 5th-order predictor-corrector

Provides canonical name normalization (case-insensitive tags and a few
aliases) and per-method metadata used for display and comparison.

Usage Examples
--------------
>>> from oscsym.systems.base.numerical_integration.method_registry import (
...     IntegrationMethod, normalize_method_name, get_method_info
... )
>>>
>>> normalize_method_name("gear5")
<IntegrationMethod.GEAR: 'gear'>
>>> normalize_method_name("VERLET") is IntegrationMethod.VERLET
True
>>> get_method_info("beeman")["order"]
3
"""

from enum import Enum
from typing import Any, Dict, List, Union

from oscsym.exceptions import ConfigurationError


class IntegrationMethod(Enum):
    """
    Integration scheme tag.

    Attributes
    ----------
    VERLET : str
        Position Verlet, O(dt²) local truncation error
    BEEMAN : str
        Beeman predictor-corrector, third-order velocity
    GEAR : str
        Gear 5th-order predictor-corrector, O(dt⁶)
    """

    VERLET = "verlet"
    BEEMAN = "beeman"
    GEAR = "gear"


MethodLike = Union[str, IntegrationMethod]

# Aliases accepted in addition to the enum names/values (lowercase keys)
_NORMALIZATION_MAP: Dict[str, IntegrationMethod] = {
    "verlet": IntegrationMethod.VERLET,
    "position_verlet": IntegrationMethod.VERLET,
    "beeman": IntegrationMethod.BEEMAN,
    "gear": IntegrationMethod.GEAR,
    "gear5": IntegrationMethod.GEAR,
    "gear_5": IntegrationMethod.GEAR,
    "gear_predictor_corrector": IntegrationMethod.GEAR,
}

_METHOD_INFO: Dict[IntegrationMethod, Dict[str, Any]] = {
    IntegrationMethod.VERLET: {
        "name": "Verlet",
        "order": 2,
        "fev_per_step": 2,
        "history_vectors": 1,
        "description": (
            "Position Verlet recurrence; velocity from the analytic solution of "
            "the implicit damped relation"
        ),
    },
    IntegrationMethod.BEEMAN: {
        "name": "Beeman",
        "order": 3,
        "fev_per_step": 1,
        "history_vectors": 1,
        "description": "Beeman position update with predicted/corrected velocity",
    },
    IntegrationMethod.GEAR: {
        "name": "Gear Predictor-Corrector (5th order)",
        "order": 6,
        "fev_per_step": 1,
        "history_vectors": 6,
        "description": (
            "Taylor predictor on position and five derivatives, corrected with "
            "Gear coefficients for velocity-dependent forces"
        ),
    },
}


def normalize_method_name(method: MethodLike) -> IntegrationMethod:
    """
    Resolve a user-provided tag to an IntegrationMethod.

    Matching is case-insensitive; hyphens and spaces are treated as
    underscores. Enum members pass through unchanged.

    Parameters
    ----------
    method : str or IntegrationMethod
        Tag such as 'VERLET', 'beeman', 'gear5'

    Returns
    -------
    IntegrationMethod

    Raises
    ------
    ConfigurationError
        If the tag is not a known integration method

    Examples
    --------
    >>> normalize_method_name("Gear-Predictor-Corrector")
    <IntegrationMethod.GEAR: 'gear'>
    >>> normalize_method_name("rk4")
    Traceback (most recent call last):
    ...
    ConfigurationError: Unknown integration method 'rk4'. ...
    """
    if isinstance(method, IntegrationMethod):
        return method

    if not isinstance(method, str):
        raise ConfigurationError(
            f"Integration method must be a string or IntegrationMethod, "
            f"got {type(method).__name__}"
        )

    key = method.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return _NORMALIZATION_MAP[key]
    except KeyError:
        valid = ", ".join(m.name for m in IntegrationMethod)
        raise ConfigurationError(
            f"Unknown integration method '{method}'. Available methods: {valid}"
        ) from None


def is_valid_method(method: MethodLike) -> bool:
    """True if ``method`` resolves to a known integration method."""
    try:
        normalize_method_name(method)
    except ConfigurationError:
        return False
    return True


def get_method_info(method: MethodLike) -> Dict[str, Any]:
    """
    Metadata for an integration method.

    Parameters
    ----------
    method : str or IntegrationMethod

    Returns
    -------
    dict
        Keys: 'method', 'name', 'order', 'fev_per_step',
        'history_vectors', 'description'

    Examples
    --------
    >>> info = get_method_info("verlet")
    >>> info["fev_per_step"]
    2
    """
    resolved = normalize_method_name(method)
    return {"method": resolved, **_METHOD_INFO[resolved]}


def list_all_methods() -> List[str]:
    """Canonical tags of every registered method, in declaration order."""
    return [m.name for m in IntegrationMethod]
