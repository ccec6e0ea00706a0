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
Parameter Coercion

Shared checks for numeric parameters given by users, so every entry point
reports bad input as ConfigurationError.
"""

import math
from typing import Any

from oscsym.exceptions import ConfigurationError


def as_finite_float(name: str, value: Any) -> float:
    """
    Coerce a numeric parameter to a finite float.

    Parameters
    ----------
    name : str
        Parameter name used in the error message
    value : Any
        int, float, NumPy scalar or numeric string

    Returns
    -------
    float

    Raises
    ------
    ConfigurationError
        If value is a bool, not numeric, or not finite

    Examples
    --------
    >>> as_finite_float("time_step", "0.01")
    0.01
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be finite, got {number}")
    return number
