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
Exceptions raised by the oscillator simulation.

Both derive from the built-in exception the rest of the code base would
otherwise raise (ValueError for bad parameters, RuntimeError for failures
during integration), so callers catching the built-ins keep working.
"""

from typing import Optional


class ConfigurationError(ValueError):
    """
    Invalid simulation parameters.

    Raised at construction time, before any integration step is taken:
    non-positive mass or time step, total time shorter than one step,
    non-finite numbers, missing keys or an unknown integrator tag.
    """


class NumericalInstabilityError(RuntimeError):
    """
    Non-finite particle state produced by an integration step.

    Parameters
    ----------
    message : str
        Description of the failure
    step : Optional[int]
        Number of completed steps when the failure was detected
    elapsed_time : Optional[float]
        Simulated time when the failure was detected

    Examples
    --------
    >>> try:
    ...     engine.run()
    ... except NumericalInstabilityError as e:
    ...     print(f"Blew up at step {e.step} (t={e.elapsed_time})")
    """

    def __init__(
        self, message: str, step: Optional[int] = None, elapsed_time: Optional[float] = None
    ):
        super().__init__(message)
        self.step = step
        self.elapsed_time = elapsed_time
