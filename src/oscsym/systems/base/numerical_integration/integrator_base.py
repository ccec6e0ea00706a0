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
Integrator Base - Abstract Interface for Particle Integrators

Defines the contract every fixed-step integration scheme implements when
advancing the damped oscillator's particle.

Two-Phase Contract
------------------
Multi-step schemes need history (a previous position, a previous
acceleration, higher derivatives) that does not exist before the first
step. Every integrator therefore splits its work into:

1. ``bootstrap(state, system) -> history``
   Mandatory. Synthesizes the missing history from the initial particle
   state alone. Always returns a usable history, never ``None``.

2. ``step(state, history, system) -> (new_state, new_history)``
   The scheme's recurrence. Takes the current kinematic state and history
   and returns both updated, without touching the particle.

``update(system)`` drives the two phases: it bootstraps on the first call,
runs ``step``, then replaces the particle's state wholesale and keeps the
new history privately.

Design Note
-----------
The history lives inside the integrator instance, so an integrator must
not be shared between systems or swapped mid-run. Use ``reset()`` to
return an instance to its uninitialized state.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Generic, Optional, Tuple, TypeVar

from oscsym.types.core import KinematicState, Vector2D
from oscsym.types.trajectories import StateSnapshot

if TYPE_CHECKING:
    from oscsym.systems.base.numerical_integration.method_registry import IntegrationMethod
    from oscsym.systems.builtin.damped_oscillator import DampedOscillator

HistoryT = TypeVar("HistoryT")


class IntegratorBase(ABC, Generic[HistoryT]):
    """
    Abstract base class for particle integrators.

    All integrators must implement:
    - bootstrap(): Build the initial private history
    - step(): One application of the scheme's recurrence
    - name / order / method: Identification for display and comparison

    Statistics
    ----------
    - total_steps: number of completed steps
    - total_fev: number of force evaluations (bootstrap included)
    - bootstraps: number of times the history was (re)built

    Examples
    --------
    >>> integrator = VerletIntegrator()
    >>> integrator.is_initialized
    False
    >>> integrator.update(system)  # bootstraps, then steps
    >>> integrator.is_initialized
    True
    >>> integrator.get_stats()["total_steps"]
    1
    """

    def __init__(self):
        self._history: Optional[HistoryT] = None
        self._stats = {
            "total_steps": 0,
            "total_fev": 0,
            "bootstraps": 0,
        }

    # ========================================================================
    # Scheme-specific phases
    # ========================================================================

    @abstractmethod
    def bootstrap(self, state: StateSnapshot, system: "DampedOscillator") -> HistoryT:
        """
        Synthesize the private history from the initial particle state.

        Parameters
        ----------
        state : StateSnapshot
            Particle state before the first step
        system : DampedOscillator
            Supplies the time step and force model

        Returns
        -------
        HistoryT
            A valid history for the first ``step`` call
        """
        pass

    @abstractmethod
    def step(
        self, state: StateSnapshot, history: HistoryT, system: "DampedOscillator"
    ) -> Tuple[KinematicState, HistoryT]:
        """
        Advance the kinematic state by one time step.

        Parameters
        ----------
        state : StateSnapshot
            Current particle state
        history : HistoryT
            History from ``bootstrap`` or the previous ``step``
        system : DampedOscillator
            Supplies the time step and force model

        Returns
        -------
        new_state : KinematicState
            Position, velocity and acceleration one step later
        new_history : HistoryT
            History to pass to the next call
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable integrator name for display and logging."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Order of the local truncation error in the time step."""
        pass

    @property
    @abstractmethod
    def method(self) -> "IntegrationMethod":
        """Registry tag of this integrator."""
        pass

    # ========================================================================
    # Driver
    # ========================================================================

    def update(self, system: "DampedOscillator") -> KinematicState:
        """
        Advance the system's particle by one step.

        Bootstraps the history on the first call, then applies the
        recurrence and replaces the particle's position, velocity and
        acceleration at once.

        Parameters
        ----------
        system : DampedOscillator
            System whose particle is advanced

        Returns
        -------
        KinematicState
            The particle's new state
        """
        state = system.particle.output_state()

        if self._history is None:
            self._history = self.bootstrap(state, system)
            self._stats["bootstraps"] += 1

        new_state, self._history = self.step(state, self._history, system)
        system.particle.set_state(new_state)

        self._stats["total_steps"] += 1
        return new_state

    @property
    def is_initialized(self) -> bool:
        """True once the history has been bootstrapped."""
        return self._history is not None

    @property
    def history(self) -> Optional[HistoryT]:
        """Current private history (None before the first step)."""
        return self._history

    def reset(self):
        """Drop the history and statistics, as if freshly constructed."""
        self._history = None
        self.reset_stats()

    # ========================================================================
    # Common Utilities (Shared by All Integrators)
    # ========================================================================

    def _evaluate_force(
        self, system: "DampedOscillator", position: Vector2D, velocity: Vector2D
    ) -> Vector2D:
        """
        Evaluate the system's force model with statistics tracking.

        Parameters
        ----------
        system : DampedOscillator
        position : Vector2D
        velocity : Vector2D

        Returns
        -------
        Vector2D
            Net force on the particle
        """
        self._stats["total_fev"] += 1
        return system.force(position, velocity)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get integration statistics.

        Returns
        -------
        dict
            Statistics with keys:
            - 'total_steps': Total integration steps taken
            - 'total_fev': Total force evaluations
            - 'bootstraps': Number of history bootstraps
            - 'avg_fev_per_step': Average force evaluations per step

        Examples
        --------
        >>> engine.run()
        >>> stats = system.integrator.get_stats()
        >>> print(f"Evals/step: {stats['avg_fev_per_step']:.2f}")
        """
        avg_fev = self._stats["total_fev"] / max(1, self._stats["total_steps"])

        return {
            **self._stats,
            "avg_fev_per_step": avg_fev,
        }

    def reset_stats(self):
        """Reset integration statistics to zero."""
        self._stats["total_steps"] = 0
        self._stats["total_fev"] = 0
        self._stats["bootstraps"] = 0

    def __repr__(self) -> str:
        """String representation for debugging"""
        return f"{self.__class__.__name__}(initialized={self.is_initialized})"

    def __str__(self) -> str:
        """Human-readable string"""
        return f"{self.name} (order {self.order})"
