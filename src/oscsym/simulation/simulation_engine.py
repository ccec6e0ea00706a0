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
Simulation Engine

Drives a DampedOscillator until a stopping condition holds and records one
snapshot per step.

The stopping condition is checked between steps only, so a run always
takes a whole number of steps and never interrupts one midway. With the
default condition (elapsed_time ≥ total_time) a run takes ⌈T/dt⌉ steps.

Examples
--------
>>> engine = SimulationEngine(system)
>>> snapshots = engine.run()
>>> len(snapshots) == system.steps_taken
True
>>>
>>> # Stop early on a custom condition
>>> engine = SimulationEngine(system, record_initial_state=True)
>>> engine.run(lambda s: abs(s.particle.position.x) < 1e-3)
>>>
>>> result = engine.to_result()
>>> result["position"][:, 0]  # x component over time
"""

import logging
import time
from typing import Callable, Optional, Sequence

import numpy as np

from oscsym.systems.builtin.damped_oscillator import DampedOscillator
from oscsym.types.trajectories import SimulationResult, SnapshotSequence, StateSnapshot

logger = logging.getLogger(__name__)

StopPredicate = Callable[[DampedOscillator], bool]


def time_limit_reached(system: DampedOscillator) -> bool:
    """Default stopping condition: the system's total time has elapsed."""
    return system.is_finished()


class SimulationEngine:
    """
    Runs a system and collects its snapshots.

    Parameters
    ----------
    system : DampedOscillator
        System to drive. The engine advances it in place.
    record_initial_state : bool
        If True, the pre-simulation state is recorded as the first snapshot
    max_steps : Optional[int]
        Upper bound on steps per run; None means unbounded. Guards against
        a custom stopping condition that never holds.

    Examples
    --------
    >>> config = OscillatorConfig(1.0, 1.0, 1.0, 0.0, 0.001, 6.283185, "GEAR")
    >>> engine = SimulationEngine(DampedOscillator.from_config(config))
    >>> snapshots = engine.run()
    >>> len(snapshots)
    6284
    """

    def __init__(
        self,
        system: DampedOscillator,
        record_initial_state: bool = False,
        max_steps: Optional[int] = None,
    ):
        if max_steps is not None and max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {max_steps}")
        self.system = system
        self.record_initial_state = record_initial_state
        self.max_steps = max_steps
        self._snapshots: SnapshotSequence = []
        self._integration_time = 0.0
        self._completed = False

    @property
    def results(self) -> Sequence[StateSnapshot]:
        """Snapshots recorded so far (read-only view)."""
        return tuple(self._snapshots)

    def run(self, stop_predicate: Optional[StopPredicate] = None) -> SnapshotSequence:
        """
        Advance the system until ``stop_predicate(system)`` holds.

        Parameters
        ----------
        stop_predicate : Optional[Callable[[DampedOscillator], bool]]
            Checked before each step. Defaults to ``time_limit_reached``.

        Returns
        -------
        SnapshotSequence
            Ordered snapshots, one per step (plus the initial state first
            when ``record_initial_state`` is set). A copy: editing it
            leaves the recorded history untouched

        Raises
        ------
        NumericalInstabilityError
            If a step produces a non-finite state. Snapshots recorded before
            the failing step remain available through ``results``.
        RuntimeError
            If ``max_steps`` is reached before the stopping condition holds
        """
        if stop_predicate is None:
            stop_predicate = time_limit_reached

        system = self.system
        self._completed = False
        if self.record_initial_state and not self._snapshots:
            self._snapshots.append(system.output_state())

        logger.info(
            "Starting simulation with %s (dt=%g, T=%g)",
            system.integrator.name,
            system.time_step,
            system.total_time,
        )

        steps = 0
        start = time.time()
        try:
            while not stop_predicate(system):
                if self.max_steps is not None and steps >= self.max_steps:
                    raise RuntimeError(
                        f"Stopping condition not reached after max_steps={self.max_steps} "
                        f"(t={system.elapsed_time:g})"
                    )
                system.advance()
                self._snapshots.append(system.output_state())
                steps += 1
        finally:
            self._integration_time += time.time() - start

        self._completed = True
        logger.info(
            "Simulation finished: %d steps, t=%g", system.steps_taken, system.elapsed_time
        )
        logger.debug(
            "Run summary: %d snapshots, %.3fs wall time, stats=%s",
            len(self._snapshots),
            self._integration_time,
            system.integrator.get_stats(),
        )
        return list(self._snapshots)

    def to_result(self) -> SimulationResult:
        """
        Recorded snapshots as stacked arrays plus run statistics.

        Returns
        -------
        SimulationResult
            't' (N,), 'position'/'velocity'/'acceleration' (N, 2), and
            'success', 'message', 'nsteps', 'nfev', 'integration_time',
            'solver'

        Examples
        --------
        >>> engine.run()
        >>> result = engine.to_result()
        >>> result["t"][-1] >= system.total_time
        True
        """
        snapshots = list(self._snapshots)
        stats = self.system.integrator.get_stats()

        if snapshots:
            t = np.array([s.time for s in snapshots])
            position = np.array([s.position.to_numpy() for s in snapshots])
            velocity = np.array([s.velocity.to_numpy() for s in snapshots])
            acceleration = np.array([s.acceleration.to_numpy() for s in snapshots])
        else:
            t = np.empty(0)
            position = velocity = acceleration = np.empty((0, 2))

        return SimulationResult(
            t=t,
            position=position,
            velocity=velocity,
            acceleration=acceleration,
            snapshots=snapshots,
            success=self._completed,
            message="Simulation completed" if self._completed else "Simulation not completed",
            nsteps=self.system.steps_taken,
            nfev=stats["total_fev"],
            integration_time=self._integration_time,
            solver=self.system.integrator.name,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(system={self.system!r}, "
            f"snapshots={len(self._snapshots)})"
        )
