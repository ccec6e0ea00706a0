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
Trajectory Plotter - Integrator Comparison Plots

Interactive Plotly figures for runs of the oscillator under one or more
integration methods.

Main Class
----------
TrajectoryPlotter
    plot_positions() : x position vs time, one trace per method
    plot_energy() : mechanical energy vs time, one trace per method
    plot_phase() : velocity vs position for a single run

Usage
-----
>>> results = compare_integrators(config)
>>> plotter = TrajectoryPlotter()
>>> fig = plotter.plot_positions(results, reference=reference_solution(config, t))
>>> fig.write_html("positions.html")
>>>
>>> fig = plotter.plot_energy(results, spring_constant=config.spring_constant)
>>> fig = plotter.plot_phase(results["GEAR"])
"""

from typing import Dict, List, Optional

import numpy as np
import plotly.graph_objects as go

from oscsym.types.trajectories import SimulationResult

# Plotly default colors
_PLOTLY_COLORS = [
    "#636EFA",
    "#EF553B",
    "#00CC96",
    "#AB63FA",
    "#FFA15A",
    "#19D3F3",
    "#FF6692",
    "#B6E880",
    "#FF97FF",
    "#FECB52",
]


class TrajectoryPlotter:
    """
    Comparison plots for oscillator runs.

    Parameters
    ----------
    width, height : int
        Figure size in pixels

    Examples
    --------
    >>> plotter = TrajectoryPlotter()
    >>> fig = plotter.plot_positions({"VERLET": result})
    >>> fig.show()
    """

    def __init__(self, width: int = 900, height: int = 500):
        self.width = width
        self.height = height

    # =========================================================================
    # Main Plotting Methods
    # =========================================================================

    def plot_positions(
        self,
        results: Dict[str, SimulationResult],
        reference: Optional[SimulationResult] = None,
        title: str = "Position vs Time",
    ) -> go.Figure:
        """
        Plot x position over time for each run.

        Parameters
        ----------
        results : Dict[str, SimulationResult]
            Method name → result
        reference : Optional[SimulationResult]
            Reference trajectory drawn as a dashed black line

        Returns
        -------
        go.Figure
        """
        fig = go.Figure()
        colors = self._get_colors(len(results))

        for color, (name, result) in zip(colors, results.items()):
            fig.add_trace(
                go.Scatter(
                    x=result["t"],
                    y=result["position"][:, 0],
                    mode="lines",
                    name=name,
                    line=dict(color=color, width=2),
                )
            )

        if reference is not None:
            fig.add_trace(
                go.Scatter(
                    x=reference["t"],
                    y=reference["position"][:, 0],
                    mode="lines",
                    name="Reference",
                    line=dict(color="black", width=1, dash="dash"),
                )
            )

        self._apply_layout(fig, title, "Time (s)", "Position x (m)")
        return fig

    def plot_energy(
        self,
        results: Dict[str, SimulationResult],
        spring_constant: float,
        title: str = "Mechanical Energy vs Time",
    ) -> go.Figure:
        """
        Plot mechanical energy ½m|v|² + ½k|x|² over time for each run.

        Parameters
        ----------
        results : Dict[str, SimulationResult]
            Results carrying 'snapshots' (as produced by the engine)
        spring_constant : float
            k used for the potential term
        """
        fig = go.Figure()
        colors = self._get_colors(len(results))

        for color, (name, result) in zip(colors, results.items()):
            fig.add_trace(
                go.Scatter(
                    x=result["t"],
                    y=self._energy(result, spring_constant),
                    mode="lines",
                    name=name,
                    line=dict(color=color, width=2),
                )
            )

        self._apply_layout(fig, title, "Time (s)", "Energy (J)")
        return fig

    def plot_phase(
        self,
        result: SimulationResult,
        title: str = "Phase Portrait",
        show_start_end: bool = True,
    ) -> go.Figure:
        """Plot velocity against position along the oscillation axis."""
        x = result["position"][:, 0]
        v = result["velocity"][:, 0]

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=x,
                y=v,
                mode="lines",
                name=result.get("solver", "Trajectory"),
                line=dict(color=_PLOTLY_COLORS[0], width=2),
            )
        )

        if show_start_end and len(x) > 0:
            fig.add_trace(
                go.Scatter(
                    x=[x[0]],
                    y=[v[0]],
                    mode="markers",
                    name="Start",
                    marker=dict(color="green", size=10, symbol="circle"),
                )
            )
            fig.add_trace(
                go.Scatter(
                    x=[x[-1]],
                    y=[v[-1]],
                    mode="markers",
                    name="End",
                    marker=dict(color="red", size=10, symbol="square"),
                )
            )

        self._apply_layout(fig, title, "Position x (m)", "Velocity vx (m/s)")
        return fig

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _energy(result: SimulationResult, spring_constant: float) -> np.ndarray:
        snapshots = result.get("snapshots")
        if snapshots:
            masses = np.array([s.mass for s in snapshots])
        else:
            masses = np.ones(len(result["t"]))
        v_sq = np.sum(result["velocity"] ** 2, axis=1)
        x_sq = np.sum(result["position"] ** 2, axis=1)
        return 0.5 * masses * v_sq + 0.5 * spring_constant * x_sq

    def _apply_layout(self, fig: go.Figure, title: str, xaxis_title: str, yaxis_title: str):
        fig.update_layout(
            title=title,
            xaxis_title=xaxis_title,
            yaxis_title=yaxis_title,
            template="plotly_white",
            width=self.width,
            height=self.height,
            showlegend=True,
        )

    @staticmethod
    def _get_colors(n_colors: int) -> List[str]:
        """Cycle the Plotly default palette to n_colors entries."""
        return [_PLOTLY_COLORS[i % len(_PLOTLY_COLORS)] for i in range(n_colors)]
