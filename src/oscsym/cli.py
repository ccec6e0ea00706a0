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
Command-line entry point: simulate one oscillator, then save its outputs.

Usage
-----
    oscsym --config oscillator.yaml --ovito out/ovito.xyz --movement out/movement.m

    python -m oscsym --mass 70 --initial-x 1 --spring-constant 10000 \\
        --damping 100 --time-step 1e-4 --total-time 5 --integrator gear \\
        --plot out/comparison.html
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from oscsym.analysis.integrator_comparison import compare_integrators, reference_solution
from oscsym.config import OscillatorConfig, load_config
from oscsym.exceptions import ConfigurationError, NumericalInstabilityError
from oscsym.io.exporters import MovementExporter, OvitoExporter
from oscsym.simulation.simulation_engine import SimulationEngine
from oscsym.systems.base.numerical_integration.method_registry import list_all_methods
from oscsym.systems.builtin.damped_oscillator import DampedOscillator
from oscsym.visualization.trajectory_plotter import TrajectoryPlotter

logger = logging.getLogger(__name__)

# Flags that together replace a configuration file
_PARAMETER_FLAGS = {
    "mass": "particle_mass",
    "initial_x": "initial_offset",
    "spring_constant": "spring_constant",
    "damping": "damping_coefficient",
    "time_step": "time_step",
    "total_time": "total_time",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oscsym",
        description="Simulate a damped harmonic oscillator with a fixed-step integrator.",
    )
    parser.add_argument("--config", type=str, help="YAML (or JSON) configuration file")
    parser.add_argument("--mass", type=float, help="Particle mass (kg)")
    parser.add_argument("--initial-x", type=float, help="Initial spring offset (m)")
    parser.add_argument("--spring-constant", type=float, help="Spring constant k (kg/s^2)")
    parser.add_argument("--damping", type=float, help="Viscous damping coefficient (kg/s)")
    parser.add_argument("--time-step", type=float, help="Integration time step (s)")
    parser.add_argument("--total-time", type=float, help="Simulated duration (s)")
    parser.add_argument(
        "--integrator",
        type=str,
        help=f"Integration method, one of {list_all_methods()} (overrides the config file)",
    )
    parser.add_argument("--ovito", type=str, default="output/ovito.xyz", help="OVITO output file")
    parser.add_argument(
        "--movement", type=str, default="output/movement.m", help="Movement output file"
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Optional HTML file comparing every integrator against a reference solution",
    )
    parser.add_argument(
        "--record-initial-state",
        action="store_true",
        help="Include the pre-simulation state as the first snapshot",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def config_from_args(args: argparse.Namespace) -> OscillatorConfig:
    """
    Resolve the configuration from ``--config`` or the individual flags.

    Individual flags given alongside ``--config`` override the file.

    Raises
    ------
    ConfigurationError
        If neither a file nor every individual parameter flag is given
    """
    overrides = {
        field: getattr(args, flag)
        for flag, field in _PARAMETER_FLAGS.items()
        if getattr(args, flag) is not None
    }
    if args.integrator is not None:
        overrides["integrator"] = args.integrator

    if args.config is not None:
        config = load_config(args.config)
        return config.replace(**overrides) if overrides else config

    missing = [
        "--" + flag.replace("_", "-")
        for flag, field in _PARAMETER_FLAGS.items()
        if field not in overrides
    ]
    if missing:
        raise ConfigurationError(f"Missing parameters (or use --config): {', '.join(missing)}")
    return OscillatorConfig(**overrides)


def run(args: argparse.Namespace) -> int:
    logger.info("Hello, Oscillator!")

    config = config_from_args(args)
    system = DampedOscillator.from_config(config)
    engine = SimulationEngine(system, record_initial_state=args.record_initial_state)

    logger.info("Starting simulation...")
    snapshots = engine.run()
    logger.info("Finished simulation")

    logger.info("Saving outputs...")
    OvitoExporter(args.ovito).save(snapshots)
    MovementExporter(args.movement).save(snapshots)

    if args.plot is not None:
        results = compare_integrators(config)
        reference = reference_solution(config, next(iter(results.values()))["t"])
        fig = TrajectoryPlotter().plot_positions(results, reference=reference)
        plot_path = Path(args.plot)
        plot_path.parent.mkdir(parents=True, exist_ok=True)
        fig.write_html(str(plot_path))
        logger.info("Saved integrator comparison to %s", args.plot)

    logger.info("Finished saving outputs")
    logger.info("Bye-bye!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except NumericalInstabilityError as e:
        logger.error("Simulation diverged: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
