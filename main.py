import os
import sys
import argparse
import logging

import numpy as np

from atomsim.constants import DEFAULT_TEMPERATURE, LOGGING_LEVEL, MAX_FRAME_DT
from atomsim.elements_data import load_elements
from atomsim.metrics import TickMetrics
from atomsim.scenarios import build_scenario, scenario_names
from atomsim.simulation import Simulation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the charged-particle bonding sandbox headless.")
    parser.add_argument("--scenario", type=str, default="water", choices=scenario_names(),
                        help="Initial condition")
    parser.add_argument("--steps", type=int, default=600, help="Number of frames")
    parser.add_argument("--frame-delta", type=float, default=MAX_FRAME_DT, help="Wall-clock seconds per frame")
    parser.add_argument("--temperature", type=float, default=DEFAULT_TEMPERATURE, help="Simulation temperature")
    parser.add_argument("--time-scale", type=float, default=1.0, help="Simulated seconds per wall-clock second")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument("--field", type=float, nargs=3, default=None, metavar=("BX", "BY", "BZ"),
                        help="Uniform magnetic field")
    parser.add_argument("--photons", type=int, default=0, help="Photons fired at the start of the run")
    parser.add_argument("--elements", type=str, default=None, help="Custom elements JSON file")
    parser.add_argument("--plot", type=str, default=None, help="Output prefix for metric plots")
    parser.add_argument("--snapshot", type=str, default=None, help="Output file for a final snapshot image")
    parser.add_argument("--log-level", type=str, default=LOGGING_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def run_simulation_cli(argv=None) -> Simulation:
    """
    Run a simulation from CLI options and print a summary.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.elements:
        load_elements(args.elements)

    initial = build_scenario(args.scenario, np.random.default_rng(args.seed), temperature=args.temperature)
    sim = Simulation(initial, seed=args.seed)
    if args.field is not None:
        sim.set_magnetic_field(args.field)
    if args.time_scale != 1.0:
        sim.set_time_scale(args.time_scale)
    for _ in range(args.photons):
        sim.fire_photon()

    sim.run(n_steps=args.steps, frame_delta=args.frame_delta)

    state = sim.snapshot()
    print(state.summary())
    print("phases:", TickMetrics.phase_counts(state))
    print("metrics:", sim.metrics.summary())

    if args.plot:
        from analysis.plots import plot_run
        out_dir = os.path.dirname(args.plot)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        paths = plot_run(sim.metrics.get_plot_data(), args.plot)
        logger.info(f"Wrote {len(paths)} plot files with prefix {args.plot}")

    if args.snapshot:
        from analysis.snapshot import render_snapshot
        path = render_snapshot(state, args.snapshot, show_field=True)
        logger.info(f"Wrote snapshot to {path}")

    return sim


if __name__ == "__main__":
    try:
        run_simulation_cli()
    except ValueError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)
