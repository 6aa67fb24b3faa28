"""Command-line entry points for running and plotting simulations."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ecosim.core.simulator import Simulator
from ecosim.data.logger import SimulationLogger
from ecosim.visualization.plotting import plot_population

LOGGER = logging.getLogger(__name__)


def _run_single(config_path: str, db_path: Path, steps: int | None, show: bool, strict: bool) -> str:
    with SimulationLogger(db_path) as logger:
        simulator = Simulator(config_path, logger=logger, strict=strict)
        logging.getLogger().setLevel(simulator.logging_config["level"])
        try:
            simulator.run(steps)
            if show:
                frame = simulator.render_text()
                if frame is None:
                    LOGGER.warning("Simulation '%s' has no text rendering", simulator.simulation_name)
                else:
                    print(frame)
        finally:
            simulator.close()
        run_id = simulator.run_id
    if run_id is None:
        raise RuntimeError("Expected run id when logger is configured.")
    return run_id


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ecosim", description="Wa-Tor predator/prey simulation.")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="run a configured simulation and log its population")
    run_cmd.add_argument("--config", default="configs/wator.yaml")
    run_cmd.add_argument("--db", default="simulation_metrics.db")
    run_cmd.add_argument("--steps", type=int, default=None, help="override run.steps")
    run_cmd.add_argument("--show", action="store_true", help="print the final grid")
    run_cmd.add_argument("--non-strict", action="store_true", help="warn on unknown params instead of failing")

    plot_cmd = sub.add_parser("plot", help="plot population curves of a logged run")
    plot_cmd.add_argument("--run", dest="run_id", default=None, help="run id (latest run if omitted)")
    plot_cmd.add_argument("--db", default="simulation_metrics.db")
    plot_cmd.add_argument("--out", default="artifacts/population.png")

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "run":
        if args.steps is not None and args.steps < 0:
            parser.error("--steps must be non-negative")
        run_id = _run_single(args.config, Path(args.db), args.steps, args.show, strict=not args.non_strict)
        print(run_id)
        return 0

    if args.command == "plot":
        run_id = args.run_id
        if run_id is None:
            with SimulationLogger(args.db) as logger:
                run_id = logger.latest_run_id()
            if run_id is None:
                parser.error(f"no runs logged in {args.db}")
        path = plot_population(args.db, run_id, args.out)
        LOGGER.info("Wrote population plot for run %s", run_id)
        print(path)
        return 0

    return 1


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
