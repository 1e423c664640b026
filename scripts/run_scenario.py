"""CLI for running single-cab scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Optional

from simulation import CabSnapshot
from simulation.scenario import build_simulation, run_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def print_snapshot(time_step: int, snapshot: CabSnapshot) -> None:
    print(f"t={time_step:02d}  {snapshot}")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write per-tick snapshots and metrics as JSON",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print per-tick snapshots")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    try:
        simulation = build_simulation(config)
        snapshots = run_scenario(simulation, config, on_snapshot=None if args.quiet else print_snapshot)
    except (TypeError, ValueError) as exc:
        print(f"Invalid scenario {args.config}: {exc}", file=sys.stderr)
        return 1

    final_metrics = asdict(simulation.metrics.snapshot(simulation.current_time))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "ticks": simulation.current_time,
        "idle": simulation.controller.is_idle(),
        "final_state": simulation.controller.snapshot().as_dict(),
        "final_metrics": final_metrics,
        "snapshots": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Ran {results['ticks']} ticks, idle={results['idle']}")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved results to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
