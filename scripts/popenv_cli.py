#!/usr/bin/env python3
"""
popenv CLI

Usage modes:
- Default run: build an environment from YAML or a preset, step it for a
  number of trials, print a JSON summary or write it to a file
- Dry run: build and describe the outputs without stepping
- Utility: list bundled sample configs and presets, show version
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from glob import glob
from pathlib import Path
from typing import Any, Dict, List

# Ensure we can import popenv_core from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from popenv_core import SamplingError  # noqa: E402
from popenv_core.compiler import compile_from_file  # noqa: E402
from popenv_core.metrics import trial_statistics  # noqa: E402
from popenv_core.presets import PRESETS, build_preset  # noqa: E402


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Generate population-coded trials and dump a summary",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Utilities / meta
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    p.add_argument("--list-configs", action="store_true", help="List bundled sample YAML configs and presets, then exit")

    # Primary input
    p.add_argument("yaml", nargs="?", help="Path to YAML environment config (e.g., scripts/allo_ego.yaml)")
    p.add_argument("--preset", type=str, default="", help="Use a named preset instead of a YAML file")
    p.add_argument("--size", type=int, default=10, help="Grid size for presets")

    # Execution
    p.add_argument("--trials", type=int, default=100, help="Number of trials to step")
    p.add_argument("--trials-per-epoch", type=int, default=0, help="Trials per epoch for presets (0 disables rollover)")
    p.add_argument("--seed", type=int, default=None, help="Seed for the environment's random generator")
    p.add_argument("--run", type=int, default=0, help="Run index passed to init")
    p.add_argument("--dry-run", action="store_true", help="Build only; do not step the environment")
    p.add_argument("--states", action="store_true", help="Include the final output buffers in the summary")
    p.add_argument("--out", type=str, default="", help="Optional output JSON file path")

    return p.parse_args(argv)


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def find_sample_configs() -> List[str]:
    here = Path(__file__).resolve()
    return sorted(glob(str(here.parent / "*.yaml")))


def build_env(args: argparse.Namespace):
    if args.preset:
        logging.info("Building preset %s (size=%d)", args.preset, args.size)
        return build_preset(args.preset, args.size, args.trials_per_epoch, seed=args.seed)
    logging.info("Compiling environment from %s", args.yaml)
    env = compile_from_file(args.yaml)
    if args.seed is not None:
        env.seed(args.seed)
    return env


def write_json(payload: Dict[str, Any], out: str) -> None:
    if out:
        with open(out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
    else:
        print(json.dumps(payload, indent=2))


def main(argv: List[str] | None = None) -> int:
    from popenv_core import __version__ as popenv_version

    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.version:
        print(popenv_version)
        return 0

    if args.list_configs:
        print(json.dumps({"configs": find_sample_configs(), "presets": sorted(PRESETS)}, indent=2))
        return 0

    if not args.yaml and not args.preset:
        print("error: missing YAML path or --preset (try --list-configs)", file=sys.stderr)
        return 2

    try:
        env = build_env(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    env.init(args.run)

    outputs = [{"name": name, "shape": list(shape)} for name, shape in env.states()]
    if args.dry_run:
        write_json({"name": env.name, "size": env.config.size, "outputs": outputs}, args.out)
        return 0

    try:
        stats = trial_statistics(env, args.trials)
    except SamplingError as exc:
        logging.error("Sampling failed after %d attempts", exc.attempts)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    snap = env.snapshot()
    summary: Dict[str, Any] = {
        "name": env.name,
        "outputs": outputs,
        "counters": snap["counters"],
        "last_trial": snap["sample"],
        "stats": stats,
    }
    if args.states:
        summary["states"] = snap["states"]

    write_json(summary, args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
