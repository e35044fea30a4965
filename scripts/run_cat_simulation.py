"""
Run a Monte Carlo simulation of adaptive attempts and print a JSON summary.

Activity defaults come from the CAT_* environment (see adaptive_cat.config);
command-line options override them.

Exit codes:
    0 - Success
    2 - Simulation error
    3 - Configuration error
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

logger = logging.getLogger("cat_simulation")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate examinees taking an adaptive attempt."
    )
    parser.add_argument("--examinees", type=int, default=200, help="Number of examinees")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--ability-mean", type=float, default=0.0)
    parser.add_argument("--ability-sd", type=float, default=1.0)
    parser.add_argument(
        "--standard-error",
        type=float,
        default=None,
        help="Stopping error percent (overrides CAT_STANDARD_ERROR_PERCENT)",
    )
    parser.add_argument(
        "--max-questions",
        type=int,
        default=None,
        help="Question cap (overrides CAT_MAXIMUM_QUESTIONS)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        from adaptive_cat.config import get_settings
        from adaptive_cat.logging_config import setup_logging
        from adaptive_cat.simulation import SimulationConfig, run_simulation

        settings = get_settings()
        setup_logging(settings)

        overrides = {
            "n_examinees": args.examinees,
            "seed": args.seed,
            "ability_mean": args.ability_mean,
            "ability_sd": args.ability_sd,
        }
        if args.standard_error is not None:
            overrides["standard_error_percent"] = args.standard_error
        if args.max_questions is not None:
            overrides["maximum_questions"] = args.max_questions
        config = SimulationConfig.from_settings(settings, **overrides)
    except Exception as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 3

    try:
        result = run_simulation(config)
    except Exception as exc:
        logger.error("CAT simulation failed: %s", exc)
        return 2

    logger.info(
        "Simulation finished: mean_items=%.2f, convergence_rate=%.2f%%",
        result.mean_items,
        100 * result.convergence_rate,
    )
    print(json.dumps(result.summary(), indent=2), flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
