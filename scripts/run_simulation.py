#!/usr/bin/env python3
"""
Headless Simulation Run
=======================

Standalone script to soak-test the engine without the HTTP service.

This script:
    1. Seeds the configured population
    2. Runs a fixed number of ticks as fast as possible
    3. Logs progress every N ticks
    4. Checks containment and queue bounds, reports a final summary

Usage:
    python scripts/run_simulation.py --ticks 1000 --seed 7
    python scripts/run_simulation.py --agents 300 --policy priority
"""

import argparse
import logging
import os
import sys
import time

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from event_sentinel.engine import SimulationEngine, PredictionParameters
from event_sentinel.geometry import GeofenceIndex


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def run(
    ticks: int,
    agents: int,
    seed: int,
    policy: str,
    report_interval: int,
) -> dict:
    """
    Run the soak test.

    Args:
        ticks: Number of ticks to execute
        agents: Population size
        seed: Random seed
        policy: Prediction eviction policy
        report_interval: Ticks between progress reports

    Returns:
        Final metrics dict
    """
    logger.info("=" * 60)
    logger.info("Headless Simulation Run")
    logger.info("=" * 60)
    logger.info(f"Ticks: {ticks}  Agents: {agents}  Seed: {seed}  Policy: {policy}")
    logger.info("=" * 60)

    index = GeofenceIndex.from_file()
    engine = SimulationEngine(
        index=index,
        prediction_params=PredictionParameters(eviction_policy=policy),
        agent_count=agents,
        seed=seed,
    )

    violations = 0
    max_live = 0
    corrected = 0
    start_time = time.time()

    for _ in range(ticks):
        report = engine.tick()
        corrected += report.corrected

        state = engine.state
        max_live = max(max_live, len(state.predictions))
        for agent in state.agents:
            if not agent.is_privileged and index.in_exclusion_zone(agent.position):
                violations += 1

        if report.tick % report_interval == 0:
            metrics = engine.get_metrics()
            logger.info("-" * 40)
            logger.info(f"Progress Report (tick {report.tick})")
            logger.info(f"  Phase: {metrics['phase']}")
            logger.info(f"  System tier: {metrics['system_tier']}")
            logger.info(f"  Live predictions: {metrics['prediction_queue']['live']}")
            logger.info(f"  Predictions generated: {metrics['predictions_generated']}")
            logger.info(f"  Log entries recorded: {metrics['log']['total_recorded']}")

    total_time = time.time() - start_time
    metrics = engine.get_metrics()

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total runtime: {total_time:.1f} seconds ({ticks / total_time:.0f} ticks/s)")
    logger.info(f"Predictions generated: {metrics['predictions_generated']}")
    logger.info(f"Predictions suppressed: {metrics['prediction_queue']['suppressed_count']}")
    logger.info(f"Predictions evicted: {metrics['prediction_queue']['evicted_count']}")
    logger.info(f"Containment corrections: {corrected}")
    logger.info(f"Containment violations: {violations}")
    logger.info(f"Max live predictions: {max_live}")
    logger.info("=" * 60)

    passed = violations == 0 and max_live <= engine.generator.params.max_live
    if passed:
        logger.info("✅ RUN PASSED - invariants held")
    else:
        logger.error("❌ RUN FAILED - invariant violated")

    return {
        "duration": total_time,
        "violations": violations,
        "max_live": max_live,
        "passed": passed,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Headless soak run of the venue simulation engine"
    )
    parser.add_argument("--ticks", type=int, default=500, help="Ticks to run (default: 500)")
    parser.add_argument("--agents", type=int, default=150, help="Population size (default: 150)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--policy",
        choices=["insertion", "priority"],
        default="insertion",
        help="Prediction eviction policy (default: insertion)",
    )
    parser.add_argument(
        "--report-interval",
        type=int,
        default=100,
        help="Ticks between progress reports (default: 100)",
    )

    args = parser.parse_args()

    result = run(
        ticks=args.ticks,
        agents=args.agents,
        seed=args.seed,
        policy=args.policy,
        report_interval=args.report_interval,
    )

    sys.exit(0 if result["passed"] else 1)


if __name__ == "__main__":
    main()
