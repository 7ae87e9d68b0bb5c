#!/usr/bin/env python3
"""Build a geocoding plan for a property catalog.

Reads catalog rows from a JSON file (a list of objects) or generates a
synthetic Costa del Sol catalog, groups properties by location and writes
the geocoding queue and cost analysis.

Usage:
    python scripts/plan_geocoding.py --count 2000 --seed 42
    python scripts/plan_geocoding.py --input catalog.json --output local/plan
    python scripts/plan_geocoding.py --input catalog.json --trigram-backend postgres --console
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from prop_match.config import PropMatchConfig
from prop_match.exceptions import ConfigurationError
from prop_match.generators import CatalogGenerator
from prop_match.ingest import records_from_rows
from prop_match.location import plan_geocoding
from prop_match.logging import get_logger, setup_logging
from prop_match.sinks import ConsoleSink, JsonFileSink

logger = get_logger("plan_geocoding")


def load_catalog(path: Path) -> list:
    """Load catalog rows from a JSON file and map them to records."""
    with open(path, encoding="utf-8") as f:
        rows = json.load(f)
    if isinstance(rows, dict):
        rows = rows.get("properties", [])
    records = list(records_from_rows(rows))
    logger.info("Loaded %d of %d catalog rows from %s", len(records), len(rows), path)
    return records


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Group a property catalog and plan geocoding requests")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON file with catalog rows (default: generate a synthetic catalog)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=1000,
        help="Number of synthetic properties when no input is given (default: 1000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for synthetic catalogs (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("local/geocoding"),
        help="Output directory for JSON files (default: local/geocoding)",
    )
    parser.add_argument(
        "--trigram-backend",
        type=str,
        default=None,
        help="Trigram backend: memory or postgres (default: from environment)",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Also print the top of the queue to stdout",
    )
    args = parser.parse_args()

    config = PropMatchConfig.from_env()
    if args.trigram_backend:
        config.grouping.trigram_backend = args.trigram_backend.lower()
    setup_logging(config.log_level, config.log_format)
    logger.info("Configuration: %s", config.to_dict())

    if args.input:
        catalog = load_catalog(args.input)
    else:
        catalog = CatalogGenerator(seed=args.seed).generate_catalog(args.count)
        logger.info("Generated %d synthetic properties", len(catalog))

    try:
        plan = plan_geocoding(catalog, config)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    sink = JsonFileSink(args.output, pretty=True)
    sink.write_batch("geocoding_queue", plan.queue)
    sink.write_batch("analysis", [plan.analysis])
    sink.close()

    if args.console:
        console = ConsoleSink(max_records=10)
        console.write_batch("geocoding_queue", plan.queue)
        console.close()

    cost = plan.analysis.cost
    print(
        f"\n{plan.analysis.total_properties} properties -> {plan.analysis.total_groups} geocoding requests "
        f"(${cost.original_cost:.2f} -> ${cost.optimized_cost:.2f}, {cost.percentage:.1f}% saved)"
    )
    for note in plan.notes:
        print(f"Note: {note}")


if __name__ == "__main__":
    main()
