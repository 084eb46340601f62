#!/usr/bin/env python3
"""
CLI entry point for the churn scoring pipeline.

Usage:
    # Train, evaluate and score the held-out customers
    python -m pipeline.run configs/default.yaml

    # Then score a new customer file and export the ranking
    python -m pipeline.run configs/default.yaml --batch-file new.csv --export ranked.csv

    # List all past runs
    python -m pipeline.run --list
"""

import argparse
import logging
import sys
from pathlib import Path

from .runner import PipelineRunner


def main():
    parser = argparse.ArgumentParser(
        description="Churn risk scoring pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m pipeline.run configs/default.yaml
  python -m pipeline.run configs/default.yaml --batch-file new.csv --export ranked.csv
  python -m pipeline.run --list
        """,
    )

    parser.add_argument(
        "configs",
        nargs="*",
        help="Path(s) to YAML config file(s)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List all past runs",
    )
    parser.add_argument(
        "--batch-file",
        help="Customer CSV to score with the model from the last config",
    )
    parser.add_argument(
        "--export",
        help="Write the ranked batch predictions to this CSV",
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Stop if any run errors",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every training epoch",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    runner = PipelineRunner()

    if args.list:
        df = runner.list_runs()
        if df.empty:
            print("No runs found.")
        else:
            print(df.to_string(index=False))
        return 0

    if not args.configs:
        parser.print_help()
        return 1

    results = []
    for config_path in args.configs:
        path = Path(config_path)
        if not path.exists():
            print(f"Config not found: {config_path}")
            if args.stop_on_failure:
                return 1
            continue

        try:
            print(f"\n{'=' * 60}")
            print(f"Running: {path.name}")
            print("=" * 60)

            result = runner.run_from_yaml(path.resolve())
            results.append(result)

            print(result.summary())
            for insight in result.insights:
                print(f"  * {insight['title']}: {insight['text']}")

            if result.passed:
                print(f"\nArtifacts saved to: artifacts/{result.run_id}/")

        except Exception as e:
            print(f"ERROR: {e}")
            if args.stop_on_failure:
                return 1

    if args.batch_file:
        if not results:
            print("ERROR: no successful run, cannot score batch file")
            return 1
        try:
            batch = runner.predict_file(args.batch_file, export_path=args.export)
        except Exception as e:
            print(f"ERROR: {e}")
            return 1

        counts = batch.tier_counts()
        print(f"\nScored {len(batch)} customers: "
              f"{counts['high']} high, {counts['medium']} medium, {counts['low']} low")
        for rank, prediction in enumerate(batch.top(10), start=1):
            record = prediction.source_record
            print(f"  {rank:>3}. {record.customer_id or 'N/A':<12} "
                  f"{prediction.probability:>7.2%}  {prediction.risk_level}")
        if args.export:
            print(f"\nExported to: {args.export}")

    if len(results) > 1:
        print(f"\n{'=' * 60}")
        print("BATCH SUMMARY")
        print("=" * 60)
        passed = sum(1 for r in results if r.passed)
        print(f"Total: {len(results)}, Passed: {passed}, Failed: {len(results) - passed}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
