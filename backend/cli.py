"""
Workout Migration CLI - drive the migration engine over JSON files.

Usage:
    python -m backend migrate <input> [-o out] [--format yaml]   - Migrate legacy records
    python -m backend analyze <input>                           - Report formats and issues
    python -m backend rollback <input> --to <format>            - Roll unified records back
    python -m backend benchmark [--batch-sizes 10 25 50]        - Run the benchmark harness

Input is a JSON array of records, or an object with a ``workouts`` array.
Use ``-`` to read from stdin.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import sentry_sdk
import yaml

from application.use_cases import (
    BatchMigrateUseCase,
    BatchMigrationOptions,
    RollbackWorkoutsUseCase,
    analyze_workouts,
    build_migration_report,
)
from backend.benchmark import BenchmarkOptions, run_migration_benchmark, run_quick_migration_test
from backend.settings import Settings, get_settings
from domain.models import WorkoutFormat
from domain.samples import migration_scenarios

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "yaml")

# Share of transactions and profiles sent to Sentry in production
PRODUCTION_SAMPLE_RATE = 0.1


class InputError(Exception):
    """Raised when the input file cannot be turned into a list of records."""


def _init_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sample_rate = PRODUCTION_SAMPLE_RATE if settings.is_production else 1.0
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=sample_rate,
            profiles_sample_rate=sample_rate,
            enable_tracing=True,
        )
        logger.info("Sentry initialized for workout migration CLI")


def load_records(source: str) -> List[Any]:
    """Read records from a JSON file (or stdin for ``-``)."""
    try:
        if source == "-":
            data = json.load(sys.stdin)
        else:
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
    except FileNotFoundError:
        raise InputError(f"File not found: {source}")
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON: {e}")

    if isinstance(data, dict) and isinstance(data.get("workouts"), list):
        return data["workouts"]
    if isinstance(data, list):
        return data
    raise InputError("Expected a JSON array of workouts or an object with a 'workouts' array")


def render(payload: Any, output_format: str) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, default_flow_style=False, allow_unicode=True)
    return json.dumps(payload, indent=2, default=str)


def write_output(payload: Any, args: argparse.Namespace) -> None:
    text = render(payload, args.format)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(text)


def cmd_migrate(args: argparse.Namespace, settings: Settings) -> None:
    """Migrate every record in the input file."""
    records = load_records(args.input)
    options = BatchMigrationOptions(
        batch_size=args.batch_size or settings.migration_batch_size,
        validate_before_migration=not args.no_validate,
        stop_on_error=args.stop_on_error,
        preserve_original=True,
        dry_run=args.dry_run,
    )
    use_case = BatchMigrateUseCase.from_settings(settings)

    started_at = datetime.now(timezone.utc)
    result = asyncio.run(use_case.execute(records, options))
    ended_at = datetime.now(timezone.utc)

    payload = result.to_dict()
    if args.report:
        payload["report"] = build_migration_report(result.results, started_at, ended_at).to_dict()
    write_output(payload, args)

    if result.summary.failed:
        sys.exit(1)


def cmd_analyze(args: argparse.Namespace, settings: Settings) -> None:
    """Report what a migration of the input would face."""
    records = load_records(args.input)
    write_output(analyze_workouts(records).to_dict(), args)


def cmd_rollback(args: argparse.Namespace, settings: Settings) -> None:
    """Roll unified records back to a legacy format."""
    records = load_records(args.input)
    use_case = RollbackWorkoutsUseCase.from_settings(settings)
    result = asyncio.run(use_case.execute(records, args.to))
    write_output(result.to_dict(), args)

    if not result.success:
        sys.exit(1)


def cmd_benchmark(args: argparse.Namespace, settings: Settings) -> None:
    """Run the quick test, or time the large scenario across batch sizes."""
    if args.batch_sizes:
        workouts = next(s for s in migration_scenarios() if s.name == "Large Dataset").workouts
        options = BenchmarkOptions(
            iterations=args.iterations,
            warmup_runs=args.warmup_runs,
            batch_sizes=args.batch_sizes,
        )
        runs = asyncio.run(run_migration_benchmark(workouts, options))
        payload = {
            str(size): [
                {
                    "scenario": r.scenario,
                    "duration": r.duration_ms,
                    "throughput": r.throughput,
                    "success": r.success,
                }
                for r in results
            ]
            for size, results in runs.items()
        }
    else:
        payload = asyncio.run(run_quick_migration_test()).to_dict()
    write_output(payload, args)


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output", help="Output file path (default: stdout)")
    parser.add_argument(
        "--format", choices=OUTPUT_FORMATS, default="json", help="Output format (default: json)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Workout Migration CLI - migrate legacy workouts to the unified schema",
        prog="python -m backend",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Migrate legacy records")
    migrate_parser.add_argument("input", help="Input JSON file path, or - for stdin")
    migrate_parser.add_argument("--batch-size", type=int, help="Records per batch")
    migrate_parser.add_argument("--no-validate", action="store_true", help="Skip pre-migration validation")
    migrate_parser.add_argument("--stop-on-error", action="store_true", help="Halt at the first failure")
    migrate_parser.add_argument("--dry-run", action="store_true", help="Mark results as not to be persisted")
    migrate_parser.add_argument("--report", action="store_true", help="Include a migration report")
    _add_output_arguments(migrate_parser)
    migrate_parser.set_defaults(func=cmd_migrate)

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Report formats and potential issues")
    analyze_parser.add_argument("input", help="Input JSON file path, or - for stdin")
    _add_output_arguments(analyze_parser)
    analyze_parser.set_defaults(func=cmd_analyze)

    # rollback command
    rollback_parser = subparsers.add_parser("rollback", help="Roll unified records back")
    rollback_parser.add_argument("input", help="Input JSON file path, or - for stdin")
    rollback_parser.add_argument(
        "--to",
        required=True,
        choices=[f.value for f in WorkoutFormat.legacy()],
        help="Target legacy format",
    )
    _add_output_arguments(rollback_parser)
    rollback_parser.set_defaults(func=cmd_rollback)

    # benchmark command
    benchmark_parser = subparsers.add_parser("benchmark", help="Run the benchmark harness")
    benchmark_parser.add_argument(
        "--batch-sizes", type=int, nargs="*", help="Time the large dataset at these batch sizes"
    )
    benchmark_parser.add_argument("--iterations", type=int, default=3)
    benchmark_parser.add_argument("--warmup-runs", type=int, default=1)
    _add_output_arguments(benchmark_parser)
    benchmark_parser.set_defaults(func=cmd_benchmark)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the migration CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    _init_logging(settings)
    _init_sentry(settings)

    try:
        args.func(args, settings)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
