import argparse
from dataclasses import replace
import logging

from kmzpoints.config import INSERT_ERROR_POLICIES, Settings, get_settings
from kmzpoints.errors import KmzPointsError
from kmzpoints.pipeline import PipelineRunner


logger = logging.getLogger("kmzpoints")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load KMZ placemarks into a new SQLite database")
    parser.add_argument("root_path", nargs="?", default=None, help="file or directory to scan (default: current directory)")
    parser.add_argument("--workers", type=_positive_int, default=None, help="number of extraction workers (default: CPU count)")
    parser.add_argument("--output-dir", default=None, help="directory for the generated database file")
    parser.add_argument(
        "--on-insert-error",
        choices=INSERT_ERROR_POLICIES,
        default=None,
        help="abort the run or skip the record when a point cannot be stored",
    )
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.root_path is not None:
        overrides["root_path"] = args.root_path
    if args.workers is not None:
        overrides["worker_count"] = args.workers
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.on_insert_error is not None:
        overrides["insert_error_policy"] = args.on_insert_error
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return replace(settings, **overrides)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        settings = apply_overrides(get_settings(), args)
    except ValueError as exc:
        raise SystemExit(f"invalid configuration: {exc}") from exc

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    runner = PipelineRunner(settings)
    try:
        result = runner.run()
    except KmzPointsError as exc:
        logger.error("pipeline run failed: %s", exc, extra={"error_code": exc.error_code})
        raise SystemExit(1) from exc
    except Exception:
        logger.exception("pipeline run failed unexpectedly")
        raise SystemExit(1)

    print(
        "database={database} archives={archives} extracted={extracted} failed={failed} persisted={persisted} workers={workers}".format(
            database=result.database_path,
            archives=result.total_archives,
            extracted=result.extracted_records,
            failed=result.failed_archives,
            persisted=result.persisted_points,
            workers=result.worker_count,
        )
    )


if __name__ == "__main__":
    main()
