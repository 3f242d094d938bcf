"""Command-line entry point for the accuracy comparison.

Runs the sliding window update strategies against a random stream and
prints the maximum mean and standard deviation errors of each.
"""

import logging
import os
import sys
from typing import List, Optional

from meanvar.accuracy import compare_methods
from meanvar.config import reload_settings
from meanvar.models import AccuracyReport, Distribution


logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", log_format: Optional[str] = None) -> None:
    """Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string
    """
    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def format_report(report: AccuracyReport) -> str:
    """Render a report as a small text table."""
    lines = [
        f"{report.distribution.value} (window_size={report.window_size}, "
        f"samples={report.samples})",
        f"...{'method':<12}{'mean error':>14}{'stddev error':>16}",
    ]
    for error in report.errors:
        lines.append(
            f"...{error.method.value:<12}"
            f"{error.max_mean_error:>14.3e}{error.max_stddev_error:>16.3e}"
        )
    lines.append(f"...best: {report.best_method().value}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point with command-line argument parsing."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Compare numerical accuracy of sliding window mean/variance updates"
    )
    parser.add_argument(
        "--window-size",
        type=int,
        help="Sliding window size (default from MEANVAR_WINDOW_SIZE or 20)"
    )
    parser.add_argument(
        "--samples",
        type=int,
        help="Number of random values (default from MEANVAR_SAMPLE_COUNT or 100000)"
    )
    parser.add_argument(
        "--distribution",
        choices=[d.value for d in Distribution] + ["all"],
        help="Distribution of the values, or all of them"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible run"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from environment"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print reports as JSON lines"
    )

    args = parser.parse_args(argv)

    # Override log level if specified
    if args.log_level:
        os.environ["MEANVAR_LOG_LEVEL"] = args.log_level

    try:
        settings = reload_settings()
        setup_logging(settings.log_level, settings.log_format)

        window_size = args.window_size if args.window_size is not None else settings.window_size
        samples = args.samples if args.samples is not None else settings.sample_count
        seed = args.seed if args.seed is not None else settings.seed
        if args.distribution == "all":
            distributions = list(Distribution)
        elif args.distribution:
            distributions = [Distribution(args.distribution)]
        else:
            distributions = [settings.distribution]

        for distribution in distributions:
            report = compare_methods(window_size, samples, distribution, seed)
            if args.json:
                print(report.model_dump_json())
            else:
                print(format_report(report))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
