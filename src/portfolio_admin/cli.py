from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from portfolio_admin.config import AdminSettings, load_settings

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "portfolio-admin.log"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-admin",
        description="Terminal admin dashboard for a personal portfolio site.",
    )
    parser.add_argument(
        "--api-base-url",
        help="Backend origin (default: $ADMIN_API_BASE_URL or http://127.0.0.1:3000)",
    )
    parser.add_argument(
        "--frontend-url",
        help="Public portfolio URL opened by 'View Portfolio' (default: $ADMIN_FRONTEND_URL)",
    )
    parser.add_argument(
        "--log-file",
        help=f"Where to write logs (default: $ADMIN_LOG_FILE or {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def configure_logging(settings: AdminSettings, level: str) -> None:
    """Log to a file; the terminal belongs to the TUI."""
    logging.basicConfig(
        filename=settings.log_file or DEFAULT_LOG_FILE,
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse flags, build settings and run the TUI.

    Returns:
        Exit code (0 for success, 2 for invalid configuration).
    """
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(
            api_base_url=args.api_base_url,
            frontend_url=args.frontend_url,
            log_file=args.log_file,
        )
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return 2

    configure_logging(settings, args.log_level)
    logger.info("Starting admin client against %s", settings.api_base_url)

    from portfolio_admin.tui import PortfolioAdminTUI

    PortfolioAdminTUI(settings).run()
    return 0


def main() -> int:
    """Entry point for the admin client."""
    try:
        return run_cli()
    except KeyboardInterrupt:
        print("\nInterrupted. Exiting.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
