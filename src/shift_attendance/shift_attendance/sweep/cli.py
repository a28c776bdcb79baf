from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from config import get_settings_module

from ..container import build_sweep_service
from ..core.exceptions import DomainError
from ..main import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Record missed shifts for every person in the schedule.")
    parser.add_argument("--dry-run", action="store_true", help="compute what would be written, write nothing")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = dict(getattr(settings, "SWEEP_DB_CONFIG", {}) or {})
    if not db_config.get("user") or not db_config.get("password"):
        print("Missing SWEEP_DB_USER or SWEEP_DB_PASSWORD env vars.", file=sys.stderr)
        return 1

    try:
        result = build_sweep_service(settings=settings, db_config=db_config).run(dry_run=args.dry_run)
    except DomainError as e:
        logger.error("Sweep failed: %s", e)
        return 1

    if args.dry_run:
        print(f"Dry run: {result.candidates - result.already_recorded} shifts would be marked missed.")
    else:
        print(f"Swept {result.written} missed shifts.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
