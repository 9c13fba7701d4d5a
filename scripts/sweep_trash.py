"""Cron entry point reclaiming trashed media whose retention window ran out."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime

from dotenv import load_dotenv

from src.mediashelf.config import load_config
from src.mediashelf.dependencies import build_services
from src.mediashelf.logging import configure_logging
from src.mediashelf.media.media_cleanup import sweep_expired_trash


@dataclass(slots=True)
class SweepSummary:
    expired: int
    reclaimed: int
    dry_run: bool


def perform_sweep(*, dry_run: bool, reference_time: datetime | None = None) -> SweepSummary:
    """Run one reclamation pass and return summary counters."""
    services = build_services(load_config())
    media_service = services.media_service
    now = reference_time or media_service.now()

    expired = media_service.list_reclaimable(now)
    if dry_run:
        return SweepSummary(expired=len(expired), reclaimed=0, dry_run=True)

    reclaimed = sweep_expired_trash(media_service, reference_time=now)
    return SweepSummary(expired=len(expired), reclaimed=reclaimed, dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Permanently delete media whose trash retention expired.")
    parser.add_argument("--dry-run", action="store_true", help="Only report how many items are due.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    load_dotenv(".env", override=False)
    configure_logging()
    try:
        summary = perform_sweep(dry_run=args.dry_run)
    except Exception as exc:
        print(f"sweep failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"sweep dry-run, expired={summary.expired}", file=sys.stdout)
    else:
        print(f"sweep done, expired={summary.expired}, reclaimed={summary.reclaimed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
