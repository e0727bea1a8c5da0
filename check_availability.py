#!/usr/bin/env python3
"""Scan every configured booking link and write availability.json."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from automation.availability.checker import AvailabilityChecker
from automation.browser.session import ScanBrowser
from automation.debug.artifacts import DebugArtifactWriter
from automation.shared.scan_contracts import ScanConfig, ScanResult
from infrastructure.results import write_results
from infrastructure.settings import AppSettings, ConfigError, load_scan_config, load_settings
from logging_config import get_logger, setup_logging

logger = get_logger("check_availability")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the earliest day with enough bookable slots for each configured link."
    )
    parser.add_argument("--config", help="Links file (defaults to SCAN_CONFIG_FILE or links.json)")
    parser.add_argument("--output", help="Result file (defaults to OUTPUT_FILE or availability.json)")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--debug-artifacts",
        action="store_true",
        help="Save screenshots and frame maps for links without a result",
    )
    return parser.parse_args(argv)


async def run_scan(config: ScanConfig, settings: AppSettings, *, headless: bool, save_artifacts: bool) -> List[ScanResult]:
    """Open one browser session and scan every link through a single page."""

    writer = None
    if save_artifacts:
        writer = DebugArtifactWriter(Path(settings.data_directory) / "debug")

    checker = AvailabilityChecker(
        config,
        artifact_writer=writer,
        navigation_timeout_ms=settings.navigation_timeout_ms,
        post_load_delay_ms=settings.post_load_delay_ms,
    )

    async with ScanBrowser(config.timezone, headless=headless) as browser:
        page = await browser.new_page()
        return await checker.check_links(page)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Invalid environment settings: {exc}", file=sys.stderr)
        return 2
    setup_logging(production_mode=settings.production_mode)

    config_path = args.config or settings.config_file
    output_path = args.output or settings.output_file

    try:
        config = load_scan_config(config_path, timezone_override=settings.timezone_override)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info(
        "Scanning %s link(s): minSlots=%s maxMonthsToScan=%s timezone=%s",
        len(config.links),
        config.min_slots,
        config.max_months_to_scan,
        config.timezone,
    )

    try:
        results = asyncio.run(
            run_scan(
                config,
                settings,
                headless=settings.headless and not args.headed,
                save_artifacts=settings.save_debug_artifacts or args.debug_artifacts,
            )
        )
        write_results(results, output_path)
    except Exception:
        logger.exception("Availability scan failed")
        return 1

    for result in results:
        if result.earliest_date:
            summary = f"{result.earliest_date} (+{result.days_from_today}d, {result.slot_count_observed} slots)"
        else:
            summary = result.error or result.note
        logger.debug("%s: %s", result.name, summary)
        print(f"{result.name}: {summary}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
