"""One-shot export of a dashboard domain to CSV or PDF."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from pulseboard.ingest import Domain
from pulseboard.ingest.client import DashboardClient
from pulseboard.ingest.resolver import DataSourceResolver
from pulseboard.logic.export_csv import EXPORT_COLUMNS, EXPORT_FORMATS, export_data, preset_options

logger = logging.getLogger(__name__)

PRESET_DOMAINS = {
    "campaigns": Domain.CAMPAIGNS,
    "revenue": Domain.REVENUE,
    "overview": Domain.OVERVIEW_ALL,
}

TITLES = {
    "campaigns": "Campaign Performance Report",
    "revenue": "Revenue Report",
    "overview": "Overview Metrics Report",
}


async def run_export(
    name: str,
    fmt: str = "csv",
    *,
    client: DashboardClient | None = None,
    output_dir: Path | None = None,
) -> Path:
    load_dotenv()
    if name not in EXPORT_COLUMNS:
        raise ValueError(f"Unknown export {name!r}")
    domain = PRESET_DOMAINS[name]
    client = client or DashboardClient()
    resolver = DataSourceResolver(client)
    try:
        records = await resolver.resolve(domain)
    finally:
        await client.close()
    if resolver.cache.fallback_active(domain):
        logger.warning("Exporting demo data for %s", name)
    options = preset_options(name, records, title=TITLES[name])
    return export_data(fmt, options, output_dir)


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    parser = argparse.ArgumentParser(description="Export dashboard data")
    parser.add_argument("name", choices=sorted(EXPORT_COLUMNS))
    parser.add_argument("--format", dest="fmt", choices=EXPORT_FORMATS, default="csv")
    parser.add_argument("--output-dir", type=Path, default=None)
    args = parser.parse_args()
    path = asyncio.run(run_export(args.name, args.fmt, output_dir=args.output_dir))
    print("Wrote", path)


if __name__ == "__main__":
    main()
