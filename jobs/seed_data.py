#!/usr/bin/env python3
"""
Job that clears and repopulates the crypto, weather and news tables.

Uso:
python jobs/seed_data.py [--once]   # one cycle
python jobs/seed_data.py --interval 900   # one cycle every 15 minutes

Requires DATABASE_URL, OPENWEATHER_API_KEY and NEWSAPI_API_KEY.
"""

import asyncio
import argparse
import sys
from pathlib import Path

# Adicionar projeto ao path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aggregator.core.config import get_settings
from aggregator.core.http import close_async_client
from aggregator.core.logging import configure_logging
from aggregator.db.session import check_db, create_all, dispose_engine, get_sessionmaker, init_engine
from aggregator.services.seed_service import SeedReport, seed_all
from aggregator.services.upstream_client import UpstreamClient
from datetime import datetime


def print_report(report: SeedReport) -> None:
    if report.aborted == "configuration":
        print(f"❌ Missing settings: {', '.join(report.missing)}")
        return
    print(f"   Crypto rows: {report.crypto}")
    print(f"   Weather cities: {report.weather}")
    print(f"   News articles: {report.news}")
    if report.aborted:
        print(f"❌ Cycle aborted during {report.aborted}: {report.error}")
    else:
        print("🎉 Seed cycle complete!")


async def run_cycle(settings) -> SeedReport:
    print(f"\n🔄 Seeding at {datetime.now().isoformat()}")
    async with get_sessionmaker()() as session:
        report = await seed_all(session, UpstreamClient(settings), settings)
    print_report(report)
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed crypto, weather and news tables")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true",
                      help="Run a single cycle and exit (default)")
    mode.add_argument("--interval", type=float, default=None,
                      help="Repeat every N seconds instead of running once")
    return parser


async def main() -> int:
    args = build_parser().parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    missing = settings.missing_seed_settings()
    if missing:
        print(f"❌ Missing settings: {', '.join(missing)}")
        return 1

    init_engine(settings.database_url)
    print("🔍 Checking database connection...")
    if not await check_db():
        print("❌ Database unavailable")
        return 1
    await create_all()
    print("✅ Database OK")

    try:
        report = await run_cycle(settings)
        while args.interval:
            await asyncio.sleep(args.interval)
            report = await run_cycle(settings)
    finally:
        await close_async_client()
        await dispose_engine()
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
