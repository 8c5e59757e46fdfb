"""
RBAC -> ABAC coverage audit.

Scans the RBAC permission catalogue and the ABAC policies and prints a JSON
coverage report to stdout (progress goes to the log on stderr).

Run:
  python -m warden.tools.audit_permissions           # full report
  python -m warden.tools.audit_permissions --gaps    # missing policies only
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List

from motor.motor_asyncio import AsyncIOMotorClient

from ..bootstrap import build_mongo_components
from ..logger import setup_logging
from ..services.coverage import CoverageAnalyzer
from ..settings import settings

log = logging.getLogger("warden.audit")


async def run_audit(analyzer: CoverageAnalyzer, *, gaps_only: bool = False) -> str:
    report = await (analyzer.gaps() if gaps_only else analyzer.audit())
    return report.model_dump_json(indent=2)


async def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit ABAC coverage of RBAC permissions")
    parser.add_argument("--gaps", action="store_true", help="list only the missing policies")
    args = parser.parse_args(argv)

    setup_logging()
    log.info("connecting mongo_db=%s", settings.MONGO_DB)
    client = AsyncIOMotorClient(settings.MONGO_URI)
    try:
        components = await build_mongo_components(client[settings.MONGO_DB])
        print(await run_audit(components.coverage, gaps_only=args.gaps))
    except Exception:
        log.exception("error during audit")
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
