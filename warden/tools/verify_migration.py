"""
RBAC -> ABAC migration verification.

Evaluates every RBAC permission for every user under both models and prints
the discrepancies as JSON. Exits 1 when any decision differs.

Run:
  python -m warden.tools.verify_migration                # all users
  python -m warden.tools.verify_migration --user <ID>    # a single user
  python -m warden.tools.verify_migration --verbose      # include the summary line per user
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
from ..schemas.coverage import VerificationReport
from ..services.migration import MigrationVerifier
from ..settings import settings

log = logging.getLogger("warden.verify")


async def run_verification(verifier: MigrationVerifier, *, user_id: str | None = None, verbose: bool = False) -> VerificationReport:
    report = await verifier.verify(user_id)
    if verbose:
        for m in report.mismatches:
            log.info(
                "mismatch user=%s permission=%s rbac=%s abac=%s",
                m.username,
                m.permission,
                m.rbac_result,
                m.abac_result,
            )
        log.info("checked=%d matching=%d mismatching=%d", report.total_permissions_checked, report.matching, report.mismatching)
    return report


async def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare RBAC and ABAC decisions")
    parser.add_argument("--user", dest="user_id", default=None, help="verify a single user id")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    setup_logging()
    client = AsyncIOMotorClient(settings.MONGO_URI)
    try:
        components = await build_mongo_components(client[settings.MONGO_DB])
        report = await run_verification(components.verifier, user_id=args.user_id, verbose=args.verbose)
        print(report.model_dump_json(indent=2))
    except Exception:
        log.exception("error during verification")
        return 1
    finally:
        client.close()
    return 1 if report.mismatching else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
