"""
Warden seed: default ABAC policies for the RBAC -> ABAC migration.

Creates:
- a single wildcard policy for the super_admin role
- a low-priority read grant on user profiles for everyone
- a very low-priority default deny on delete, which role policies override

Run:
  python -m warden.seeds.seed_policies [--dry-run] [--force]

Notes:
- Idempotent: existing policies (by name) are left alone unless --force.
- Writes through PolicyDAL directly (no API needed).
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorClient

from ..dal import PolicyDAL
from ..logger import setup_logging
from ..settings import settings

log = logging.getLogger("warden.seed")


# priority 1000 is reserved for individual super admin user policies
SUPER_ADMIN_POLICIES: List[Dict[str, Any]] = [
    {
        "name": "Super Admin - Full Access",
        "description": "Grants full access to all resources and actions for super_admin role",
        "effect": "allow",
        "subject": "role:super_admin",
        "resource": "*",
        "action": "*",
        "conditions": None,
        "priority": 900,
        "enabled": True,
    },
]

WILDCARD_POLICIES: List[Dict[str, Any]] = [
    {
        "name": "Default Allow - User Profile Read",
        "description": "Allows all authenticated users to read user profile (low priority fallback)",
        "effect": "allow",
        "subject": "*",
        "resource": "user:profile",
        "action": "read",
        "conditions": None,
        "priority": 10,
        "enabled": True,
    },
    {
        "name": "Default Deny - Delete Action",
        "description": "Denies delete action for all users by default (role-based policies override)",
        "effect": "deny",
        "subject": "*",
        "resource": "*",
        "action": "delete",
        "conditions": None,
        "priority": 5,
        "enabled": True,
    },
]

ALL_POLICIES = SUPER_ADMIN_POLICIES + WILDCARD_POLICIES


async def ensure_policy(policy_dal: PolicyDAL, *, doc: Dict[str, Any], force: bool = False, dry_run: bool = False) -> str:
    """
    Returns what happened: "created" | "updated" | "skipped".
    """
    existing = await policy_dal.get_by_name(doc["name"])
    if existing is not None:
        if not force:
            log.info("policy already exists: %s (use --force to update)", doc["name"])
            return "skipped"
        if dry_run:
            log.info("[DRY RUN] would update: %s", doc["name"])
        else:
            patch = {k: v for k, v in doc.items() if k != "name"}
            await policy_dal.update(id=existing.id, patch=patch)
            log.info("updated: %s", doc["name"])
        return "updated"

    if dry_run:
        log.info("[DRY RUN] would create: %s", doc["name"])
    else:
        await policy_dal.create(doc)
        log.info("created: %s", doc["name"])
    return "created"


async def seed_policies(policy_dal: PolicyDAL, *, force: bool = False, dry_run: bool = False) -> Dict[str, int]:
    counts = {"created": 0, "updated": 0, "skipped": 0}
    for doc in ALL_POLICIES:
        outcome = await ensure_policy(policy_dal, doc=doc, force=force, dry_run=dry_run)
        counts[outcome] += 1
    return counts


async def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed default ABAC policies")
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--force", action="store_true", help="update policies that already exist")
    args = parser.parse_args(argv)

    setup_logging()
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.MONGO_DB]

    policy_dal = PolicyDAL(db)
    await policy_dal.ensure_indexes()

    counts = await seed_policies(policy_dal, force=args.force, dry_run=args.dry_run)

    client.close()
    print(
        f"Seed complete: created={counts['created']} updated={counts['updated']} skipped={counts['skipped']}"
        + (" (dry run)" if args.dry_run else "")
    )


if __name__ == "__main__":
    asyncio.run(main())
